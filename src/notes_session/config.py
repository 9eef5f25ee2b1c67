"""
Environment configuration.

Settings are read from environment variables once, at the edge of the
application, and passed down explicitly:

    NOTES_SESSION_STORAGE_DIR        - directory of the JSON file store
                                       (default: ./.notes_session)
    NOTES_SESSION_CREDENTIALS        - 'plain' (default) or 'pbkdf2'
    NOTES_SESSION_PBKDF2_ITERATIONS  - PBKDF2 rounds when 'pbkdf2' is selected
    NOTES_SESSION_LOG_LEVEL          - loguru level (default: INFO)
"""

import os
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from notes_session.auth.credentials import (
    DEFAULT_PBKDF2_ITERATIONS,
    CredentialPolicy,
    PlainTextCredentials,
    SaltedHashCredentials,
)
from notes_session.auth.manager import SessionAuthManager
from notes_session.exceptions import ConfigurationError
from notes_session.storage.json_file import JsonFileKeyValueStore

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


def default_storage_dir() -> Path:
    return Path.cwd() / ".notes_session"


class SessionSettings(BaseModel):
    storage_dir: Path = Field(default_factory=default_storage_dir)
    credentials: Literal["plain", "pbkdf2"] = "plain"
    pbkdf2_iterations: int = Field(default=DEFAULT_PBKDF2_ITERATIONS, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SessionSettings":
        """Build settings from 'environ' (defaults to 'os.environ'); unset variables keep their defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for field, var in (
            ("storage_dir", "NOTES_SESSION_STORAGE_DIR"),
            ("credentials", "NOTES_SESSION_CREDENTIALS"),
            ("pbkdf2_iterations", "NOTES_SESSION_PBKDF2_ITERATIONS"),
            ("log_level", "NOTES_SESSION_LOG_LEVEL"),
        ):
            value = env.get(var)
            if value:
                values[field] = value.strip()

        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()
            if values["log_level"] not in _LOG_LEVELS:
                raise ConfigurationError(f"NOTES_SESSION_LOG_LEVEL must be one of {sorted(_LOG_LEVELS)}")
        if "credentials" in values:
            values["credentials"] = values["credentials"].lower()

        try:
            settings = cls.model_validate(values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid session settings: {exc}") from exc
        settings.storage_dir = settings.storage_dir.expanduser()
        return settings

    def build_credentials(self) -> CredentialPolicy:
        if self.credentials == "pbkdf2":
            return SaltedHashCredentials(iterations=self.pbkdf2_iterations)
        return PlainTextCredentials()


def build_manager(settings: SessionSettings) -> SessionAuthManager:
    """Wire the file store and the configured credential policy into a 'SessionAuthManager'."""
    logger.info(f"Session store: {settings.storage_dir} (credentials={settings.credentials})")
    return SessionAuthManager(
        store=JsonFileKeyValueStore(settings.storage_dir),
        credentials=settings.build_credentials(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a stderr sink at 'level'."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())
