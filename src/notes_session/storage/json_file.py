"""
File-backed key-value store.

Each key is persisted as '<directory>/<key>.json'. A write goes to a temporary
file in the same directory and is then moved over the target with
'os.replace', so a reader sees either the old value or the new one, never a
half-written file. Blocking file operations run in a worker thread via
'asyncio.to_thread' so the event loop is only suspended, not blocked.
"""

import asyncio
import json
import os
import re
import tempfile
from pathlib import Path
from typing import Any

from loguru import logger

from notes_session.exceptions import StorageError
from notes_session.storage.base import KeyValueStore

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_\-][A-Za-z0-9_.\-]*$")


class JsonFileKeyValueStore(KeyValueStore):
    """
    Durable store keeping one JSON document per key.

    Attributes:
        directory: Folder holding the '<key>.json' files. Created on first write.
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageError(key, "Invalid key")
        return self.directory / f"{key}.json"

    async def put(self, key: str, value: Any) -> None:
        path = self.path_for(key)
        text = self.serialize(key, value)
        try:
            await asyncio.to_thread(self._write_atomic, path, text)
        except OSError as exc:
            raise StorageError(key, f"Failed to write {path}: {exc}") from exc
        logger.debug(f"Stored key {key!r} at {path}")

    async def get(self, key: str) -> Any | None:
        try:
            path = self.path_for(key)
        except StorageError as exc:
            logger.warning(f"Treating {key!r} as absent: {exc}")
            return None
        try:
            text = await asyncio.to_thread(self._read, path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(f"Failed to read {path}: {exc}")
            return None
        if text is None:
            return None
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            logger.error(f"Corrupt JSON in {path}: {exc}")
            return None

    async def remove(self, key: str) -> None:
        path = self.path_for(key)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as exc:
            raise StorageError(key, f"Failed to delete {path}: {exc}") from exc
        logger.debug(f"Removed key {key!r}")

    def _write_atomic(self, path: Path, text: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{path.stem}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
