"""
In-memory key-value store.

Values are kept as JSON text, not as live objects, so they round-trip exactly
like the file-backed store: mutating a value returned by 'get' never changes
what is stored. Useful for tests and for sessions that should not outlive the
process.
"""

import json
from typing import Any

from loguru import logger

from notes_session.storage.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def put(self, key: str, value: Any) -> None:
        self._data[key] = self.serialize(key, value)

    async def get(self, key: str) -> Any | None:
        raw = self._data.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning(f"Ignoring unreadable value for key {key!r}: {exc}")
            return None

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)
