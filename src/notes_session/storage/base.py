"""
Key-value store abstraction.

'KeyValueStore' is the leaf dependency of the session layer: an async mapping
from string keys to JSON-serializable values. Every call is atomic on its own,
but nothing spans several keys, so two consecutive 'put' calls can be
separated by a crash.

Error policy is split by direction. 'put' and 'remove' raise 'StorageError'
when a value cannot be serialized or written. 'get' never raises: unreadable
or corrupt entries are logged and reported as absent ('None'), so callers
cannot tell "never set" apart from "unreadable".

Concrete implementations: 'InMemoryKeyValueStore', 'JsonFileKeyValueStore'.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

from notes_session.exceptions import StorageError


class KeyValueStore(ABC):
    """Abstract async store for JSON-serializable values."""

    @abstractmethod
    async def put(self, key: str, value: Any) -> None:
        """Serialize 'value' and store it under 'key', replacing any previous value."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Return the value stored under 'key', or None if absent or unreadable."""

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Delete 'key'. Removing a missing key is a no-op."""

    @staticmethod
    def serialize(key: str, value: Any) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(key, f"Value is not JSON-serializable: {exc}") from exc
