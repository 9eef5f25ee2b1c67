"""
Persistent key-value storage for the session layer.

    from notes_session.storage import JsonFileKeyValueStore

    store = JsonFileKeyValueStore("~/.notes_session")
    await store.put("users", [])
"""

from notes_session.storage.base import KeyValueStore
from notes_session.storage.in_memory import InMemoryKeyValueStore
from notes_session.storage.json_file import JsonFileKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
]
