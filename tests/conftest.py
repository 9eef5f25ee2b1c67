from typing import Any

import pytest

from notes_session.auth.manager import SessionAuthManager
from notes_session.exceptions import StorageError
from notes_session.flow.controller import SessionFlowController
from notes_session.storage.in_memory import InMemoryKeyValueStore
from notes_session.storage.json_file import JsonFileKeyValueStore


class FaultyKeyValueStore(InMemoryKeyValueStore):
    """In-memory store that fails on demand for the keys listed in its 'fail_*' sets."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_put: set[str] = set()
        self.fail_remove: set[str] = set()
        self.fail_get: set[str] = set()

    async def put(self, key: str, value: Any) -> None:
        if key in self.fail_put:
            raise StorageError(key, "disk full")
        await super().put(key, value)

    async def get(self, key: str) -> Any | None:
        if key in self.fail_get:
            raise RuntimeError("backend unavailable")
        return await super().get(key)

    async def remove(self, key: str) -> None:
        if key in self.fail_remove:
            raise StorageError(key, "permission denied")
        await super().remove(key)


@pytest.fixture
def memory_store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def file_store(tmp_path) -> JsonFileKeyValueStore:
    return JsonFileKeyValueStore(tmp_path / "store")


@pytest.fixture
def faulty_store() -> FaultyKeyValueStore:
    return FaultyKeyValueStore()


@pytest.fixture
def manager(memory_store) -> SessionAuthManager:
    return SessionAuthManager(memory_store)


@pytest.fixture
def controller(manager) -> SessionFlowController:
    return SessionFlowController(manager)
