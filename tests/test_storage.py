import json

import pytest

from notes_session.exceptions import StorageError
from notes_session.storage.json_file import JsonFileKeyValueStore


@pytest.fixture(params=["memory", "file"])
def store(request, memory_store, file_store):
    return memory_store if request.param == "memory" else file_store


async def test_get_missing_key_is_absent(store):
    assert await store.get("users") is None


async def test_put_then_get_returns_equal_value(store):
    value = [{"id": "1", "username": "a", "email": "a@x.com", "password": "p"}]
    await store.put("users", value)
    assert await store.get("users") == value


async def test_put_overwrites_previous_value(store):
    await store.put("loggedInUser", {"id": "1"})
    await store.put("loggedInUser", {"id": "2"})
    assert await store.get("loggedInUser") == {"id": "2"}


async def test_remove_deletes_key_and_is_idempotent(store):
    await store.put("loggedInUser", {"id": "1"})
    await store.remove("loggedInUser")
    await store.remove("loggedInUser")
    assert await store.get("loggedInUser") is None


async def test_unserializable_value_raises_storage_error_and_keeps_old_value(store):
    await store.put("users", [])
    with pytest.raises(StorageError):
        await store.put("users", {"bad": object()})
    assert await store.get("users") == []


async def test_returned_value_is_a_copy(store):
    await store.put("users", [{"id": "1"}])
    value = await store.get("users")
    value.append({"id": "2"})
    assert await store.get("users") == [{"id": "1"}]


async def test_file_store_survives_new_instance(tmp_path):
    await JsonFileKeyValueStore(tmp_path).put("loggedInUser", {"id": "abc"})
    assert await JsonFileKeyValueStore(tmp_path).get("loggedInUser") == {"id": "abc"}


async def test_file_store_writes_one_json_document_per_key(tmp_path):
    store = JsonFileKeyValueStore(tmp_path)
    await store.put("users", [{"id": "1"}])
    assert json.loads((tmp_path / "users.json").read_text()) == [{"id": "1"}]
    assert [p.name for p in tmp_path.iterdir()] == ["users.json"]


async def test_file_store_corrupt_file_reads_as_absent(tmp_path):
    (tmp_path / "users.json").write_text("[{not json", encoding="utf-8")
    assert await JsonFileKeyValueStore(tmp_path).get("users") is None


async def test_file_store_rejects_invalid_keys(tmp_path):
    store = JsonFileKeyValueStore(tmp_path)
    with pytest.raises(StorageError):
        await store.put("../escape", 1)
    with pytest.raises(StorageError):
        await store.remove("")
    assert await store.get(".hidden") is None


async def test_file_store_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("x")
    store = JsonFileKeyValueStore(blocker / "store")
    with pytest.raises(StorageError):
        await store.put("users", [])


async def test_file_store_undecodable_file_reads_as_absent(tmp_path):
    (tmp_path / "users.json").write_bytes(b"\xff\xfe\x00garbage")
    assert await JsonFileKeyValueStore(tmp_path).get("users") is None
