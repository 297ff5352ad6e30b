import threading

import pytest

from app.storage.kv import CorruptRecordError, JsonFileStore, MemoryStore, validate_key
from app.storage.locks import KeyLocks


@pytest.fixture(params=["file", "memory"])
def store(request, tmp_path):
    if request.param == "file":
        return JsonFileStore(tmp_path)
    return MemoryStore()


def test_absent_key_returns_none(store):
    assert store.get("missing") is None
    assert store.delete("missing") is False


def test_put_get_delete(store):
    store.put("0xabc", {"name": "Alice", "followers": []})
    assert store.get("0xabc") == {"name": "Alice", "followers": []}
    assert store.delete("0xabc") is True
    assert store.get("0xabc") is None


def test_list_by_prefix(store):
    for key in ("2-0xb", "1-0xa", "10-0xa"):
        store.put(key, {"k": key})
    assert store.list() == ["1-0xa", "10-0xa", "2-0xb"]
    assert store.list("1") == ["1-0xa", "10-0xa"]


@pytest.mark.parametrize("key", ["", "../escape", "a/b", "a\\b", ".hidden"])
def test_invalid_keys_rejected(key):
    with pytest.raises(ValueError):
        validate_key(key)


def test_corrupt_file_is_distinguished_from_absent(tmp_path):
    store = JsonFileStore(tmp_path)
    (tmp_path / "bad.json").write_text("{oops")
    (tmp_path / "list.json").write_text("[1, 2]")

    with pytest.raises(CorruptRecordError) as exc:
        store.get("bad")
    assert exc.value.key == "bad"
    with pytest.raises(CorruptRecordError):
        store.get("list")


def test_file_store_ignores_temp_and_foreign_files(tmp_path):
    store = JsonFileStore(tmp_path)
    store.put("1-0xa", {"id": 1})
    (tmp_path / ".tmp-abc.json").write_text("{}")
    (tmp_path / "notes.txt").write_text("x")
    assert store.list() == ["1-0xa"]


def test_file_store_writes_utf8(tmp_path):
    store = JsonFileStore(tmp_path)
    store.put("0xabc", {"name": "João"})
    assert "João" in (tmp_path / "0xabc.json").read_text(encoding="utf-8")


def test_key_locks_serialize_updates(tmp_path):
    store = JsonFileStore(tmp_path)
    locks = KeyLocks()
    store.put("counter", {"n": 0})

    def bump():
        for _ in range(50):
            with locks.hold("counter"):
                record = store.get("counter")
                record["n"] += 1
                store.put("counter", record)

    threads = [threading.Thread(target=bump) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.get("counter") == {"n": 200}


def test_key_locks_accept_duplicate_keys():
    locks = KeyLocks()
    with locks.hold("a", "a", "b"):
        pass
    with locks.hold("b", "a"):
        pass


def test_key_locks_forget_released_keys():
    locks = KeyLocks()
    with locks.hold("profile:0xa", "profile:0xb"):
        assert len(locks) == 2
    with locks.hold("post:1-0xa"):
        pass
    assert len(locks) == 0
