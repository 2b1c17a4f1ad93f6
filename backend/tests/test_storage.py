"""Tests for the key-value blob stores."""
import pytest

from cyberwatch.errors import StorageError
from cyberwatch.services.storage import InMemoryStorage, JsonFileStorage


@pytest.fixture(params=["memory", "file"])
def kv(request, tmp_path):
    if request.param == "memory":
        return InMemoryStorage()
    return JsonFileStorage(tmp_path / "nested" / "storage.json")


class TestKeyValueStorage:

    def test_missing_key_reads_none(self, kv):
        assert kv.read("nope") is None

    def test_write_read_remove(self, kv):
        kv.write("k", {"a": 1, "b": [True, None]})
        assert kv.read("k") == {"a": 1, "b": [True, None]}
        kv.remove("k")
        assert kv.read("k") is None

    def test_remove_missing_is_noop(self, kv):
        kv.remove("never-written")
        assert kv.read("never-written") is None


class TestJsonFileStorage:

    def test_survives_new_instance(self, tmp_path):
        path = tmp_path / "storage.json"
        JsonFileStorage(path).write("k", {"v": 1})
        assert JsonFileStorage(path).read("k") == {"v": 1}

    def test_corrupt_file_raises_on_read_and_is_replaced_on_write(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("garbage")
        store = JsonFileStorage(path)
        with pytest.raises(StorageError):
            store.read("k")
        store.write("k", {"v": 2})
        assert store.read("k") == {"v": 2}

    def test_non_object_blob_raises(self):
        store = InMemoryStorage({"k": "[1, 2, 3]"})
        with pytest.raises(StorageError):
            store.read("k")
