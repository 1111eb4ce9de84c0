"""
Tests for persisted level override stores.

Covers:
- key naming scheme
- MemoryLevelStore get/set/delete
- JsonFileLevelStore persistence, sharing across instances, bad files
"""

import json

from logtrail.store import JsonFileLevelStore, MemoryLevelStore, level_key


class TestLevelKey:
    def test_format(self):
        assert level_key("logtrail", "svc") == "logtrail:svc:level"


class TestMemoryLevelStore:
    def test_missing_key_is_none(self):
        assert MemoryLevelStore().get("logtrail:x:level") is None

    def test_set_get(self):
        store = MemoryLevelStore()
        store.set("logtrail:x:level", 3)
        assert store.get("logtrail:x:level") == 3

    def test_delete(self):
        store = MemoryLevelStore({"k": 2})
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None

    def test_keys(self):
        store = MemoryLevelStore({"b": 1, "a": 2})
        assert store.keys() == ["a", "b"]


class TestJsonFileLevelStore:
    def test_missing_file_reads_empty(self, tmp_path):
        store = JsonFileLevelStore(tmp_path / "session.json")
        assert store.get("k") is None
        assert store.keys() == []

    def test_writes_json(self, tmp_path):
        path = tmp_path / "nested" / "session.json"
        store = JsonFileLevelStore(path)
        store.set("logtrail:svc:level", 4)
        assert json.loads(path.read_text()) == {"logtrail:svc:level": 4}

    def test_shared_between_instances(self, tmp_path):
        path = tmp_path / "session.json"
        JsonFileLevelStore(path).set("k", 2)
        assert JsonFileLevelStore(path).get("k") == 2

    def test_corrupt_file_reads_empty(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text("{not json")
        store = JsonFileLevelStore(path)
        assert store.get("k") is None
        store.set("k", 1)
        assert store.get("k") == 1

    def test_non_numeric_values_ignored(self, tmp_path):
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"a": "x", "b": True, "c": 3, "d": 2.5}))
        store = JsonFileLevelStore(path)
        assert store.keys() == ["c", "d"]

    def test_fractional_level_kept(self, tmp_path):
        store = JsonFileLevelStore(tmp_path / "session.json")
        store.set("k", 2.5)
        assert store.get("k") == 2.5

    def test_delete(self, tmp_path):
        store = JsonFileLevelStore(tmp_path / "session.json")
        store.set("k", 2)
        store.delete("k")
        assert store.get("k") is None
