import json

from crm_dashboard.storage import JsonFileStore, MemoryStore, get_store


def test_memory_store_roundtrip():
    store = MemoryStore()
    store.set("tokens", "{}")

    assert store.get("tokens") == "{}"
    store.remove("tokens")
    assert store.get("tokens") is None
    store.remove("tokens")  # missing key is fine


def test_json_file_store_persists_between_instances(tmp_path):
    path = tmp_path / "session.json"
    JsonFileStore(path).set("user", '{"id": 1}')

    assert JsonFileStore(path).get("user") == '{"id": 1}'
    assert json.loads(path.read_text()) == {"user": '{"id": 1}'}


def test_json_file_store_missing_file_is_empty(tmp_path):
    store = JsonFileStore(tmp_path / "nested" / "session.json")

    assert store.get("tokens") is None
    store.remove("tokens")
    assert not (tmp_path / "nested" / "session.json").exists()


def test_json_file_store_unreadable_file_is_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    store = JsonFileStore(path)

    assert store.get("tokens") is None
    store.set("tokens", "x")
    assert store.get("tokens") == "x"


def test_json_file_store_remove(tmp_path):
    store = JsonFileStore(tmp_path / "session.json")
    store.set("tokens", "a")
    store.set("user", "b")
    store.remove("tokens")

    assert store.get("tokens") is None
    assert store.get("user") == "b"


def test_get_store_picks_implementation(tmp_path):
    assert isinstance(get_store(None), MemoryStore)
    assert isinstance(get_store(str(tmp_path / "s.json")), JsonFileStore)
