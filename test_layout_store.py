import json

from logtail.layout.layout_store import JsonLayoutStore, MemoryLayoutStore


def test_memory_store():
    store = MemoryLayoutStore()
    assert store.load("file_receiver") is None
    store.save("file_receiver", "<layout/>")
    assert store.load("file_receiver") == "<layout/>"


def test_json_store_keeps_other_keys(tmp_path):
    path = tmp_path / "nested" / "layouts.json"
    store = JsonLayoutStore(str(path))
    store.save("log4net_file_receiver", "<a/>")
    store.save("nlog_dir_receiver", "<b/>")

    assert JsonLayoutStore(str(path)).load("log4net_file_receiver") == "<a/>"
    with open(path, "r", encoding="utf-8") as f:
        assert json.load(f) == {"log4net_file_receiver": "<a/>", "nlog_dir_receiver": "<b/>"}
    assert [p.name for p in path.parent.iterdir()] == ["layouts.json"]


def test_json_store_broken_file(tmp_path):
    path = tmp_path / "layouts.json"
    path.write_text("{not json", encoding="utf-8")
    store = JsonLayoutStore(str(path))
    assert store.load("syslog_file_receiver") is None
    store.save("syslog_file_receiver", "x")
    assert store.load("syslog_file_receiver") == "x"
