import json

import pytest

from emo.errors import InvalidInput, IOFailure, SerializationError
from emo.memo import MemoStore, is_index
from emo.resolve import resolve_with_store


def read_config(config_home):
    return json.loads((config_home / "emo" / "config.json").read_text(encoding="utf-8"))


def test_missing_file_is_empty_default(config_home):
    store = MemoStore.load()
    assert store.mappings == {}
    assert store.model is None
    assert not (config_home / "emo" / "config.json").exists()


def test_save_literal_emoji_persists(config_home, catalog):
    store = MemoStore.load()
    assert store.save_memo("deploy", "🚀", catalog) == "🚀"
    assert read_config(config_home) == {"mappings": {"deploy": "🚀"}, "model": None}
    assert MemoStore.load().lookup("deploy") == "🚀"


def test_save_keeps_only_first_character(config_home, catalog):
    store = MemoStore.load()
    assert store.save_memo("party", "🎉🎊", catalog) == "🎉"


def test_save_by_index_uses_search_results(config_home, catalog):
    store = MemoStore.load()
    assert store.save_memo("fire", "2", catalog) == "🚒"
    assert MemoStore.load().lookup("fire") == "🚒"


@pytest.mark.parametrize("value", ["0", "9"])
def test_save_by_index_out_of_range(config_home, catalog, value):
    store = MemoStore.load()
    with pytest.raises(InvalidInput):
        store.save_memo("fire", value, catalog)
    assert not (config_home / "emo" / "config.json").exists()


@pytest.mark.parametrize("term, value", [("", "🚀"), ("deploy", "")])
def test_save_rejects_empty_input(config_home, catalog, term, value):
    with pytest.raises(InvalidInput):
        MemoStore.load().save_memo(term, value, catalog)


def test_erase_reports_whether_a_mapping_existed(write_config, config_home):
    write_config({"mappings": {"test": "🧪", "rocket": "🚀"}, "model": None})
    store = MemoStore.load()
    assert store.erase("test") is True
    assert "test" not in read_config(config_home)["mappings"]
    assert store.erase("test") is False


def test_erase_missing_term_does_not_write(config_home):
    assert MemoStore.load().erase("nothing") is False
    assert not (config_home / "emo" / "config.json").exists()


def test_save_then_erase_round_trip(config_home, catalog):
    store = MemoStore.load()
    store.save_memo("fire", "🚀", catalog)
    assert [char for char, _ in resolve_with_store(catalog, MemoStore.load(), "fire", 1)] == ["🚀"]
    store.erase("fire")
    assert [char for char, _ in resolve_with_store(catalog, MemoStore.load(), "fire", 1)] == ["🔥"]


def test_list_mappings_is_sorted(write_config):
    write_config({"mappings": {"test": "🧪", "rocket": "🚀"}, "model": "llama-3.2-1b"})
    store = MemoStore.load()
    assert store.list_mappings() == [("rocket", "🚀"), ("test", "🧪")]
    assert store.model == "llama-3.2-1b"


def test_set_model_keeps_mappings(write_config, config_home):
    write_config({"mappings": {"test": "🧪"}, "model": None})
    MemoStore.load().set_model("qwen2.5-0.5b-instruct")
    assert read_config(config_home) == {"mappings": {"test": "🧪"}, "model": "qwen2.5-0.5b-instruct"}


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        "[]",
        '{"mappings": {"fire": "🔥🔥"}}',
        '{"mappings": [], "model": null}',
        '{"mappings": {}, "model": 3}',
    ],
)
def test_malformed_config_is_a_serialization_error(config_home, raw):
    path = config_home / "emo" / "config.json"
    path.parent.mkdir(parents=True)
    path.write_text(raw, encoding="utf-8")
    with pytest.raises(SerializationError):
        MemoStore.load()


def test_write_failure_is_an_io_failure(tmp_path, catalog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    store = MemoStore(path=blocker / "config.json")
    with pytest.raises(IOFailure):
        store.save_memo("deploy", "🚀", catalog)


def test_is_index():
    assert is_index("2")
    assert not is_index("🚀")
    assert not is_index("-1")
    assert not is_index("²")
