import json
import os
import threading
import time

import pytest
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError

from content import ContentStore, describe_backend_error, merge_with_defaults
from defaults import INITIAL_CONTENT, SECTIONS, initial_content
from schemas import PortfolioContent


def assert_complete(doc):
    for section in SECTIONS:
        assert section in doc
    for key in INITIAL_CONTENT["profile"]:
        assert key in doc["profile"]
    for key in INITIAL_CONTENT["profile"]["contact"]:
        assert key in doc["profile"]["contact"]
    for key in ("colors", "fonts", "font_sizes", "element_styles"):
        for field in INITIAL_CONTENT["theme"][key]:
            assert field in doc["theme"][key]
    for element in INITIAL_CONTENT["theme"]["element_styles"]:
        assert set(doc["theme"]["element_styles"][element]) >= {"font", "color"}
    assert isinstance(doc["profile"]["bio"], list)
    assert all(isinstance(p, str) for p in doc["profile"]["bio"])
    for key in ("albums", "writings", "testimonials"):
        assert isinstance(doc[key], list)


# Merge

@pytest.mark.parametrize("incoming", [None, {}, [], "oops", 42])
def test_merge_non_documents_give_defaults(incoming):
    doc = merge_with_defaults(incoming)
    assert doc == INITIAL_CONTENT
    assert_complete(doc)


def test_merge_returns_copy():
    doc = merge_with_defaults(None)
    doc["albums"].clear()
    assert INITIAL_CONTENT["albums"]


def test_merge_partial_profile():
    doc = merge_with_defaults({"profile": {"name": "Maria", "contact": {"email": "m@example.com"}}})
    assert doc["profile"]["name"] == "Maria"
    assert doc["profile"]["role"] == INITIAL_CONTENT["profile"]["role"]
    assert doc["profile"]["contact"]["email"] == "m@example.com"
    assert doc["profile"]["contact"]["instagram"] == INITIAL_CONTENT["profile"]["contact"]["instagram"]
    assert_complete(doc)


def test_merge_bio_string_becomes_list():
    doc = merge_with_defaults({"profile": {"bio": "Um parágrafo."}})
    assert doc["profile"]["bio"] == ["Um parágrafo."]


def test_merge_bio_null_uses_default():
    doc = merge_with_defaults({"profile": {"bio": None}})
    assert doc["profile"]["bio"] == INITIAL_CONTENT["profile"]["bio"]


def test_merge_bio_list_items_become_strings():
    doc = merge_with_defaults({"profile": {"bio": ["a", None, 3]}})
    assert doc["profile"]["bio"] == ["a", "3"]


def test_merge_theme_field_by_field():
    doc = merge_with_defaults({"theme": {
        "colors": {"accent": "#ff0000"},
        "element_styles": {"title": {"color": "#000000"}},
        "font_sizes": None,
    }})
    theme = doc["theme"]
    assert theme["colors"]["accent"] == "#ff0000"
    assert theme["colors"]["background"] == INITIAL_CONTENT["theme"]["colors"]["background"]
    assert theme["element_styles"]["title"] == {
        "font": INITIAL_CONTENT["theme"]["element_styles"]["title"]["font"],
        "color": "#000000",
    }
    assert theme["font_sizes"] == INITIAL_CONTENT["theme"]["font_sizes"]
    assert theme["hero_image"] == INITIAL_CONTENT["theme"]["hero_image"]


def test_merge_lists():
    doc = merge_with_defaults({
        "albums": [{"id": "a", "title": "A", "photos": None}, "junk"],
        "writings": [],
        "testimonials": None,
    })
    assert doc["albums"] == [{"id": "a", "title": "A", "photos": []}]
    assert doc["writings"] == []
    assert doc["testimonials"] == INITIAL_CONTENT["testimonials"]


def test_merge_keeps_unknown_keys_and_malformed_sections():
    doc = merge_with_defaults({"extra": {"x": 1}, "home": "not an object", "profile": ["bad"]})
    assert doc["extra"] == {"x": 1}
    assert doc["home"] == INITIAL_CONTENT["home"]
    assert doc["profile"] == INITIAL_CONTENT["profile"]
    assert_complete(doc)


# Loading

def test_load_existing_row(store, collection, cache_path):
    collection.docs.append({"_id": "main", "content": {"profile": {"name": "Remote"}}})
    doc = store.load()
    assert store.loaded
    assert doc["profile"]["name"] == "Remote"
    assert_complete(doc)
    assert store.status()["source"] == "remote"
    with open(cache_path, encoding="utf-8") as f:
        assert json.load(f)["profile"]["name"] == "Remote"


def test_load_missing_row_initializes_remote(store, collection):
    doc = store.load()
    assert doc == INITIAL_CONTENT
    assert collection.docs[0]["_id"] == "main"
    assert collection.docs[0]["content"] == INITIAL_CONTENT


def test_load_missing_row_insert_denied_uses_cache(store, collection, cache_path):
    os.makedirs(os.path.dirname(cache_path))
    with open(cache_path, "w", encoding="utf-8") as f:
        json.dump({"home": {"hero_title": "Cached"}}, f)
    collection.fail_on["insert_one"] = OperationFailure("not authorized", code=13)
    doc = store.load()
    assert doc["home"]["hero_title"] == "Cached"
    assert store.status()["source"] == "cache"


def test_load_read_error_falls_back_to_cache(store, collection, cache_path):
    os.makedirs(os.path.dirname(cache_path))
    with open(cache_path, "w", encoding="utf-8") as f:
        json.dump({"profile": {"name": "Cached", "bio": "one"}}, f)
    collection.fail_on["find_one"] = ServerSelectionTimeoutError("timed out")
    doc = store.load()
    assert doc["profile"]["name"] == "Cached"
    assert doc["profile"]["bio"] == ["one"]


def test_load_read_error_with_corrupt_cache_uses_defaults(store, collection, cache_path):
    os.makedirs(os.path.dirname(cache_path))
    with open(cache_path, "w", encoding="utf-8") as f:
        f.write("{not json")
    collection.fail_on["find_one"] = ServerSelectionTimeoutError("timed out")
    assert store.load() == INITIAL_CONTENT
    assert store.status()["source"] == "defaults"
    assert store.loaded


def test_load_row_with_empty_content_is_remote(store, collection, cache_path):
    os.makedirs(os.path.dirname(cache_path))
    with open(cache_path, "w", encoding="utf-8") as f:
        json.dump({"home": {"hero_title": "Cache antigo"}}, f)
    collection.docs.append({"_id": "main", "content": {}})
    doc = store.load()
    assert doc["home"]["hero_title"] == INITIAL_CONTENT["home"]["hero_title"]
    assert "insert_one" not in collection.calls
    assert store.status()["source"] == "remote"


def test_concurrent_first_loads_initialize_once(store, collection):
    collection.delay_on["find_one"] = 0.1
    threads = [threading.Thread(target=store.ensure_loaded) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert collection.calls.count("find_one") == 1
    assert collection.calls.count("insert_one") == 1
    assert store.ensure_loaded() == INITIAL_CONTENT


def test_load_without_database(cache_path):
    s = ContentStore(collection=None, cache_path=cache_path)
    assert s.load() == INITIAL_CONTENT


# Writes

def test_apply_is_visible_before_persist(store, collection):
    store.load()
    store.apply("home", {**INITIAL_CONTENT["home"], "hero_title": "Novo"})
    assert store.content["home"]["hero_title"] == "Novo"
    assert collection.docs[0]["content"]["home"]["hero_title"] == INITIAL_CONTENT["home"]["hero_title"]
    assert store.status()["state"] == "saving"

    assert store.persist()
    assert collection.docs[0]["content"]["home"]["hero_title"] == "Novo"
    status = store.status()
    assert status["state"] == "success"
    assert status["last_saved_at"]


def test_apply_merges_partial_section(store):
    store.load()
    doc = store.apply("theme", {"colors": {"accent": "#123456"}})
    assert doc["theme"]["colors"]["accent"] == "#123456"
    assert doc["theme"]["fonts"] == INITIAL_CONTENT["theme"]["fonts"]


def test_apply_writes_cache(store, cache_path):
    store.load()
    store.apply("testimonials", [])
    with open(cache_path, encoding="utf-8") as f:
        assert json.load(f)["testimonials"] == []


def test_apply_unknown_section(store):
    with pytest.raises(KeyError):
        store.apply("nope", {})


def test_failed_persist_keeps_local_state(store, collection):
    store.load()
    collection.fail_on["replace_one"] = OperationFailure("not authorized on db", code=13)
    assert not store.update("writings", [])
    assert store.content["writings"] == []
    assert collection.docs[0]["content"]["writings"] == INITIAL_CONTENT["writings"]
    status = store.status()
    assert status["state"] == "error"
    assert "permission" in status["message"].lower()

    del collection.fail_on["replace_one"]
    assert store.update("testimonials", [])
    assert collection.docs[0]["content"]["writings"] == []


def test_last_write_wins(store, collection):
    store.load()
    first = store.apply("home", {"hero_title": "A"})
    store.apply("home", {"hero_title": "B"})
    store.persist()
    store.persist(first)
    assert collection.docs[0]["content"]["home"]["hero_title"] == "A"


def test_overlapping_persists_end_with_newest(store, collection):
    store.load()
    store.apply("home", {"hero_title": "A"})
    collection.delay_on["replace_one"] = 0.3
    slow = threading.Thread(target=store.persist)
    slow.start()
    time.sleep(0.1)
    store.apply("home", {"hero_title": "B"})
    del collection.delay_on["replace_one"]
    assert store.persist()
    slow.join()
    assert collection.docs[0]["content"]["home"]["hero_title"] == "B"
    assert store.content["home"]["hero_title"] == "B"


def test_persist_without_database(cache_path):
    s = ContentStore(collection=None, cache_path=cache_path)
    s.load()
    s.apply("home", {"hero_title": "Offline"})
    assert not s.persist()
    assert s.content["home"]["hero_title"] == "Offline"
    assert s.status()["state"] == "error"


def test_reset(store, collection):
    store.load()
    store.update("albums", [])
    assert store.reset()
    assert store.content == initial_content()
    assert collection.docs[0]["content"]["albums"] == INITIAL_CONTENT["albums"]


def test_describe_backend_error():
    assert describe_backend_error(OperationFailure("x", code=13))[0] == "permission"
    assert describe_backend_error(OperationFailure("ns not found", code=26))[0] == "missing"
    assert describe_backend_error(ServerSelectionTimeoutError("x"))[0] == "unavailable"
    assert describe_backend_error(OperationFailure("boom", code=2))[0] == "error"


@pytest.mark.parametrize("incoming", [
    None,
    {"profile": {"bio": "só um"}, "albums": [{"id": "a", "photos": None}]},
    {"theme": {"colors": None, "element_styles": {"text": {}}}, "home": []},
])
def test_merged_document_validates(incoming):
    PortfolioContent.model_validate(merge_with_defaults(incoming))
