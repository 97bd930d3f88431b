import pytest


def test_set_get_returns_a_copy(store):
    store.set("users", "k1", {"name": "Alice", "tags": ["a"]})
    document = store.get("users", "k1")
    document["tags"].append("b")
    assert store.get("users", "k1") == {"name": "Alice", "tags": ["a"]}


def test_get_missing_is_none(store):
    assert store.get("users", "nope") is None


def test_update_merges_and_never_creates(store):
    store.set("users", "k1", {"name": "Alice", "city": "Pune"})
    assert store.update("users", "k1", {"city": "Mumbai"}) is True
    assert store.get("users", "k1") == {"name": "Alice", "city": "Mumbai"}

    assert store.update("users", "missing", {"city": "Mumbai"}) is False
    assert store.get("users", "missing") is None


def test_delete_reports_whether_something_was_removed(store):
    store.set("likes", "k1", {"userId": "u"})
    assert store.delete("likes", "k1") is True
    assert store.delete("likes", "k1") is False


def test_scan_and_query_return_key_order(store):
    for key in ("c", "a", "b"):
        store.set("posts", key, {"id": key, "schoolId": "s1" if key != "b" else "s2"})

    assert [d["id"] for d in store.scan("posts")] == ["a", "b", "c"]
    assert [d["id"] for d in store.query("posts", {"schoolId": "s1"})] == ["a", "c"]
    assert [d["id"] for d in store.query("posts", {"schoolId": "s1"}, limit=1)] == ["a"]
    assert store.scan("empty") == []


def test_increment_floors_at_zero_and_skips_missing(store):
    store.set("posts", "p1", {"likes": 1})
    assert store.increment("posts", "p1", "likes", +1) == 2
    assert store.increment("posts", "p1", "likes", -5) == 0
    assert store.increment("posts", "p1", "views", +1) == 1
    assert store.increment("posts", "missing", "likes", +1) is None


def test_transaction_rolls_back_on_error(store):
    store.set("users", "k1", {"followersCount": 0})
    with pytest.raises(RuntimeError):
        with store.transaction():
            store.increment("users", "k1", "followersCount", +1)
            with store.transaction():
                store.set("follows", "f1", {"userId": "u"})
            raise RuntimeError("boom")

    assert store.get("users", "k1") == {"followersCount": 0}
    assert store.get("follows", "f1") is None


def test_transaction_commits_on_success(store):
    with store.transaction():
        store.set("follows", "f1", {"userId": "u"})
    assert store.get("follows", "f1") == {"userId": "u"}
