import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from health_assistant.domain.chat_log import ChatLog
from health_assistant.domain.exceptions import StoreError
from health_assistant.infrastructure.storage.json_store import JsonChatLogStore, new_log_id

BASE = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


def _log(session_id, minutes, user_id=None, message="hi"):
    return ChatLog(
        id=new_log_id(),
        session_id=session_id,
        user_id=user_id,
        user_message=message,
        bot_response="hello",
        created_at=BASE + timedelta(minutes=minutes),
        intent="greeting",
        confidence=0.8,
    )


@pytest.fixture
def store():
    with tempfile.TemporaryDirectory() as tmp:
        yield JsonChatLogStore(root=tmp)


def test_add_and_get(store):
    log = _log("s1", 0, user_id="u1", message="I have a fever")
    store.add(log)
    loaded = store.get(log.id)
    assert loaded.user_message == "I have a fever"
    assert loaded.created_at == log.created_at
    assert loaded.confidence == 0.8


def test_get_missing_raises_not_found(store):
    with pytest.raises(StoreError) as exc:
        store.get("log-missing")
    assert exc.value.code == "CHAT_LOG_NOT_FOUND"
    assert exc.value.http_status == 404


def test_list_is_newest_first_and_paginated(store):
    for minute in range(5):
        store.add(_log("s1", minute, message=f"m{minute}"))
    store.add(_log("s2", 10, message="other"))

    first = store.list(page=1, limit=2)
    assert [log.user_message for log in first.items] == ["other", "m4"]
    assert first.total == 6
    assert first.total_pages == 3

    only_s1 = store.list(page=2, limit=2, session_id="s1")
    assert [log.user_message for log in only_s1.items] == ["m2", "m1"]
    assert only_s1.total == 5


def test_session_history_is_oldest_first(store):
    store.add(_log("s1", 3, message="later"))
    store.add(_log("s1", 1, message="earlier"))
    assert [log.user_message for log in store.list_by_session("s1")] == ["earlier", "later"]


def test_user_history_and_sessions(store):
    store.add(_log("s1", 0, user_id="u1", message="a"))
    store.add(_log("s1", 1, user_id="u1", message="b"))
    store.add(_log("s2", 2, user_id="u1", message="c"))
    store.add(_log("s3", 3, user_id="u2", message="d"))

    assert [log.user_message for log in store.list_by_user("u1", limit=2)] == ["c", "b"]
    assert store.count_sessions("u1") == 2
    assert store.count_sessions("nobody") == 0
    assert store.has_session("s1", user_id="u1")
    assert not store.has_session("s3", user_id="u1")
    assert store.has_session("s3")


def test_delete_rewrites_file(store):
    keep, drop = _log("s1", 0), _log("s1", 1)
    store.add(keep)
    store.add(drop)
    store.delete(drop.id)
    assert [log.id for log in store.list_by_session("s1")] == [keep.id]
    with pytest.raises(StoreError):
        store.delete(drop.id)


def test_torn_line_is_skipped(store):
    store.add(_log("s1", 0))
    with store._path.open("a", encoding="utf-8") as f:
        f.write('{"id": "log-broken", "session_')
    assert len(store.list_by_session("s1")) == 1


def test_undecodable_line_is_skipped(store):
    good = _log("s1", 0, user_id="u1")
    store.add(good)
    with store._path.open("ab") as f:
        f.write(b'{"id": "x"}\n\xff\xfe broken\n')
    assert [log.id for log in store.list_by_session("s1")] == [good.id]
    assert store.has_session("s1", user_id="u1")
    store.add(_log("s2", 1, user_id="u1"))
    assert store.count_sessions("u1") == 2
