from datetime import datetime, timedelta

import pytest
from fastapi import Response
from starlette.requests import Request

from regit.models import WebSession
from regit.services.session_store import CookieConfig, Session, SessionStore


def request_with_cookie(name=None, token=None) -> Request:
    headers = []
    if name:
        headers.append((b"cookie", f"{name}={token}".encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def store():
    return SessionStore("user", CookieConfig(name="sid", samesite="none", expire_minutes=30))


def test_get_without_cookie_returns_fresh_session(store, db_context):
    with db_context() as db:
        sess = store.get(db, request_with_cookie())

    assert sess.fresh
    assert sess.data == {}
    assert sess.token


def test_saved_session_round_trips_through_cookie(store, db_context):
    sess = Session(token="tok-1")
    sess.set("user_id", "abc")
    with db_context() as db:
        store.save(db, sess)

    with db_context() as db:
        loaded = store.get(db, request_with_cookie("sid", "tok-1"))

    assert not loaded.fresh
    assert loaded.token == "tok-1"
    assert loaded.get("user_id") == "abc"


def test_unknown_token_gets_a_new_token(store, db_context):
    with db_context() as db:
        sess = store.get(db, request_with_cookie("sid", "forged"))

    assert sess.fresh
    assert sess.token != "forged"


def test_expired_session_is_dropped(store, db_context):
    with db_context() as db:
        store.repo.save(db, "old", {"user_id": "abc"}, datetime.utcnow() - timedelta(minutes=1))

    with db_context() as db:
        sess = store.get(db, request_with_cookie("sid", "old"))
        remaining = db.query(WebSession).count()

    assert sess.fresh
    assert remaining == 0


def test_scopes_do_not_share_rows(store, db_context):
    other = SessionStore("next", CookieConfig(name="sid"))
    sess = Session(token="shared")
    sess.set("user_id", "abc")
    with db_context() as db:
        store.save(db, sess)
        seen_by_other = other.get(db, request_with_cookie("sid", "shared"))

    assert seen_by_other.fresh


def test_destroy_removes_row_and_expires_cookie(store, db_context):
    sess = Session(token="tok-2", data={"user_id": "abc"})
    with db_context() as db:
        store.save(db, sess)
        store.destroy(db, sess)
        remaining = db.query(WebSession).count()

    response = Response()
    store.write_cookie(response, sess)

    assert remaining == 0
    assert sess.destroyed
    cookie = response.headers["set-cookie"]
    assert cookie.startswith("sid=")
    assert "Max-Age=0" in cookie


def test_write_cookie_sets_policy(store, db_context):
    sess = Session(token="tok-3")
    with db_context() as db:
        store.save(db, sess)

    response = Response()
    store.write_cookie(response, sess)
    cookie = response.headers["set-cookie"]

    assert cookie.startswith("sid=tok-3")
    assert "HttpOnly" in cookie
    assert "SameSite=none" in cookie
    assert "Max-Age=1800" in cookie


def test_fresh_session_writes_no_cookie(store):
    response = Response()
    store.write_cookie(response, Session(token="never-saved"))
    assert "set-cookie" not in response.headers
