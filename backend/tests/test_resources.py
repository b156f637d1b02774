import uuid

import pytest
from fastapi.testclient import TestClient

from conftest import login, plant_user_session


def test_root_greeting(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "Hello, World!"
    assert resp.headers["content-type"].startswith("text/plain")


def test_healthz(client):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "providers": ["fake"]}


def test_list_messages_empty_without_session(client):
    resp = client.get("/messages")
    assert resp.status_code == 200
    assert resp.json() == []


def test_put_message_then_list(client):
    login(client)

    resp = client.put("/messages", json={"message": "hi"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "hi"
    uuid.UUID(body["id"])

    listed = client.get("/messages").json()
    assert {"id": body["id"], "message": "hi"} in listed


def test_messages_are_listed_for_anonymous_clients(app, client):
    login(client)
    client.put("/messages", json={"message": "one"})
    client.put("/messages", json={"message": "two"})

    anonymous = TestClient(app)
    messages = [m["message"] for m in anonymous.get("/messages").json()]
    assert sorted(messages) == ["one", "two"]


def test_put_message_keeps_content_as_given(client):
    login(client)

    assert client.put("/messages", json={}).json()["message"] == ""
    assert client.put("/messages", json={"message": "  padded  "}).json()["message"] == "  padded  "


def test_put_message_requires_session(client):
    resp = client.put("/messages", json={"message": "hi"})
    assert resp.status_code == 403
    assert client.get("/messages").json() == []


def test_put_message_rejects_malformed_body(client):
    login(client)
    resp = client.put("/messages", content=b"{not json", headers={"content-type": "application/json"})
    assert resp.status_code == 422


def test_profile_without_cookie_is_forbidden(client):
    resp = client.get("/profile")
    assert resp.status_code == 403
    assert resp.json() == {"detail": "Forbidden"}


def test_profile_with_unknown_token_is_forbidden(client):
    client.cookies.set("session_id", "no-such-token")
    assert client.get("/profile").status_code == 403


@pytest.mark.parametrize(
    "data",
    [
        {},
        {"user_id": 42},
        {"user_id": "not-a-uuid"},
        {"user_id": str(uuid.UUID(int=0))},
        {"user_id": str(uuid.uuid4())},
    ],
    ids=["missing", "wrong-type", "malformed", "nil", "dangling"],
)
def test_profile_with_bad_user_id_is_forbidden(app, client, data):
    plant_user_session(app, client, data)

    resp = client.get("/profile")
    assert resp.status_code == 403
    assert resp.json() == {"detail": "Forbidden"}
