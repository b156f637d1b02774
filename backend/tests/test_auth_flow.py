from urllib.parse import urlparse

from regit.models import User, WebSession

from conftest import b64, login, start_login, state_from


def _users(db_context):
    with db_context() as db:
        return db.query(User).all()


def _session_rows(db_context, scope):
    with db_context() as db:
        return db.query(WebSession).filter(WebSession.scope == scope).count()


def test_login_redirects_to_provider_with_state(client):
    resp = start_login(client)

    assert resp.status_code == 302
    location = urlparse(resp.headers["location"])
    assert location.netloc == "provider.test"
    assert state_from(resp)
    assert "_oauth_session" in client.cookies
    # no return url given, so the same-site session is never created
    assert "session_next" not in client.cookies


def test_login_unknown_provider_is_404(client, db_context):
    resp = start_login(client, provider="nope", r=b64("/dest"))

    assert resp.status_code == 404
    assert _session_rows(db_context, "next") == 0


def test_first_callback_creates_user_and_issues_session(client, db_context):
    resp = login(client)

    assert resp.status_code == 302
    assert resp.headers["location"] == "/profile"

    users = _users(db_context)
    assert len(users) == 1
    assert users[0].provider == "fake"
    assert users[0].external_id == "ext-1"
    assert users[0].email == "ada@example.com"
    assert users[0].nickname == "ada"

    profile = client.get("/profile")
    assert profile.status_code == 200
    assert profile.json() == {"id": str(users[0].id), "name": "ada"}


def test_returning_user_is_not_duplicated_or_refreshed(client, provider, db_context):
    login(client, code="first")
    first = _users(db_context)[0]

    provider.identity.email = "ada@new.example.com"
    provider.identity.nickname = "countess"
    provider.identity.first_name = "Augusta"

    resp = login(client, code="second")
    assert resp.status_code == 302

    users = _users(db_context)
    assert len(users) == 1
    assert users[0].id == first.id
    assert users[0].email == "ada@example.com"
    assert users[0].first_name == "Ada"
    assert client.get("/profile").json()["name"] == "ada"


def test_callback_redirects_to_next_and_destroys_same_site_session(client, db_context):
    resp = login(client, r=b64("/dest"))

    assert resp.status_code == 302
    assert resp.headers["location"] == "/dest"
    assert "session_next" not in client.cookies
    assert _session_rows(db_context, "next") == 0

    # next was consumed; a plain login lands on the default page
    resp = login(client, code="again")
    assert resp.headers["location"] == "/profile"


def test_callback_with_empty_next_uses_default(client):
    resp = login(client, r="")
    assert resp.headers["location"] == "/profile"


def test_callback_with_invalid_base64_next_is_400(client):
    resp = login(client, r="not base64!!")

    assert resp.status_code == 400
    # the session was issued before the return url was decoded
    assert client.get("/profile").status_code == 200


def test_callback_with_unpadded_base64_next_is_400(client):
    resp = login(client, r=b64("/dest").rstrip("="))
    assert resp.status_code == 400


def test_callback_state_mismatch_is_400(client, db_context):
    start_login(client)
    resp = client.get(
        "/auth/callback/fake",
        params={"code": "c", "state": "forged"},
        follow_redirects=False,
    )

    assert resp.status_code == 400
    assert _users(db_context) == []


def test_callback_without_login_is_400(client):
    resp = client.get("/auth/callback/fake", params={"code": "c", "state": "s"}, follow_redirects=False)
    assert resp.status_code == 400


def test_callback_missing_code_is_400(client):
    state = state_from(start_login(client))
    resp = client.get("/auth/callback/fake", params={"state": state}, follow_redirects=False)
    assert resp.status_code == 400


def test_callback_provider_error_param_is_400(client):
    state = state_from(start_login(client))
    resp = client.get(
        "/auth/callback/fake",
        params={"state": state, "error": "access_denied"},
        follow_redirects=False,
    )
    assert resp.status_code == 400


def test_callback_state_is_single_use(client):
    state = state_from(start_login(client))
    params = {"code": "c", "state": state}

    assert client.get("/auth/callback/fake", params=params, follow_redirects=False).status_code == 302
    assert client.get("/auth/callback/fake", params=params, follow_redirects=False).status_code == 400


def test_callback_provider_failure_is_502(client, provider, db_context):
    provider.fail = True
    resp = login(client)

    assert resp.status_code == 502
    assert _users(db_context) == []
    assert client.get("/profile").status_code == 403


def test_callback_unknown_provider_is_404(client):
    resp = client.get("/auth/callback/nope", params={"code": "c", "state": "s"}, follow_redirects=False)
    assert resp.status_code == 404


def test_logout_then_profile_is_forbidden(client, db_context):
    login(client)
    assert client.get("/profile").status_code == 200

    resp = client.get("/logout")
    assert resp.status_code == 200
    assert resp.content == b""

    assert client.get("/profile").status_code == 403
    assert _session_rows(db_context, "user") == 0
    assert _session_rows(db_context, "oauth") == 0


def test_logout_without_session_succeeds(client):
    assert client.get("/logout").status_code == 200
