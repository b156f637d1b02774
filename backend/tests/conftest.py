"""
Shared fixtures: an app wired to a throwaway SQLite file and a fake OAuth
provider, plus helpers that drive the login round trip.
"""
import base64
from typing import Any, Dict, List, Optional
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from regit.clients.oauth_providers import OAuthProvider, OAuthProviderError, ProviderIdentity
from regit.config import Settings
from regit.database import get_db_context
from regit.main import create_app
from regit.models import Base
from regit.services.session_store import Session


class FakeProvider(OAuthProvider):
    name = "fake"

    def __init__(self):
        self.identity = ProviderIdentity(
            provider=self.name,
            external_id="ext-1",
            email="ada@example.com",
            first_name="Ada",
            last_name="Lovelace",
            nickname="ada",
        )
        self.codes: List[str] = []
        self.fail = False

    def authorization_url(self, state: str) -> str:
        return f"https://provider.test/authorize?state={state}"

    def exchange_code(self, code: str) -> Dict[str, Any]:
        if self.fail:
            raise OAuthProviderError("provider unavailable")
        self.codes.append(code)
        return {"access_token": f"token-{code}"}

    def fetch_identity(self, token: Dict[str, Any]) -> ProviderIdentity:
        return self.identity


def b64(value: str) -> str:
    return base64.b64encode(value.encode()).decode()


@pytest.fixture
def settings(tmp_path):
    cfg = Settings()
    cfg.DATABASE_URL = f"sqlite:///{tmp_path / 'regit-test.db'}"
    cfg.RUN_MIGRATIONS = False
    cfg.SESSION_COOKIE_DOMAIN = None
    cfg.SESSION_COOKIE_SECURE = False
    cfg.DEFAULT_REDIRECT = "/profile"
    return cfg


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def app(settings, provider):
    app = create_app(settings, providers=[provider])
    Base.metadata.create_all(app.state.engine)
    yield app
    app.state.engine.dispose()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def db_context(app):
    def _ctx():
        return get_db_context(app.state.session_factory)
    return _ctx


def start_login(client: TestClient, provider: str = "fake", r: Optional[str] = None):
    params = {"r": r} if r is not None else {}
    return client.get(f"/login/{provider}", params=params, follow_redirects=False)


def state_from(resp) -> str:
    return parse_qs(urlparse(resp.headers["location"]).query)["state"][0]


def login(client: TestClient, code: str = "code-1", r: Optional[str] = None):
    """Run /login then /auth/callback and return the callback response."""
    resp = start_login(client, r=r)
    assert resp.status_code == 302
    return client.get(
        "/auth/callback/fake",
        params={"code": code, "state": state_from(resp)},
        follow_redirects=False,
    )


def plant_user_session(app, client: TestClient, data: dict) -> str:
    """Persist a cross-site session with arbitrary data and point the client's cookie at it."""
    store = app.state.session_stores["user"]
    sess = Session(token=f"planted-{uuid4().hex}", data=dict(data))
    with get_db_context(app.state.session_factory) as db:
        store.save(db, sess)
    client.cookies.set(store.cookie.name, sess.token)
    return sess.token
