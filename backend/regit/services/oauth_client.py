# regit/services/oauth_client.py
from __future__ import annotations
from typing import Tuple
import logging
import secrets

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from regit.clients.oauth_providers import (
    OAuthCallbackError,
    OAuthProvider,
    ProviderIdentity,
    ProviderRegistry,
)
from regit.services.session_store import Session, SessionStore

logger = logging.getLogger(__name__)


class OAuthClient:
    """
    Drives the provider round trip. Its own artifacts (the CSRF state before
    the callback, the provider access token after it) live in a dedicated
    session scope, separate from the application's sessions.
    """

    def __init__(self, providers: ProviderRegistry, store: SessionStore):
        self.providers = providers
        self.store = store

    def provider(self, name: str) -> OAuthProvider:
        return self.providers.get(name)

    def begin_auth(self, db: DBSession, request: Request, provider_name: str) -> Tuple[str, Session]:
        """Persist a fresh state and return (authorization_url, oauth_session)."""
        provider = self.provider(provider_name)
        sess = self.store.get(db, request)
        state = secrets.token_urlsafe(24)
        sess.data.clear()
        sess.set("provider", provider.name)
        sess.set("state", state)
        self.store.save(db, sess)
        return provider.authorization_url(state), sess

    def complete_user_auth(
        self, db: DBSession, request: Request, provider_name: str
    ) -> Tuple[ProviderIdentity, Session]:
        """Validate the callback, exchange the code and return the verified identity."""
        provider = self.provider(provider_name)
        params = request.query_params

        if params.get("error"):
            raise OAuthCallbackError(f"provider reported error: {params.get('error')}")

        sess = self.store.get(db, request)
        expected = sess.get("state")
        received = params.get("state") or ""
        if (
            not isinstance(expected, str)
            or sess.get("provider") != provider.name
            or not secrets.compare_digest(expected.encode(), received.encode())
        ):
            raise OAuthCallbackError("state mismatch")

        code = params.get("code")
        if not code:
            raise OAuthCallbackError("missing authorization code")

        token = provider.exchange_code(code)
        identity = provider.fetch_identity(token)

        # state is single use; keep the token so logout has something to revoke
        sess.delete("state")
        sess.set("access_token", token.get("access_token"))
        self.store.save(db, sess)
        return identity, sess

    def logout(self, db: DBSession, request: Request) -> Session:
        """Drop the provider artifacts kept for this browser."""
        sess = self.store.get(db, request)
        self.store.destroy(db, sess)
        return sess
