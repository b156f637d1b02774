# regit/services/auth_service.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from uuid import UUID
import base64
import binascii
import logging

from fastapi import Request, Response
from sqlalchemy.orm import Session as DBSession

from regit.models.user import User
from regit.repositories.user import UserRepository
from regit.schemas.user import UserCreate
from regit.services.oauth_client import OAuthClient
from regit.services.session_store import Session, SessionStore

logger = logging.getLogger(__name__)

USER_ID_KEY = "user_id"
NEXT_KEY = "next"


# --- AuthError for safe, classifiable failures ---
@dataclass
class AuthError(Exception):
    code: str                 # "NO_SESSION" | "BAD_USER_ID" | "NIL_USER_ID" | "NO_USER"
    public_detail: str = "Forbidden"
    log_detail: str = ""


CookieWrites = List[Tuple[SessionStore, Session]]


def write_cookies(response: Response, writes: CookieWrites) -> None:
    for store, sess in writes:
        store.write_cookie(response, sess)


class InvalidReturnURL(Exception):
    """The stored return URL is not valid base64. Carries the cookies already issued."""

    def __init__(self, message: str, cookies: Optional[CookieWrites] = None):
        super().__init__(message)
        self.cookies = cookies or []


@dataclass
class AuthRedirect:
    location: str
    cookies: CookieWrites = field(default_factory=list)


def decode_return_url(value: str) -> str:
    """Strict standard-alphabet base64 (padding required) to a UTF-8 URL."""
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise InvalidReturnURL(f"return url is not valid base64: {e}") from e


class AuthService:
    """
    Login, callback, logout and session resolution.

    Two application scopes are involved:
    - user_store: long-lived cross-site session holding user_id
    - next_store: same-site session that carries the return URL across the
      provider round trip and is destroyed once the callback consumes it
    """

    def __init__(
        self,
        *,
        user_store: SessionStore,
        next_store: SessionStore,
        oauth_client: OAuthClient,
        user_repo: Optional[UserRepository] = None,
        default_redirect: str = "/profile",
    ):
        self.user_store = user_store
        self.next_store = next_store
        self.oauth = oauth_client
        self.user_repo = user_repo or UserRepository()
        self.default_redirect = default_redirect

    # ---- login ----
    def begin_login(
        self, db: DBSession, request: Request, provider: str, return_url: Optional[str] = None
    ) -> AuthRedirect:
        self.oauth.provider(provider)  # unknown provider fails before any session is touched

        cookies: CookieWrites = []
        if return_url:
            sess = self.next_store.get(db, request)
            sess.set(NEXT_KEY, return_url)
            self.next_store.save(db, sess)
            cookies.append((self.next_store, sess))

        location, oauth_sess = self.oauth.begin_auth(db, request, provider)
        cookies.append((self.oauth.store, oauth_sess))
        logger.info({"step": "login_started", "provider": provider, "has_next": bool(return_url)})
        return AuthRedirect(location=location, cookies=cookies)

    # ---- callback ----
    def complete_login(self, db: DBSession, request: Request, provider: str) -> AuthRedirect:
        identity, oauth_sess = self.oauth.complete_user_auth(db, request, provider)
        cookies: CookieWrites = [(self.oauth.store, oauth_sess)]

        # Returning users keep their stored profile; provider data is only used on creation.
        user, created = self.user_repo.get_or_create(db, UserCreate(
            provider=identity.provider,
            external_id=identity.external_id,
            email=identity.email,
            first_name=identity.first_name,
            last_name=identity.last_name,
            nickname=identity.nickname,
        ))

        next_sess = self.next_store.get(db, request)
        next_value = next_sess.get(NEXT_KEY)
        self.next_store.destroy(db, next_sess)
        cookies.append((self.next_store, next_sess))

        user_sess = self.user_store.get(db, request)
        user_sess.set(USER_ID_KEY, str(user.id))
        self.user_store.save(db, user_sess)
        cookies.append((self.user_store, user_sess))

        logger.info({
            "step": "login_completed",
            "provider": provider,
            "user_id": str(user.id),
            "created": created,
        })

        if isinstance(next_value, str) and next_value:
            try:
                location = decode_return_url(next_value)
            except InvalidReturnURL as e:
                logger.warning({"step": "login_bad_next", "user_id": str(user.id)})
                e.cookies = cookies
                raise
            return AuthRedirect(location=location, cookies=cookies)

        return AuthRedirect(location=self.default_redirect, cookies=cookies)

    # ---- logout ----
    def logout(self, db: DBSession, request: Request) -> CookieWrites:
        user_sess = self.user_store.get(db, request)
        oauth_sess = self.oauth.logout(db, request)
        self.user_store.destroy(db, user_sess)
        logger.info({"step": "logout"})
        return [(self.oauth.store, oauth_sess), (self.user_store, user_sess)]

    # ---- session resolution ----
    def resolve_user(self, db: DBSession, request: Request) -> User:
        """
        Map the cross-site session cookie to a live User. Every failure raises
        AuthError; callers surface all of them as the same 403.
        """
        try:
            sess = self.user_store.get(db, request)
        except Exception as e:
            raise AuthError(code="NO_SESSION", log_detail=str(e)) from e

        raw = sess.get(USER_ID_KEY)
        if sess.fresh or raw is None:
            raise AuthError(code="NO_SESSION")

        if not isinstance(raw, str):
            raise AuthError(code="BAD_USER_ID", log_detail=f"user_id has type {type(raw).__name__}")
        try:
            user_id = UUID(raw)
        except ValueError:
            raise AuthError(code="BAD_USER_ID", log_detail="user_id is not a uuid") from None

        if user_id.int == 0:
            raise AuthError(code="NIL_USER_ID")

        user = self.user_repo.get(db, user_id)
        if user is None:
            raise AuthError(code="NO_USER", log_detail=f"no user {user_id}")
        return user
