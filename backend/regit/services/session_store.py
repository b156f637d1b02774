# regit/services/session_store.py
"""
Server-side cookie sessions.

A SessionStore owns one scope: one cookie name and one cookie policy. The
cookie only carries an opaque random token; the key/value state lives in the
web_sessions table. Handlers load a Session, mutate it, then save or destroy it
and finally write the matching cookie onto the outgoing response.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, Optional
import logging
import secrets

from fastapi import Request, Response
from sqlalchemy.orm import Session as DBSession

from regit.repositories.web_session import WebSessionRepository

logger = logging.getLogger(__name__)


@dataclass
class CookieConfig:
    name: str
    samesite: str = "lax"          # "lax" | "strict" | "none"
    secure: bool = False
    httponly: bool = True
    domain: Optional[str] = None
    path: str = "/"
    expire_minutes: int = 1440


@dataclass
class Session:
    token: str
    data: Dict[str, Any] = field(default_factory=dict)
    fresh: bool = True             # not yet persisted
    destroyed: bool = False

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SessionStore:
    def __init__(self, scope: str, cookie: CookieConfig, repo: Optional[WebSessionRepository] = None):
        self.scope = scope
        self.cookie = cookie
        self.repo = repo or WebSessionRepository(scope)

    @staticmethod
    def _new_token() -> str:
        return secrets.token_urlsafe(32)

    def get(self, db: DBSession, request: Request) -> Session:
        """
        Load the session named by the request cookie. A missing, unknown or
        expired token yields a fresh empty session with a new token.
        """
        token = request.cookies.get(self.cookie.name)
        if token:
            row = self.repo.get(db, token)
            if row is not None:
                return Session(token=token, data=dict(row.data or {}), fresh=False)
        return Session(token=self._new_token())

    def save(self, db: DBSession, session: Session) -> None:
        expires_at = datetime.utcnow() + timedelta(minutes=self.cookie.expire_minutes)
        self.repo.save(db, session.token, session.data, expires_at)
        session.fresh = False
        session.destroyed = False

    def destroy(self, db: DBSession, session: Session) -> None:
        if not session.fresh:
            self.repo.delete(db, session.token)
        session.data.clear()
        session.destroyed = True

    def write_cookie(self, response: Response, session: Session) -> None:
        """Attach the Set-Cookie header matching the session's final state."""
        if session.destroyed:
            response.delete_cookie(
                self.cookie.name,
                path=self.cookie.path,
                domain=self.cookie.domain,
                secure=self.cookie.secure,
                httponly=self.cookie.httponly,
                samesite=self.cookie.samesite,
            )
            return
        if session.fresh:
            # never persisted, nothing for the browser to hold on to
            return
        response.set_cookie(
            self.cookie.name,
            session.token,
            max_age=self.cookie.expire_minutes * 60,
            path=self.cookie.path,
            domain=self.cookie.domain,
            secure=self.cookie.secure,
            httponly=self.cookie.httponly,
            samesite=self.cookie.samesite,
        )
