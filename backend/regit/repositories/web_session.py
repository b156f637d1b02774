"""
Repository for server-side session rows.
"""

from __future__ import annotations
from datetime import datetime
from typing import Optional
import logging

from sqlalchemy.orm import Session

from ..models.web_session import WebSession

logger = logging.getLogger(__name__)


class WebSessionRepository:
    """Load, upsert and delete session rows within one scope."""

    def __init__(self, scope: str) -> None:
        self.scope = scope

    def get(self, db: Session, token: str) -> Optional[WebSession]:
        """Get a session row; expired rows are deleted and reported as missing."""
        try:
            row = db.get(WebSession, (token, self.scope))
            if row is None:
                return None
            if row.expires_at <= datetime.utcnow():
                db.delete(row)
                db.commit()
                return None
            return row
        except Exception as e:
            db.rollback()
            logger.error(f"Error loading session (scope={self.scope}): {e}")
            raise

    def save(self, db: Session, token: str, data: dict, expires_at: datetime) -> WebSession:
        try:
            row = db.get(WebSession, (token, self.scope))
            if row is None:
                row = WebSession(token=token, scope=self.scope)
            # assign a fresh dict so the JSON column is flagged dirty
            row.data = dict(data)
            row.expires_at = expires_at
            db.add(row)
            db.commit()
            return row
        except Exception as e:
            db.rollback()
            logger.error(f"Error saving session (scope={self.scope}): {e}")
            raise

    def delete(self, db: Session, token: str) -> bool:
        try:
            row = db.get(WebSession, (token, self.scope))
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
        except Exception as e:
            db.rollback()
            logger.error(f"Error deleting session (scope={self.scope}): {e}")
            raise
