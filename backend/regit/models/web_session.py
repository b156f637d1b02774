"""
Server-side session rows, keyed by the opaque token stored in the browser cookie.
"""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from .base import Base

class WebSession(Base):
    """
    One row per live browser session.

    Rows are namespaced by scope so the same token value can never be
    read through a different session store than the one that issued it.
    """

    __tablename__ = "web_sessions"

    token = Column(String(64), primary_key=True)
    scope = Column(String(50), primary_key=True)

    # Small key/value state, e.g. {"user_id": "..."} or {"next": "..."}
    data = Column(JSON, nullable=False, default=dict)

    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<WebSession(scope='{self.scope}', expires_at={self.expires_at})>"
