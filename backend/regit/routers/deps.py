# regit/routers/deps.py
"""
Shared FastAPI dependencies. Long-lived collaborators are built once in
create_app() and read back from app.state here.
"""
from __future__ import annotations
import logging

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from regit.database import get_db
from regit.models.user import User
from regit.repositories.message import MessageRepository
from regit.services.auth_service import AuthError, AuthService

logger = logging.getLogger(__name__)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_message_repo() -> MessageRepository:
    return MessageRepository()


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
) -> User:
    try:
        return auth.resolve_user(db, request)
    except AuthError as e:
        logger.debug({"step": "resolve_user_failed", "code": e.code, "detail": e.log_detail})
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.public_detail)
