# regit/routers/messages.py
from __future__ import annotations
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from regit.database import get_db
from regit.models.user import User
from regit.repositories.message import MessageRepository
from regit.routers.deps import get_current_user, get_message_repo
from regit.schemas.message import (
    MessageCreate,
    MessageResponse,
    message_to_response,
    messages_to_response,
)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.put("", response_model=MessageResponse, summary="Append a message as the logged-in user")
def create_message(
    payload: MessageCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    msg_repo: MessageRepository = Depends(get_message_repo),
):
    msg = msg_repo.create_for_user(db, user, payload.message)
    return message_to_response(msg)


@router.get("", response_model=List[MessageResponse], summary="List every message")
def list_messages(
    db: Session = Depends(get_db),
    msg_repo: MessageRepository = Depends(get_message_repo),
):
    return messages_to_response(msg_repo.list_all(db))
