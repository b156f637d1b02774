"""
Message repository for the append-only message log.
"""

from sqlalchemy.orm import Session
import logging

from .base import BaseRepository
from ..models.message import Message
from ..models.user import User
from ..schemas.message import MessageCreate

logger = logging.getLogger(__name__)


class MessageRepository(BaseRepository[Message, MessageCreate]):
    """
    Repository for message operations. Messages are only ever created and listed.
    """

    def __init__(self):
        super().__init__(Message)

    def create_for_user(self, db: Session, user: User, text: str) -> Message:
        """Create a message owned by `user`."""
        try:
            return self.create(db, {"user_id": user.id, "message": text})
        except Exception as e:
            logger.error(f"create_for_user failed (user={user.id}): {e}")
            raise
