"""
Message model for the append-only message log.
"""

from sqlalchemy import Column, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import BaseModel

class Message(BaseModel):
    """
    A single message entry. Owned by exactly one user, set at creation
    from the authenticated session; never updated afterwards.
    """

    __tablename__ = "messages"

    # Foreign key to the user who wrote this message
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)

    # Relationship to the user - many messages belong to one user
    user = relationship("User", back_populates="messages")

    # The message text, stored as given
    message = Column(Text, nullable=False, default="")

    def __repr__(self):
        return f"<Message(id={self.id}, user_id={self.user_id})>"
