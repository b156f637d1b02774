"""
Pydantic schemas for the Message entity, plus mappings to its public view.
"""

from typing import Iterable, List
from pydantic import Field

from .base import BaseSchema, IDSchema
from ..models.message import Message

class MessageCreate(BaseSchema):
    """
    Body of PUT /messages. Content is stored as given; a missing field
    becomes the empty string.
    """
    message: str = Field("", description="Message text")

class MessageResponse(IDSchema):
    message: str

def message_to_response(msg: Message) -> MessageResponse:
    return MessageResponse(id=msg.id, message=msg.message)

def messages_to_response(msgs: Iterable[Message]) -> List[MessageResponse]:
    return [message_to_response(m) for m in msgs]
