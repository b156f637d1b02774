# Schemas package for API request/response validation

# Base schemas
from .base import BaseSchema, IDSchema

# User schemas
from .user import UserCreate, UserResponse, user_to_response

# Message schemas
from .message import (
    MessageCreate, MessageResponse,
    message_to_response, messages_to_response,
)

# Export all schemas for easy importing
__all__ = [
    # Base
    "BaseSchema", "IDSchema",

    # User
    "UserCreate", "UserResponse", "user_to_response",

    # Message
    "MessageCreate", "MessageResponse",
    "message_to_response", "messages_to_response",
]
