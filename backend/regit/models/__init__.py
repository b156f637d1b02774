# Models package for database entities

from .base import Base, BaseModel
from .user import User
from .message import Message
from .web_session import WebSession

# Export all models for easy importing
__all__ = ["Base", "BaseModel", "User", "Message", "WebSession"]
