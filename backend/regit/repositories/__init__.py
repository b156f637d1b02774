# Repositories package for data access layer

# Base repository
from .base import BaseRepository

# Domain-specific repositories
from .user import UserRepository
from .message import MessageRepository
from .web_session import WebSessionRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "MessageRepository",
    "WebSessionRepository",
]
