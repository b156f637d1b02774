# regit/schemas/user.py
"""
Pydantic schemas for the User entity, plus the mapping to its public view.
"""
from __future__ import annotations
from typing import Optional
from pydantic import Field

from .base import BaseSchema, IDSchema
from ..models.user import User


class UserCreate(BaseSchema):
    """
    Schema for creating a user from a verified provider identity.
    """
    provider: str = Field(..., description="OAuth provider name")
    external_id: str = Field(..., min_length=1, description="User id issued by the provider")
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    nickname: Optional[str] = None


class UserResponse(IDSchema):
    """
    Public profile returned by GET /profile.
    """
    name: str = Field("", description="Display name (the provider nickname)")


def user_to_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.nickname or "")
