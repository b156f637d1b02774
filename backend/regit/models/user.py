"""
User model for identities authenticated through an OAuth provider.
"""
from sqlalchemy import Column, String, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import BaseModel

class User(BaseModel):
    """
    User entity created lazily on the first successful OAuth callback.

    - provider + external_id identify the account at the identity provider;
      the pair is unique, so concurrent first logins cannot create duplicates
    - profile fields are copied from the provider once, at creation
    """

    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("provider", "external_id", name="uq_users_provider_external_id"),
    )

    # Name of the OAuth provider that issued external_id (e.g. "google")
    provider = Column(String(50), nullable=False)

    # Stable user id issued by the provider
    external_id = Column(String(255), nullable=False, index=True)

    email = Column(String(255), nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    nickname = Column(String(255), nullable=True)

    # Relationship to messages - one user writes many messages
    messages = relationship("Message", back_populates="user")

    def __repr__(self):
        """String representation for debugging."""
        return f"<User(id={self.id}, provider='{self.provider}', external_id='{self.external_id}')>"
