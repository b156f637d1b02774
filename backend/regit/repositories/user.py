"""
User repository for identity lookups and first-login creation.
"""

from __future__ import annotations
from typing import Optional, Tuple
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .base import BaseRepository
from ..models.user import User
from ..schemas.user import UserCreate

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User, UserCreate]):
    def __init__(self) -> None:
        super().__init__(User)

    def get_by_external_id(self, db: Session, provider: str, external_id: str) -> Optional[User]:
        """Get the live user bound to a provider identity."""
        try:
            return (
                self._live(db)
                .filter(User.provider == provider, User.external_id == external_id)
                .first()
            )
        except Exception as e:
            logger.error(f"Error getting user by external id ({provider}): {e}")
            raise

    def get_or_create(self, db: Session, data: UserCreate) -> Tuple[User, bool]:
        """
        Return (user, created) for a provider identity.

        An existing user is returned untouched: profile fields are copied from
        the provider only when the row is first created. If a concurrent request
        wins the insert, the unique constraint fires and we fetch its row.
        """
        user = self.get_by_external_id(db, data.provider, data.external_id)
        if user:
            return user, False

        try:
            obj = self.create(db, data)
            logger.debug({"repo": "user.create", "id": str(obj.id), "provider": obj.provider})
            return obj, True
        except IntegrityError:
            db.rollback()
            logger.info(f"Concurrent first login for {data.provider} identity; fetching existing user")
            user = self.get_by_external_id(db, data.provider, data.external_id)
            if user is None:
                raise
            return user, False
        except Exception:
            db.rollback()
            logger.exception("Error in UserRepository.get_or_create")
            raise
