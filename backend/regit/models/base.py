"""
Base model class that provides common fields for all domain entities.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Uuid
from sqlalchemy.orm import declarative_base

# Create the base class for all our models
Base = declarative_base()

class BaseModel(Base):
    """
    Abstract base model that provides common fields for domain entities.

    Attributes:
        id: Opaque UUID primary key, generated at creation if absent
        created_at: Timestamp when the record was created
        updated_at: Timestamp when the record was last updated
        deleted_at: Soft-delete marker; live rows have NULL here
    """
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    deleted_at = Column(DateTime, nullable=True, index=True)

    # String representation for debugging purposes
    def __repr__(self) -> str:
        cls = self.__class__.__name__
        return f"<{cls}(id={getattr(self, 'id', None)})>"
