"""
Base schemas that provide common configuration for request/response models.
"""

from uuid import UUID
from pydantic import BaseModel, Field, ConfigDict

class BaseSchema(BaseModel):
    """
    Base schema with common configuration for all schemas.

    Features:
    - Ignores extra fields (security)
    - Validates on assignment
    """

    model_config = ConfigDict(
        # Ignore extra fields (security)
        extra="ignore",
        # Validate on assignment
        validate_assignment=True,
    )

class IDSchema(BaseSchema):
    """
    Schema with an ID field.
    Used for responses that expose a record's public identifier.
    """
    id: UUID = Field(..., description="Unique identifier for the record")
