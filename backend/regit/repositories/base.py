"""
Base repository class that provides a consistent interface for all data access operations.
"""

from typing import TypeVar, Generic, Type, Optional, List, Any, Union
from uuid import UUID
from sqlalchemy.orm import Session
from pydantic import BaseModel
import logging

from ..models.base import BaseModel as DBBaseModel

# Type variables for generic repository
T = TypeVar('T', bound=DBBaseModel)
CreateSchemaType = TypeVar('CreateSchemaType', bound=BaseModel)

logger = logging.getLogger(__name__)

class BaseRepository(Generic[T, CreateSchemaType]):
    """
    Base repository with the operations shared by domain entities.

    Soft-deleted rows (deleted_at set) are invisible to every query here.

    Generic types:
    - T: Database model type
    - CreateSchemaType: Pydantic schema for creation
    """

    def __init__(self, model: Type[T]):
        """Initialize repository with a specific model."""
        self.model = model

    def _live(self, db: Session):
        return db.query(self.model).filter(self.model.deleted_at.is_(None))

    def get(self, db: Session, id: UUID) -> Optional[T]:
        """Get a single live record by ID."""
        try:
            return self._live(db).filter(self.model.id == id).first()
        except Exception as e:
            logger.error(f"Error getting {self.model.__name__} with id {id}: {e}")
            raise

    def list_all(self, db: Session) -> List[T]:
        """Get every live record, in the store's default order."""
        try:
            return self._live(db).all()
        except Exception as e:
            logger.error(f"Error listing {self.model.__name__}: {e}")
            raise

    def create(self, db: Session, obj_in: Union[CreateSchemaType, dict]) -> T:
        """Create and persist a new record. Commits and refreshes."""
        try:
            obj_data = self._to_dict(obj_in)
            obj_data = self._filter_model_fields(obj_data)
            db_obj = self.model(**obj_data)
            db.add(db_obj)
            db.commit()
            db.refresh(db_obj)
            logger.info(f"Created {self.model.__name__} with id {db_obj.id}")
            return db_obj
        except Exception as e:
            logger.error(f"Error creating {self.model.__name__}: {e}")
            db.rollback()
            raise

    def _filter_model_fields(self, data: dict) -> dict:
        """Filter data to only include valid model fields."""
        cols = {c.key for c in self.model.__table__.columns}
        return {k: v for k, v in data.items() if k in cols}

    def _to_dict(self, obj: Any) -> dict:
        """Convert Pydantic model or dict to dictionary."""
        if hasattr(obj, "model_dump"):
            return obj.model_dump(exclude_unset=True)
        if isinstance(obj, dict):
            return obj
        raise TypeError(f"Unsupported input type for {self.model.__name__}: {type(obj)}")
