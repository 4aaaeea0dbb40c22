from sqlalchemy.orm import Session
from sqlalchemy import select, exists
from sqlalchemy.sql import Select
from typing import Generic, Type, TypeVar, List, Optional, Dict, Any
from app.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """Base repository with the CRUD operations shared by every model."""

    def __init__(self, model: Type[T], db: Session):
        """
        Initialize repository with model and database session.

        Args:
            model: The SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get(self, id: int) -> Optional[T]:
        """Get a single record by ID, always re-read from the database."""
        stmt = select(self.model).where(self.model.id == id)
        return self.db.execute(stmt.execution_options(populate_existing=True)).scalars().first()

    def paginate(self, stmt: Select, skip: int = 0, limit: int = 100) -> List[T]:
        """Run a select with offset/limit applied."""
        return list(self.db.execute(stmt.offset(skip).limit(limit)).scalars().all())

    def create(self, obj: T) -> T:
        """Create a new record."""
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update(self, id: int, data: Dict[str, Any]) -> Optional[T]:
        """Update a record by ID. Keys that are not columns are ignored."""
        obj = self.get(id)
        if not obj:
            return None

        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete(self, id: int) -> bool:
        """Delete a record by ID. Returns True if deleted, False if not found."""
        obj = self.get(id)
        if not obj:
            return False

        self.db.delete(obj)
        self.db.commit()
        return True

    def exists(self, id: int) -> bool:
        """Check if a record exists by ID."""
        return bool(self.db.scalar(select(exists().where(self.model.id == id))))
