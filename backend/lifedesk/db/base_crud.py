"""
Generic CRUD operations for per-user records.
Every query is filtered by user_id, so one user can never read or change another's rows.
"""
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from lifedesk.db.models import Base

ModelType = TypeVar("ModelType", bound=Base)


class NotFoundError(LookupError):
    """No record with the given id exists for this user."""


class CRUDBase(Generic[ModelType]):
    def __init__(self, model: Type[ModelType]):
        """
        CRUD object with default methods to List, Create, Update, Remove.

        Args:
            model: A SQLAlchemy model class with a user_id column
        """
        self.model = model
        self._columns = {column.name for column in model.__table__.columns} - {"id", "user_id"}

    def _clean(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {key: value for key, value in payload.items() if key in self._columns}

    def get(self, db: Session, user_id: str, id: str) -> Optional[ModelType]:
        return db.query(self.model).filter(
            self.model.user_id == user_id,
            self.model.id == id
        ).first()

    def list(self, db: Session, user_id: str, limit: Optional[int] = None) -> List[ModelType]:
        """Newest first."""
        query = db.query(self.model).filter(
            self.model.user_id == user_id
        ).order_by(self.model.created_at.desc())
        if limit:
            query = query.limit(limit)
        return query.all()

    def create(self, db: Session, user_id: str, payload: Dict[str, Any]) -> ModelType:
        db_obj = self.model(user_id=user_id, **self._clean(payload))
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def update(self, db: Session, user_id: str, id: str, payload: Dict[str, Any]) -> ModelType:
        """Apply a sparse update; None values leave the column untouched."""
        db_obj = self.get(db, user_id, id)
        if db_obj is None:
            raise NotFoundError(f"{self.model.__name__} {id} not found")
        for key, value in self._clean(payload).items():
            if value is not None:
                setattr(db_obj, key, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def remove(self, db: Session, user_id: str, id: str) -> None:
        db_obj = self.get(db, user_id, id)
        if db_obj is None:
            raise NotFoundError(f"{self.model.__name__} {id} not found")
        db.delete(db_obj)
        db.commit()
