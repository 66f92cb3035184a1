"""
CRUD operations for the per-user domain records (schedule, transactions, workouts,
food entries, check-ins, goals) and the session-bound services the voice executor calls.
"""
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from lifedesk.db.base_crud import CRUDBase
from lifedesk.db.models import (
    ScheduleItemModel,
    TransactionModel,
    WorkoutModel,
    FoodEntryModel,
    DailyCheckInModel,
    GoalModel,
)


class CRUDScheduleItem(CRUDBase[ScheduleItemModel]):
    def create_batch(
        self,
        db: Session,
        user_id: str,
        items: List[Dict[str, Any]]
    ) -> List[ScheduleItemModel]:
        """
        Create several schedule items in one commit.
        """
        rows = [ScheduleItemModel(user_id=user_id, **self._clean(item)) for item in items]
        db.add_all(rows)
        db.commit()
        for row in rows:
            db.refresh(row)
        return rows


schedule_item = CRUDScheduleItem(ScheduleItemModel)
transaction = CRUDBase(TransactionModel)
workout = CRUDBase(WorkoutModel)
food_entry = CRUDBase(FoodEntryModel)
daily_check_in = CRUDBase(DailyCheckInModel)
goal = CRUDBase(GoalModel)


class SessionService:
    """A CRUD object bound to one database session: list/create/update/remove by user."""

    def __init__(self, crud: CRUDBase, db: Session):
        self.crud = crud
        self.db = db

    def list(self, user_id: str):
        return self.crud.list(self.db, user_id)

    def create(self, user_id: str, payload: Dict[str, Any]):
        return self.crud.create(self.db, user_id, payload)

    def update(self, user_id: str, id: str, payload: Dict[str, Any]):
        return self.crud.update(self.db, user_id, id, payload)

    def remove(self, user_id: str, id: str) -> None:
        self.crud.remove(self.db, user_id, id)


class ScheduleSessionService(SessionService):
    def create_batch(self, user_id: str, items: List[Dict[str, Any]]):
        return self.crud.create_batch(self.db, user_id, items)
