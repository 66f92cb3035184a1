"""
CRUD operations for the nutrition catalog (foods table).
"""
import re
from typing import Any, Dict, Optional

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lifedesk.core.constants import FoodConstants
from lifedesk.db.models import FoodModel


def normalize_food_name(name: str) -> str:
    """Lowercase, trim and collapse inner whitespace: the catalog's dedup key."""
    return re.sub(r"\s+", " ", (name or "").strip().lower())


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards (% and _) so they are matched literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class NutritionCatalog:
    """Lookups and dedup-safe inserts against the foods table."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_name_fuzzy(self, name: str, prefer_uncooked: bool = False) -> Optional[FoodModel]:
        """
        Case-insensitive substring match on the food name.

        Rows whose preparation matches the preference come first, then the
        shortest (closest) name.
        """
        needle = (name or "").strip().lower()
        if not needle:
            return None
        wanted = FoodConstants.PREPARATION_UNCOOKED if prefer_uncooked else FoodConstants.PREPARATION_COOKED
        preparation = func.coalesce(FoodModel.preparation, FoodConstants.PREPARATION_COOKED)

        return self.db.query(FoodModel).filter(
            func.lower(FoodModel.name).like(f"%{_escape_like(needle)}%", escape="\\")
        ).order_by(
            case((preparation == wanted, 0), else_=1),
            func.length(FoodModel.name),
        ).first()

    def find_by_normalized_name(self, name: str) -> Optional[FoodModel]:
        return self.db.query(FoodModel).filter(
            FoodModel.name_norm == normalize_food_name(name)
        ).first()

    def insert_if_absent(self, name: str, nutrition: Dict[str, Any]) -> FoodModel:
        """
        Insert a catalog row unless one with the same normalized name exists.

        The unique constraint on name_norm decides: the insert either wins or
        conflicts, and the surviving row is read back. No check-then-insert window.
        """
        name_norm = normalize_food_name(name)
        values = {
            "name": name.strip(),
            "name_norm": name_norm,
            "calories": float(nutrition.get("calories") or 0),
            "protein": float(nutrition.get("protein") or 0),
            "carbs": float(nutrition.get("carbs") or 0),
            "fat": float(nutrition.get("fat") or 0),
            "is_liquid": bool(nutrition.get("is_liquid", False)),
            "serving_sizes_ml": nutrition.get("serving_sizes_ml"),
            "preparation": nutrition.get("preparation") or FoodConstants.PREPARATION_COOKED,
        }

        dialect = self.db.get_bind().dialect.name
        if dialect in ("sqlite", "postgresql"):
            if dialect == "sqlite":
                from sqlalchemy.dialects.sqlite import insert
            else:
                from sqlalchemy.dialects.postgresql import insert
            stmt = insert(FoodModel).values(**values).on_conflict_do_nothing(index_elements=["name_norm"])
            self.db.execute(stmt)
            self.db.commit()
        else:
            try:
                self.db.add(FoodModel(**values))
                self.db.commit()
            except IntegrityError:
                self.db.rollback()

        return self.find_by_normalized_name(name_norm)
