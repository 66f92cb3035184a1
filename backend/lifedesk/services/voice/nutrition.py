"""
Nutrition enrichment for food mentions.

Resolves a free-text food name and portion into calories and macros through a
cascade: the internal catalog first, then an AI lookup whose answer is cached
in the catalog, then a zero-valued placeholder. A food log with zero nutrition
beats losing the log, so this never fails the action.
"""
import re
from typing import Awaitable, Callable, Optional

import httpx
from sqlalchemy.exc import SQLAlchemyError

from lifedesk.core.constants import FoodConstants
from lifedesk.core.llm_client import LLMResponseError
from lifedesk.core.logging import get_logger
from lifedesk.db.crud_foods import NutritionCatalog
from lifedesk.db.models import FoodModel
from lifedesk.db.schema import FoodLookupResult, NutritionRecord, ScaledNutrition
from lifedesk.utils.unit_conversion import convert_to_base

logger = get_logger("services.voice.nutrition")

AiFoodLookup = Callable[[str], Awaitable[Optional[FoodLookupResult]]]

_RAW_RE = re.compile(r"\braw\b", re.IGNORECASE)
_UNCOOKED_RE = re.compile(r"\b(uncooked|raw)\b", re.IGNORECASE)


def canonical_food_name(name: str) -> str:
    """Display names say "uncooked", never "raw"."""
    return _RAW_RE.sub("uncooked", name or "")


def mentions_uncooked(name: str) -> bool:
    return bool(_UNCOOKED_RE.search(name or ""))


def record_from_row(row: FoodModel) -> NutritionRecord:
    return NutritionRecord(
        name=canonical_food_name(row.name),
        calories=float(row.calories or 0),
        protein=float(row.protein or 0),
        carbs=float(row.carbs or 0),
        fat=float(row.fat or 0),
        is_liquid=bool(row.is_liquid),
        reference_quantity=FoodConstants.REFERENCE_QUANTITY,
        serving_sizes_ml=row.serving_sizes_ml or None,
    )


def scale_nutrition(
    record: NutritionRecord,
    quantity: Optional[float],
    unit: Optional[str],
    source: str
) -> ScaledNutrition:
    """
    Scale per-100 g/ml nutrition to a portion.

    Calories are rounded to whole kcal, macros to one decimal.
    """
    base_amount = convert_to_base(quantity, unit, record.serving_sizes_ml)
    factor = base_amount / record.reference_quantity

    return ScaledNutrition(
        name=record.name,
        calories=round(record.calories * factor),
        protein=round(record.protein * factor, 1),
        carbs=round(record.carbs * factor, 1),
        fat=round(record.fat * factor, 1),
        is_liquid=record.is_liquid,
        source=source,
    )


class NutritionEnricher:
    """Catalog -> AI lookup -> placeholder cascade."""

    def __init__(
        self,
        catalog: Optional[NutritionCatalog] = None,
        ai_lookup: Optional[AiFoodLookup] = None
    ):
        self.catalog = catalog
        self.ai_lookup = ai_lookup

    def _from_catalog(self, name: str, prefer_uncooked: bool) -> Optional[NutritionRecord]:
        if self.catalog is None:
            return None
        try:
            row = self.catalog.find_by_name_fuzzy(name, prefer_uncooked)
        except SQLAlchemyError as e:
            logger.error(f"Catalog lookup failed for '{name}': {e}")
            return None
        return record_from_row(row) if row is not None else None

    async def _from_ai(self, name: str) -> Optional[NutritionRecord]:
        if self.ai_lookup is None:
            return None
        try:
            result = await self.ai_lookup(name)
        except (httpx.HTTPError, LLMResponseError, ValueError) as e:
            logger.warning(f"AI food lookup failed for '{name}': {e}")
            return None
        if result is None:
            return None

        display_name = canonical_food_name(result.name)
        sizes = result.serving_sizes_ml.model_dump(exclude_none=True) if result.serving_sizes_ml else None
        record = NutritionRecord(
            name=display_name,
            calories=result.calories,
            protein=result.protein,
            carbs=result.carbs,
            fat=result.fat,
            is_liquid=result.is_liquid,
            serving_sizes_ml=(sizes or None) if result.is_liquid else None,
        )
        if self.catalog is None:
            return record

        try:
            row = self.catalog.find_by_normalized_name(display_name)
            if row is None:
                row = self.catalog.insert_if_absent(display_name, {
                    "calories": record.calories,
                    "protein": record.protein,
                    "carbs": record.carbs,
                    "fat": record.fat,
                    "is_liquid": record.is_liquid,
                    "serving_sizes_ml": record.serving_sizes_ml,
                    "preparation": (
                        FoodConstants.PREPARATION_UNCOOKED
                        if mentions_uncooked(result.name)
                        else FoodConstants.PREPARATION_COOKED
                    ),
                })
        except SQLAlchemyError as e:
            logger.error(f"Caching AI nutrition for '{display_name}' failed: {e}")
            return record
        return record_from_row(row) if row is not None else record

    async def resolve(
        self,
        food_name: str,
        quantity: Optional[float] = None,
        unit: Optional[str] = None,
        prefer_uncooked: Optional[bool] = None
    ) -> ScaledNutrition:
        """
        Resolve nutrition for a portion of food.

        Args:
            food_name: Free-text food name ("rice", "Diet Coke")
            quantity: Amount; missing or non-positive means 100
            unit: Unit ("g", "ml", "cup", "slice", ...); empty means grams
            prefer_uncooked: Prefer uncooked catalog rows; defaults to whether
                the name itself says uncooked/raw

        Returns:
            Scaled nutrition; zero-valued with the name preserved when nothing matched
        """
        name = (food_name or "").strip()
        if not name:
            return ScaledNutrition(name="Unknown")
        if prefer_uncooked is None:
            prefer_uncooked = mentions_uncooked(name)

        record = self._from_catalog(name, prefer_uncooked)
        if record is not None:
            return scale_nutrition(record, quantity, unit, source="catalog")

        record = await self._from_ai(name)
        if record is not None:
            logger.info(f"[Nutrition] '{name}' resolved via AI lookup as '{record.name}'")
            return scale_nutrition(record, quantity, unit, source="ai")

        logger.info(f"[Nutrition] No nutrition found for '{name}', logging with zero values")
        return ScaledNutrition(name=canonical_food_name(name))
