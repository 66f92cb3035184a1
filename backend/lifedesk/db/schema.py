"""
Pydantic schemas for API request/response models and pipeline value objects.
These define the structure of data flowing through the voice pipeline.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class IntentDirective(BaseModel):
    """A function call suggested by the language model. Untrusted."""
    name: str
    args: Dict[str, Any] = Field(default_factory=dict)


class VoiceContext(BaseModel):
    """Per-transcript context, passed explicitly through the pipeline."""
    model_config = ConfigDict(frozen=True)

    today: str  # YYYY-MM-DD
    timezone: Optional[str] = None  # IANA zone, e.g. "Europe/London"
    user_id: Optional[str] = None


class ServingSizes(BaseModel):
    """Typical drink containers, in ml."""
    can: Optional[float] = Field(default=None, ge=0, le=2000)
    bottle: Optional[float] = Field(default=None, ge=0, le=5000)
    glass: Optional[float] = Field(default=None, ge=0, le=1000)


class FoodLookupResult(BaseModel):
    """Nutrition per 100 g / 100 ml as returned by the AI lookup."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1)
    calories: float = Field(ge=0, le=1000)
    protein: float = Field(ge=0, le=100)
    carbs: float = Field(ge=0, le=100)
    fat: float = Field(ge=0, le=100)
    is_liquid: bool = False
    serving_sizes_ml: Optional[ServingSizes] = None


class NutritionRecord(BaseModel):
    """Catalog nutrition, normalized to the reference quantity (100 g or 100 ml)."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    is_liquid: bool = False
    reference_quantity: float = 100
    serving_sizes_ml: Optional[Dict[str, float]] = None


class ScaledNutrition(BaseModel):
    """Nutrition for the portion the user actually ate."""
    name: str
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    is_liquid: bool = False
    source: str = "placeholder"  # "catalog", "ai" or "placeholder"


class ExecuteResult(BaseModel):
    """Outcome of one executed action."""
    intent: str
    success: bool
    message: Optional[str] = None


class UnderstandRequest(BaseModel):
    """Request schema for the voice understand endpoint."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    transcript: str
    lang: str = "auto"
    today: Optional[str] = None
    timezone: Optional[str] = None


class UnderstandResponse(BaseModel):
    """Built actions, serialized with camelCase field names."""
    actions: List[Dict[str, Any]]


class ExecuteRequest(BaseModel):
    """Request schema for the voice execute endpoint."""
    actions: List[Dict[str, Any]]


class ExecuteResponse(BaseModel):
    """One result per requested action, in the same order."""
    model_config = ConfigDict(json_schema_extra={"example": {"results": [{"intent": "add_food", "success": True}]}})

    results: List[ExecuteResult]
