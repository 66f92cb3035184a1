"""
Argument validators for language-model directives.

A directive whose numeric or enumerated arguments are malformed is dropped
before any action is built. Only values that are present get checked: a
missing amount is the builders' job to default, a negative or non-numeric one
means the model misunderstood and the call is discarded.
"""
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lifedesk.core.constants import GoalConstants, TransactionConstants, WorkoutConstants
from lifedesk.core.logging import get_logger
from lifedesk.db.schema import IntentDirective

logger = get_logger("services.voice.validators")

# Allowed values come from core.constants so builders and validators agree
TransactionType = Literal[tuple(TransactionConstants.TYPES)]
WorkoutType = Literal[tuple(WorkoutConstants.TYPES)]
GoalType = Literal[tuple(GoalConstants.TYPES)]
GoalPeriod = Literal[tuple(GoalConstants.PERIODS)]

NonNegative = Optional[float]


class _Args(BaseModel):
    # unlisted args pass through untouched; builders read the raw dict
    model_config = ConfigDict(extra="allow")


class TransactionArgs(_Args):
    type: Optional[TransactionType] = None
    amount: NonNegative = Field(default=None, ge=0)


class AddWorkoutArgs(_Args):
    type: Optional[WorkoutType] = None
    durationMinutes: NonNegative = Field(default=None, ge=0)


class EditWorkoutArgs(AddWorkoutArgs):
    pass


class AddFoodArgs(_Args):
    amount: NonNegative = Field(default=None, ge=0)


class FoodEntryArgs(_Args):
    calories: NonNegative = Field(default=None, ge=0)
    protein: NonNegative = Field(default=None, ge=0)
    carbs: NonNegative = Field(default=None, ge=0)
    fats: NonNegative = Field(default=None, ge=0)


class SleepArgs(_Args):
    sleepHours: NonNegative = Field(default=None, ge=0)


class AddGoalArgs(_Args):
    type: Optional[GoalType] = None
    target: NonNegative = Field(default=None, ge=0)
    period: Optional[GoalPeriod] = None


class EditGoalArgs(_Args):
    goalType: Optional[GoalType] = None
    target: NonNegative = Field(default=None, ge=0)
    period: Optional[GoalPeriod] = None


ARG_VALIDATORS: Dict[str, Type[_Args]] = {
    "add_transaction": TransactionArgs,
    "edit_transaction": TransactionArgs,
    "add_workout": AddWorkoutArgs,
    "edit_workout": EditWorkoutArgs,
    "add_food": AddFoodArgs,
    "edit_food_entry": FoodEntryArgs,
    "log_sleep": SleepArgs,
    "edit_check_in": SleepArgs,
    "add_goal": AddGoalArgs,
    "edit_goal": EditGoalArgs,
}


def _without_nulls(args: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in args.items() if value is not None and value != ""}


def validate_directive(directive: IntentDirective) -> Optional[IntentDirective]:
    """
    Check a directive's arguments against its intent's validator.

    Returns:
        The directive with numeric strings coerced to numbers, or None when the
        arguments are malformed (a warning is logged).
    """
    validator = ARG_VALIDATORS.get(directive.name)
    if validator is None:
        return directive

    args = _without_nulls(directive.args)
    try:
        checked = validator.model_validate(args)
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
        logger.warning(f"[Validator] Dropping {directive.name}: invalid {', '.join(fields)}")
        return None

    coerced = {**directive.args, **checked.model_dump(exclude_unset=True)}
    return IntentDirective(name=directive.name, args=coerced)


def validate_directives(directives: List[IntentDirective]) -> List[IntentDirective]:
    """Validate each directive independently; malformed ones are dropped."""
    valid = []
    for directive in directives:
        checked = validate_directive(directive)
        if checked is not None:
            valid.append(checked)
    return valid
