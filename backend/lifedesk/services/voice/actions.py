"""
Built actions: the validated, normalized form of one requested domain operation.

Each intent has its own model and all of them form one discriminated union on
"intent", so an action payload either parses into exactly one known shape or is
rejected. Add-style actions are ready to persist; edit/delete actions carry
resolution hints (an id or a name fragment) plus only the fields to change.
"""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, model_validator
from pydantic.alias_generators import to_camel

from lifedesk.core.constants import ScheduleConstants
from lifedesk.utils.time_utils import today_str


class ActionBase(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def to_wire(self) -> Dict[str, Any]:
        """camelCase dict without unset (None) fields, as sent to clients."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------

class ScheduleItem(ActionBase):
    title: str
    date: str = Field(default_factory=today_str)
    start_time: str = ScheduleConstants.DEFAULT_START_TIME
    end_time: str = ScheduleConstants.DEFAULT_END_TIME
    category: str = "Other"
    recurrence: Optional[str] = None


class AddSchedule(ActionBase):
    intent: Literal["add_schedule"] = "add_schedule"
    items: List[ScheduleItem] = Field(default_factory=list)


class EditSchedule(ActionBase):
    intent: Literal["edit_schedule"] = "edit_schedule"
    item_id: Optional[str] = None
    item_title: Optional[str] = None
    title: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    category: Optional[str] = None


class DeleteSchedule(ActionBase):
    intent: Literal["delete_schedule"] = "delete_schedule"
    item_id: Optional[str] = None
    item_title: Optional[str] = None


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

class AddTransaction(ActionBase):
    intent: Literal["add_transaction"] = "add_transaction"
    type: str = "expense"
    amount: float = 0
    currency: str = "USD"
    category: str = "Other"
    description: Optional[str] = None
    date: str = Field(default_factory=today_str)
    is_recurring: bool = False


class EditTransaction(ActionBase):
    intent: Literal["edit_transaction"] = "edit_transaction"
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    type: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None


class DeleteTransaction(ActionBase):
    intent: Literal["delete_transaction"] = "delete_transaction"
    transaction_id: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------

class Exercise(ActionBase):
    name: str
    sets: int = 0
    reps: int = 0
    weight: Optional[float] = None
    notes: Optional[str] = None


class AddWorkout(ActionBase):
    intent: Literal["add_workout"] = "add_workout"
    date: str = Field(default_factory=today_str)
    title: str = "Workout"
    type: str = "cardio"
    duration_minutes: float = 30
    exercises: List[Exercise] = Field(default_factory=list)
    notes: Optional[str] = None


class EditWorkout(ActionBase):
    intent: Literal["edit_workout"] = "edit_workout"
    workout_id: Optional[str] = None
    workout_title: Optional[str] = None
    date: Optional[str] = None
    title: Optional[str] = None
    type: Optional[str] = None
    duration_minutes: Optional[float] = None
    notes: Optional[str] = None
    exercises: Optional[List[Exercise]] = None


class DeleteWorkout(ActionBase):
    intent: Literal["delete_workout"] = "delete_workout"
    workout_id: Optional[str] = None
    workout_title: Optional[str] = None
    date: Optional[str] = None


# ---------------------------------------------------------------------------
# Food entries
# ---------------------------------------------------------------------------

class AddFood(ActionBase):
    intent: Literal["add_food"] = "add_food"
    food: Optional[str] = None
    amount: float = 100
    unit: str = "g"
    date: str = Field(default_factory=today_str)
    name: str = "Unknown"
    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fats: float = 0
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _name_from_food(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("name") and data.get("food"):
            return {**data, "name": data["food"]}
        return data


class EditFoodEntry(ActionBase):
    intent: Literal["edit_food_entry"] = "edit_food_entry"
    entry_id: Optional[str] = None
    food_name: Optional[str] = None
    date: Optional[str] = None
    name: Optional[str] = None
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None


class DeleteFoodEntry(ActionBase):
    intent: Literal["delete_food_entry"] = "delete_food_entry"
    entry_id: Optional[str] = None
    food_name: Optional[str] = None
    date: Optional[str] = None


# ---------------------------------------------------------------------------
# Check-ins (sleep)
# ---------------------------------------------------------------------------

class LogSleep(ActionBase):
    intent: Literal["log_sleep"] = "log_sleep"
    sleep_hours: float = 0
    date: str = Field(default_factory=today_str)


class EditCheckIn(ActionBase):
    intent: Literal["edit_check_in"] = "edit_check_in"
    date: Optional[str] = None
    sleep_hours: Optional[float] = None


class DeleteCheckIn(ActionBase):
    intent: Literal["delete_check_in"] = "delete_check_in"
    date: Optional[str] = None


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

class AddGoal(ActionBase):
    intent: Literal["add_goal"] = "add_goal"
    type: str = "workouts"
    target: float = 0
    period: str = "weekly"


class EditGoal(ActionBase):
    intent: Literal["edit_goal"] = "edit_goal"
    goal_id: Optional[str] = None
    goal_type: Optional[str] = None
    target: Optional[float] = None
    period: Optional[str] = None


class DeleteGoal(ActionBase):
    intent: Literal["delete_goal"] = "delete_goal"
    goal_id: Optional[str] = None
    goal_type: Optional[str] = None


class UnknownAction(ActionBase):
    intent: Literal["unknown"] = "unknown"
    message: Optional[str] = None


BuiltAction = Annotated[
    Union[
        AddSchedule, EditSchedule, DeleteSchedule,
        AddTransaction, EditTransaction, DeleteTransaction,
        AddWorkout, EditWorkout, DeleteWorkout,
        AddFood, EditFoodEntry, DeleteFoodEntry,
        LogSleep, EditCheckIn, DeleteCheckIn,
        AddGoal, EditGoal, DeleteGoal,
        UnknownAction,
    ],
    Field(discriminator="intent"),
]

built_action_adapter: TypeAdapter = TypeAdapter(BuiltAction)

ACTION_MODELS = {
    model.model_fields["intent"].default: model
    for model in (
        AddSchedule, EditSchedule, DeleteSchedule,
        AddTransaction, EditTransaction, DeleteTransaction,
        AddWorkout, EditWorkout, DeleteWorkout,
        AddFood, EditFoodEntry, DeleteFoodEntry,
        LogSleep, EditCheckIn, DeleteCheckIn,
        AddGoal, EditGoal, DeleteGoal,
        UnknownAction,
    )
}
