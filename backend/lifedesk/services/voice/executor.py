"""
Batch executor: applies built actions to the domain services.

Actions run in order, one result each. A failing action never stops the rest and
nothing is rolled back across actions.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from lifedesk.core.logging import get_logger
from lifedesk.db.schema import ExecuteResult
from lifedesk.services.voice import resolver
from lifedesk.services.voice.actions import (
    ACTION_MODELS,
    ActionBase,
    AddFood,
    AddGoal,
    AddSchedule,
    AddTransaction,
    AddWorkout,
    DeleteCheckIn,
    DeleteFoodEntry,
    DeleteGoal,
    DeleteSchedule,
    DeleteTransaction,
    DeleteWorkout,
    EditCheckIn,
    EditFoodEntry,
    EditGoal,
    EditSchedule,
    EditTransaction,
    EditWorkout,
    LogSleep,
    UnknownAction,
    built_action_adapter,
)
from lifedesk.services.voice.fallback import UNKNOWN_INTENT_MESSAGE

logger = get_logger("services.voice.executor")

UNSUPPORTED_MESSAGE = "Unsupported action"


class ActionFailed(Exception):
    """Expected per-action failure (missing record, nothing to add)."""


@dataclass
class DomainServices:
    """User-scoped domain services: list/create/update/remove (schedule also create_batch)."""
    schedule: Any
    transactions: Any
    workouts: Any
    food_entries: Any
    check_ins: Any
    goals: Any


def _fields(action: ActionBase, *names: str) -> Dict[str, Any]:
    """Selected action fields that are set, as a service payload."""
    values = {}
    for name in names:
        value = getattr(action, name)
        if value is not None:
            values[name] = value
    if "exercises" in values:
        values["exercises"] = [exercise.model_dump() for exercise in values["exercises"]]
    return values


def _require(record: Optional[Any], label: str) -> Any:
    if record is None:
        raise ActionFailed(f"{label} not found")
    return record


def _record_id(record: Any) -> str:
    return record["id"] if isinstance(record, dict) else record.id


# ---------------------------------------------------------------------------
# Schedule
# ---------------------------------------------------------------------------

def _add_schedule(action: AddSchedule, user_id: str, services: DomainServices) -> str:
    if not action.items:
        raise ActionFailed("No schedule items")
    services.schedule.create_batch(user_id, [item.model_dump() for item in action.items])
    return f"Added {len(action.items)} item(s)"


def _find_schedule_item(action, user_id: str, services: DomainServices) -> Any:
    record = resolver.resolve_record(
        services.schedule.list(user_id), action.item_id, action.item_title, "title"
    )
    return _require(record, "Schedule item")


def _edit_schedule(action: EditSchedule, user_id: str, services: DomainServices) -> None:
    record = _find_schedule_item(action, user_id, services)
    services.schedule.update(
        user_id, _record_id(record), _fields(action, "title", "start_time", "end_time", "category")
    )


def _delete_schedule(action: DeleteSchedule, user_id: str, services: DomainServices) -> None:
    record = _find_schedule_item(action, user_id, services)
    services.schedule.remove(user_id, _record_id(record))


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------

def _add_transaction(action: AddTransaction, user_id: str, services: DomainServices) -> None:
    services.transactions.create(user_id, _fields(
        action, "type", "amount", "currency", "category", "description", "date", "is_recurring"
    ))


def _find_transaction(action, user_id: str, services: DomainServices) -> Any:
    record = resolver.resolve_record(
        services.transactions.list(user_id), action.transaction_id, action.description, "description"
    )
    return _require(record, "Transaction")


def _edit_transaction(action: EditTransaction, user_id: str, services: DomainServices) -> None:
    record = _find_transaction(action, user_id, services)
    # description identifies the record, it is not rewritten
    services.transactions.update(
        user_id, _record_id(record), _fields(action, "type", "amount", "category", "date")
    )


def _delete_transaction(action: DeleteTransaction, user_id: str, services: DomainServices) -> None:
    record = _find_transaction(action, user_id, services)
    services.transactions.remove(user_id, _record_id(record))


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------

def _add_workout(action: AddWorkout, user_id: str, services: DomainServices) -> None:
    services.workouts.create(user_id, _fields(
        action, "date", "title", "type", "duration_minutes", "exercises", "notes"
    ))


def _find_workout(action, user_id: str, services: DomainServices) -> Any:
    record = resolver.resolve_record(
        services.workouts.list(user_id), action.workout_id, action.workout_title, "title"
    )
    return _require(record, "Workout")


def _edit_workout(action: EditWorkout, user_id: str, services: DomainServices) -> None:
    record = _find_workout(action, user_id, services)
    services.workouts.update(user_id, _record_id(record), _fields(
        action, "date", "title", "type", "duration_minutes", "exercises", "notes"
    ))


def _delete_workout(action: DeleteWorkout, user_id: str, services: DomainServices) -> None:
    record = _find_workout(action, user_id, services)
    services.workouts.remove(user_id, _record_id(record))


# ---------------------------------------------------------------------------
# Food entries
# ---------------------------------------------------------------------------

def _add_food(action: AddFood, user_id: str, services: DomainServices) -> None:
    payload = _fields(
        action, "date", "name", "calories", "protein", "carbs", "fats", "start_time", "end_time"
    )
    payload["portion_amount"] = action.amount
    payload["portion_unit"] = action.unit
    services.food_entries.create(user_id, payload)


def _find_food_entry(action, user_id: str, services: DomainServices) -> Any:
    record = resolver.resolve_record(
        services.food_entries.list(user_id), action.entry_id, action.food_name, "name"
    )
    return _require(record, "Food entry")


def _edit_food_entry(action: EditFoodEntry, user_id: str, services: DomainServices) -> None:
    record = _find_food_entry(action, user_id, services)
    services.food_entries.update(user_id, _record_id(record), _fields(
        action, "date", "name", "calories", "protein", "carbs", "fats"
    ))


def _delete_food_entry(action: DeleteFoodEntry, user_id: str, services: DomainServices) -> None:
    record = _find_food_entry(action, user_id, services)
    services.food_entries.remove(user_id, _record_id(record))


# ---------------------------------------------------------------------------
# Check-ins
# ---------------------------------------------------------------------------

def _log_sleep(action: LogSleep, user_id: str, services: DomainServices) -> str:
    existing = resolver.resolve_check_in(services.check_ins.list(user_id), action.date)
    if existing is not None:
        services.check_ins.update(user_id, _record_id(existing), {"sleep_hours": action.sleep_hours})
    else:
        services.check_ins.create(user_id, {"date": action.date, "sleep_hours": action.sleep_hours})
    return f"Logged {action.sleep_hours:g} hours of sleep"


def _find_check_in(action, user_id: str, services: DomainServices) -> Any:
    if not action.date:
        raise ActionFailed("Date required")
    record = resolver.resolve_check_in(services.check_ins.list(user_id), action.date)
    return _require(record, "Check-in")


def _edit_check_in(action: EditCheckIn, user_id: str, services: DomainServices) -> None:
    record = _find_check_in(action, user_id, services)
    services.check_ins.update(user_id, _record_id(record), _fields(action, "sleep_hours"))


def _delete_check_in(action: DeleteCheckIn, user_id: str, services: DomainServices) -> None:
    record = _find_check_in(action, user_id, services)
    services.check_ins.remove(user_id, _record_id(record))


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------

def _add_goal(action: AddGoal, user_id: str, services: DomainServices) -> None:
    services.goals.create(user_id, _fields(action, "type", "target", "period"))


def _find_goal(action, user_id: str, services: DomainServices) -> Any:
    record = resolver.resolve_record(
        services.goals.list(user_id), action.goal_id, action.goal_type, "type"
    )
    return _require(record, "Goal")


def _edit_goal(action: EditGoal, user_id: str, services: DomainServices) -> None:
    record = _find_goal(action, user_id, services)
    services.goals.update(user_id, _record_id(record), _fields(action, "target", "period"))


def _delete_goal(action: DeleteGoal, user_id: str, services: DomainServices) -> None:
    record = _find_goal(action, user_id, services)
    services.goals.remove(user_id, _record_id(record))


def _unknown(action: UnknownAction, user_id: str, services: DomainServices) -> None:
    raise ActionFailed(action.message or UNKNOWN_INTENT_MESSAGE)


HANDLERS: Dict[type, Callable[[Any, str, DomainServices], Optional[str]]] = {
    AddSchedule: _add_schedule,
    EditSchedule: _edit_schedule,
    DeleteSchedule: _delete_schedule,
    AddTransaction: _add_transaction,
    EditTransaction: _edit_transaction,
    DeleteTransaction: _delete_transaction,
    AddWorkout: _add_workout,
    EditWorkout: _edit_workout,
    DeleteWorkout: _delete_workout,
    AddFood: _add_food,
    EditFoodEntry: _edit_food_entry,
    DeleteFoodEntry: _delete_food_entry,
    LogSleep: _log_sleep,
    EditCheckIn: _edit_check_in,
    DeleteCheckIn: _delete_check_in,
    AddGoal: _add_goal,
    EditGoal: _edit_goal,
    DeleteGoal: _delete_goal,
    UnknownAction: _unknown,
}

_missing = set(ACTION_MODELS.values()) - set(HANDLERS)
if _missing:
    raise RuntimeError(f"No executor handler for: {sorted(model.__name__ for model in _missing)}")


def _parse_action(raw: Union[ActionBase, Dict[str, Any]]) -> Optional[ActionBase]:
    if isinstance(raw, ActionBase):
        return raw
    try:
        return built_action_adapter.validate_python(raw)
    except ValidationError as e:
        logger.warning(f"[Executor] Rejected action payload: {e.error_count()} error(s)")
        return None


def execute_action(raw: Union[ActionBase, Dict[str, Any]], user_id: str, services: DomainServices) -> ExecuteResult:
    """Execute one action. Failures come back as results, never as exceptions."""
    if isinstance(raw, ActionBase):
        intent = raw.intent
    else:
        intent = str(raw.get("intent") or "unknown") if isinstance(raw, dict) else "unknown"

    action = _parse_action(raw) if isinstance(raw, (ActionBase, dict)) else None
    handler = HANDLERS.get(type(action)) if action is not None else None
    if handler is None:
        return ExecuteResult(intent=intent, success=False, message=UNSUPPORTED_MESSAGE)

    try:
        message = handler(action, user_id, services)
    except ActionFailed as e:
        return ExecuteResult(intent=intent, success=False, message=str(e))
    except Exception as e:
        logger.warning(f"[Executor] {intent} failed for user {user_id}: {e}", exc_info=True)
        return ExecuteResult(intent=intent, success=False, message=str(e) or type(e).__name__)

    return ExecuteResult(intent=intent, success=True, message=message)


async def execute_actions(
    actions: List[Union[ActionBase, Dict[str, Any]]],
    user_id: str,
    services: DomainServices,
) -> List[ExecuteResult]:
    """
    Execute actions sequentially, in order.

    Args:
        actions: Built actions, as models or wire dicts (camelCase or snake_case)
        user_id: Acting user
        services: Domain services for that user's data

    Returns:
        Exactly one result per action, in input order
    """
    results = []
    for raw in actions or []:
        result = execute_action(raw, user_id, services)
        logger.info(f"[Executor] {result.intent}: {'ok' if result.success else result.message}")
        results.append(result)
    return results
