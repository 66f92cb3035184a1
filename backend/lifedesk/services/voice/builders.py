"""
Action builders: turn loosely typed directive arguments into strict built actions.

Add-style intents get every field filled in from the DEFAULTS table below.
Edit/delete intents are sparse: only arguments the model actually sent appear in
the action, as declared in SPARSE_FIELDS, so an edit never overwrites a stored
value with a default.
"""
import math
from typing import Any, Callable, Dict, List, Optional, Tuple

from lifedesk.core.config import Settings, get_settings
from lifedesk.core.constants import (
    FoodConstants,
    GoalConstants,
    ScheduleConstants,
    TransactionConstants,
    WorkoutConstants,
)
from lifedesk.core.logging import get_logger
from lifedesk.db.schema import IntentDirective, VoiceContext
from lifedesk.services.voice.actions import (
    ACTION_MODELS,
    ActionBase,
    AddFood,
    AddGoal,
    AddSchedule,
    AddTransaction,
    AddWorkout,
    Exercise,
    LogSleep,
    ScheduleItem,
)
from lifedesk.services.voice.nutrition import NutritionEnricher
from lifedesk.utils.time_utils import is_valid_date_str, local_to_utc, normalize_time, parse_date

logger = get_logger("services.voice.builders")


# Defaults applied when an add-style argument is missing or invalid
DEFAULTS: Dict[str, Dict[str, Any]] = {
    "add_schedule": {
        "start_time": ScheduleConstants.DEFAULT_START_TIME,
        "end_time": ScheduleConstants.DEFAULT_END_TIME,
        "category": ScheduleConstants.DEFAULT_CATEGORY,
        "recurrence": None,  # unknown recurrence is omitted, not defaulted
    },
    "add_transaction": {
        "type": TransactionConstants.DEFAULT_TYPE,
        "category": TransactionConstants.DEFAULT_CATEGORY,
        "amount": 0,
        "is_recurring": False,
    },
    "add_workout": {
        "title": WorkoutConstants.DEFAULT_TITLE,
        "type": WorkoutConstants.DEFAULT_TYPE,
        "duration_minutes": WorkoutConstants.DEFAULT_DURATION_MINUTES,
    },
    "add_food": {
        "amount": FoodConstants.DEFAULT_QUANTITY,
        "unit": FoodConstants.DEFAULT_UNIT,
    },
    "log_sleep": {
        "sleep_hours": 0,
    },
    "add_goal": {
        "type": GoalConstants.DEFAULT_TYPE,
        "period": GoalConstants.DEFAULT_PERIOD,
        "target": GoalConstants.DEFAULT_TARGET,
    },
}


# ---------------------------------------------------------------------------
# Coercion helpers. Each returns None when the value is unusable.
# ---------------------------------------------------------------------------

def as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def as_number(value: Any, minimum: Optional[float] = None) -> Optional[float]:
    """Finite number (numeric strings accepted), optionally bounded below."""
    if isinstance(value, bool) or value is None or value == "":
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    if minimum is not None and number < minimum:
        return None
    return int(number) if number.is_integer() else number


def as_non_negative(value: Any) -> Optional[float]:
    return as_number(value, minimum=0)


def as_flag(value: Any) -> Optional[bool]:
    """Real booleans as-is; "true"/"1" strings are true, any other string false."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1")
    return None


def one_of(allowed: List[str]) -> Callable[[Any], Optional[str]]:
    def check(value: Any) -> Optional[str]:
        return value if isinstance(value, str) and value in allowed else None
    return check


def as_date(value: Any) -> Optional[str]:
    text = as_text(value)
    return text if text and is_valid_date_str(text) else None


def as_exercises(value: Any) -> Optional[List[Exercise]]:
    """Keep entries with a non-empty name; sets/reps clamped to >= 0."""
    if not isinstance(value, list):
        return None
    exercises = []
    for entry in value:
        if not isinstance(entry, dict):
            continue
        name = as_text(entry.get("name"))
        if not name:
            continue
        exercises.append(Exercise(
            name=name,
            sets=int(max(0, as_number(entry.get("sets")) or 0)),
            reps=int(max(0, as_number(entry.get("reps")) or 0)),
            weight=as_non_negative(entry.get("weight")),
            notes=as_text(entry.get("notes")),
        ))
    return exercises


def schedule_category(value: Any) -> str:
    return value if value in ScheduleConstants.CATEGORIES else ScheduleConstants.DEFAULT_CATEGORY


def any_transaction_category(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if value in TransactionConstants.all_categories() else TransactionConstants.DEFAULT_CATEGORY


# Sparse edit/delete fields: argument name -> (action field, coercer)
SPARSE_FIELDS: Dict[str, List[Tuple[str, str, Callable[[Any], Any]]]] = {
    "edit_schedule": [
        ("itemId", "item_id", as_text),
        ("itemTitle", "item_title", as_text),
        ("title", "title", as_text),
        ("startTime", "start_time", normalize_time),
        ("endTime", "end_time", normalize_time),
        ("category", "category", lambda v: schedule_category(v) if v is not None else None),
    ],
    "delete_schedule": [
        ("itemId", "item_id", as_text),
        ("itemTitle", "item_title", as_text),
    ],
    "edit_transaction": [
        ("transactionId", "transaction_id", as_text),
        ("description", "description", as_text),
        ("date", "date", as_date),
        ("type", "type", one_of(TransactionConstants.TYPES)),
        ("amount", "amount", as_non_negative),
        ("category", "category", any_transaction_category),
    ],
    "delete_transaction": [
        ("transactionId", "transaction_id", as_text),
        ("description", "description", as_text),
        ("date", "date", as_date),
    ],
    "edit_workout": [
        ("workoutId", "workout_id", as_text),
        ("workoutTitle", "workout_title", as_text),
        ("date", "date", as_date),
        ("title", "title", as_text),
        ("type", "type", one_of(WorkoutConstants.TYPES)),
        ("durationMinutes", "duration_minutes", as_non_negative),
        ("notes", "notes", lambda v: str(v) if v is not None else None),
        ("exercises", "exercises", as_exercises),
    ],
    "delete_workout": [
        ("workoutId", "workout_id", as_text),
        ("workoutTitle", "workout_title", as_text),
        ("date", "date", as_date),
    ],
    "edit_food_entry": [
        ("entryId", "entry_id", as_text),
        ("foodName", "food_name", as_text),
        ("date", "date", as_date),
        ("name", "name", as_text),
        ("calories", "calories", as_non_negative),
        ("protein", "protein", as_non_negative),
        ("carbs", "carbs", as_non_negative),
        ("fats", "fats", as_non_negative),
    ],
    "delete_food_entry": [
        ("entryId", "entry_id", as_text),
        ("foodName", "food_name", as_text),
        ("date", "date", as_date),
    ],
    "edit_check_in": [
        ("date", "date", as_date),
        ("sleepHours", "sleep_hours", as_non_negative),
    ],
    "delete_check_in": [
        ("date", "date", as_date),
    ],
    "edit_goal": [
        ("goalId", "goal_id", as_text),
        ("goalType", "goal_type", as_text),
        ("target", "target", as_non_negative),
        ("period", "period", one_of(GoalConstants.PERIODS)),
    ],
    "delete_goal": [
        ("goalId", "goal_id", as_text),
        ("goalType", "goal_type", as_text),
    ],
}


def map_sparse_args(intent: str, args: Dict[str, Any]) -> Dict[str, Any]:
    """Copy only present, usable arguments into action fields."""
    fields = {}
    for arg_name, field_name, coerce in SPARSE_FIELDS[intent]:
        if arg_name not in args:
            continue
        value = coerce(args[arg_name])
        if value is not None:
            fields[field_name] = value
    return fields


def to_utc(date: str, time: Optional[str], ctx: VoiceContext) -> Tuple[str, Optional[str]]:
    """Convert a local date+time with the context timezone; unchanged when not possible."""
    if time is None:
        return date, None
    converted = local_to_utc(date, time, ctx.timezone)
    return converted if converted is not None else (date, time)


class ActionBuilder:
    """Builds one action per directive. Unknown directive names produce no action."""

    def __init__(self, enricher: Optional[NutritionEnricher] = None, settings: Optional[Settings] = None):
        self.enricher = enricher or NutritionEnricher()
        self.settings = settings or get_settings()
        self._add_builders = {
            "add_schedule": self.build_add_schedule,
            "add_transaction": self.build_add_transaction,
            "add_workout": self.build_add_workout,
            "add_food": self.build_add_food,
            "log_sleep": self.build_log_sleep,
            "add_goal": self.build_add_goal,
        }
        covered = set(self._add_builders) | set(SPARSE_FIELDS) | {"unknown"}
        if covered != set(ACTION_MODELS):
            raise RuntimeError(f"Action builders out of sync with action models: {covered ^ set(ACTION_MODELS)}")

    async def build(self, directive: IntentDirective, ctx: VoiceContext) -> Optional[ActionBase]:
        name = directive.name
        args = directive.args or {}

        if name in self._add_builders:
            return await self._add_builders[name](args, ctx)
        if name in SPARSE_FIELDS:
            edit_fields = map_sparse_args(name, args)
            if name == "edit_schedule":
                for key in ("start_time", "end_time"):
                    if key in edit_fields:
                        edit_fields[key] = to_utc(ctx.today, edit_fields[key], ctx)[1]
            return ACTION_MODELS[name](**edit_fields)

        logger.warning(f"[Builder] Ignoring unknown directive '{name}'")
        return None

    async def build_add_schedule(self, args: Dict[str, Any], ctx: VoiceContext) -> Optional[AddSchedule]:
        defaults = DEFAULTS["add_schedule"]
        raw_items = args.get("items") if isinstance(args.get("items"), list) else []

        items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                continue
            title = as_text(raw.get("title"))
            if not title:
                continue
            local_date = parse_date(raw.get("date"), ctx.today)
            start = normalize_time(raw.get("startTime")) or defaults["start_time"]
            end = normalize_time(raw.get("endTime")) or defaults["end_time"]
            date, start = to_utc(local_date, start, ctx)
            end = to_utc(local_date, end, ctx)[1]
            recurrence = raw.get("recurrence")
            items.append(ScheduleItem(
                title=title,
                date=date,
                start_time=start,
                end_time=end,
                category=schedule_category(raw.get("category")),
                recurrence=recurrence if recurrence in ScheduleConstants.RECURRENCES else defaults["recurrence"],
            ))

        if not items:
            logger.warning("[Builder] add_schedule without any titled item, dropped")
            return None
        return AddSchedule(items=items)

    async def build_add_transaction(self, args: Dict[str, Any], ctx: VoiceContext) -> AddTransaction:
        defaults = DEFAULTS["add_transaction"]
        tx_type = one_of(TransactionConstants.TYPES)(args.get("type")) or defaults["type"]
        allowed = TransactionConstants.CATEGORIES[tx_type]
        description = as_text(args.get("description"))
        raw_category = args.get("category")

        if raw_category in allowed:
            category = raw_category
        elif tx_type == "expense" and not raw_category and self._looks_like_food_item(description):
            category = TransactionConstants.FOOD_CATEGORY
        else:
            category = defaults["category"]

        amount = as_non_negative(args.get("amount"))
        recurring = as_flag(args.get("isRecurring"))
        return AddTransaction(
            type=tx_type,
            amount=amount if amount is not None else defaults["amount"],
            currency=self.settings.default_currency,
            category=category,
            description=description,
            date=parse_date(args.get("date"), ctx.today),
            is_recurring=recurring if recurring is not None else defaults["is_recurring"],
        )

    def _looks_like_food_item(self, description: Optional[str]) -> bool:
        """A short single-word purchase ("Coke", "Bamba") is most likely food or drink."""
        return bool(
            description
            and len(description) < self.settings.food_purchase_description_max_length
            and " " not in description
        )

    async def build_add_workout(self, args: Dict[str, Any], ctx: VoiceContext) -> AddWorkout:
        defaults = DEFAULTS["add_workout"]
        duration = as_non_negative(args.get("durationMinutes"))
        return AddWorkout(
            date=parse_date(args.get("date"), ctx.today),
            title=as_text(args.get("title")) or defaults["title"],
            type=one_of(WorkoutConstants.TYPES)(args.get("type")) or defaults["type"],
            duration_minutes=duration if duration is not None else defaults["duration_minutes"],
            exercises=as_exercises(args.get("exercises")) or [],
            notes=as_text(args.get("notes")),
        )

    async def build_add_food(self, args: Dict[str, Any], ctx: VoiceContext) -> AddFood:
        defaults = DEFAULTS["add_food"]
        food = as_text(args.get("food")) or ""
        amount = as_number(args.get("amount"))
        if amount is None or amount <= 0:
            amount = defaults["amount"]
        unit = (as_text(args.get("unit")) or defaults["unit"]).lower()

        local_date = parse_date(args.get("date"), ctx.today)
        date, start_time = to_utc(local_date, normalize_time(args.get("startTime")), ctx)
        end_time = to_utc(local_date, normalize_time(args.get("endTime")), ctx)[1]

        nutrition = await self.enricher.resolve(food, amount, unit)
        return AddFood(
            food=food,
            amount=amount,
            unit=unit,
            date=date,
            name=nutrition.name,
            calories=nutrition.calories,
            protein=nutrition.protein,
            carbs=nutrition.carbs,
            fats=nutrition.fat,
            start_time=start_time,
            end_time=end_time,
        )

    async def build_log_sleep(self, args: Dict[str, Any], ctx: VoiceContext) -> LogSleep:
        hours = as_non_negative(args.get("sleepHours"))
        return LogSleep(
            sleep_hours=hours if hours is not None else DEFAULTS["log_sleep"]["sleep_hours"],
            date=parse_date(args.get("date"), ctx.today),
        )

    async def build_add_goal(self, args: Dict[str, Any], ctx: VoiceContext) -> AddGoal:
        defaults = DEFAULTS["add_goal"]
        target = as_non_negative(args.get("target"))
        return AddGoal(
            type=one_of(GoalConstants.TYPES)(args.get("type")) or defaults["type"],
            target=target if target is not None else defaults["target"],
            period=one_of(GoalConstants.PERIODS)(args.get("period")) or defaults["period"],
        )
