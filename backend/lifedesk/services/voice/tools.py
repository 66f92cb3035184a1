"""
Tool catalog offered to the language model, in function-calling format.
One tool per intent the executor understands.
"""
from typing import Any, Dict, List, Optional

from lifedesk.core.constants import GoalConstants, ScheduleConstants, TransactionConstants, WorkoutConstants

DATE_DEFAULT_TODAY = {"type": "string", "description": "YYYY-MM-DD, default today"}
DATE_HINT = {"type": "string", "description": "YYYY-MM-DD for disambiguation"}
TIME_24H = {"type": "string", "description": "HH:MM 24h"}
SCHEDULE_CATEGORY = {"type": "string", "enum": ScheduleConstants.CATEGORIES}
WORKOUT_TYPE = {"type": "string", "enum": WorkoutConstants.TYPES}
GOAL_PERIOD = {"type": "string", "enum": GoalConstants.PERIODS}


def _tool(name: str, description: str, properties: Dict[str, Any], required: Optional[List[str]] = None) -> Dict[str, Any]:
    parameters = {"type": "object", "properties": properties}
    if required:
        parameters["required"] = required
    return {
        "type": "function",
        "function": {"name": name, "description": description, "parameters": parameters},
    }


def _exercises(description: str) -> Dict[str, Any]:
    return {
        "type": "array",
        "description": description,
        "items": {
            "type": "object",
            "properties": {
                "name": {
                    "type": "string",
                    "description": "Exercise name as the user said it, capitalized (Squat, Deadlift, Bench Press)",
                },
                "sets": {"type": "number", "description": "Number of sets"},
                "reps": {"type": "number", "description": "Reps per set"},
                "weight": {"type": "number", "description": "Weight in kg (optional)"},
                "notes": {"type": "string"},
            },
            "required": ["name", "sets", "reps"],
        },
    }


VOICE_TOOLS: List[Dict[str, Any]] = [
    _tool(
        "add_schedule",
        "Add one or more items to the daily schedule. User may say work 8-18, eat 18-22, "
        "exercise at 7, etc. Hebrew or English.",
        {
            "items": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "title": {"type": "string", "description": "Activity name: Work, Eat, Exercise, etc."},
                        "date": DATE_DEFAULT_TODAY,
                        "startTime": TIME_24H,
                        "endTime": TIME_24H,
                        "category": SCHEDULE_CATEGORY,
                        "recurrence": {
                            "type": "string",
                            "enum": ScheduleConstants.RECURRENCES,
                            "description": "Repeating: daily, weekdays (Mon-Fri), weekends",
                        },
                    },
                    "required": ["title"],
                },
            },
        },
        ["items"],
    ),
    _tool(
        "edit_schedule",
        "Edit an existing schedule item. E.g. change work from 9-5 to 10-6.",
        {
            "itemTitle": {"type": "string", "description": "Activity name to edit (e.g. Work, Eat)"},
            "itemId": {"type": "string", "description": "Id if known"},
            "startTime": TIME_24H,
            "endTime": TIME_24H,
            "title": {"type": "string"},
            "category": SCHEDULE_CATEGORY,
        },
    ),
    _tool(
        "delete_schedule",
        "Remove an item from the schedule by title or id.",
        {
            "itemTitle": {"type": "string", "description": "Activity name to remove"},
            "itemId": {"type": "string", "description": "Optional id if user specified"},
        },
    ),
    _tool(
        "add_transaction",
        "Record an income or expense. Only call this when the user EXPLICITLY mentions an amount "
        "of money (e.g. \"for 5\", \"cost 10\", \"paid 20\"). Do NOT call for a food or drink name "
        "alone (e.g. \"Diet Coke\", \"coffee\") with no price; never invent an amount. When the user "
        "states a price for food or drink, use category \"Food\" and description = item name, and "
        "also call add_food.",
        {
            "type": {"type": "string", "enum": TransactionConstants.TYPES},
            "amount": {"type": "number", "description": "Amount in currency units"},
            "category": {
                "type": "string",
                "enum": TransactionConstants.all_categories(),
                "description": "Expense: Food, Housing, Transportation, Entertainment, Shopping, Healthcare, "
                               "Education, Other. Income: Salary, Freelance, Investment, Gift, Other. "
                               "Use Food for any food or drink purchase.",
            },
            "description": {
                "type": "string",
                "description": "Optional description; for food/drink purchases use the item name (e.g. Coke)",
            },
            "date": DATE_DEFAULT_TODAY,
            "isRecurring": {"type": "boolean", "description": "Recurring expense/income"},
        },
        ["type", "amount"],
    ),
    _tool(
        "edit_transaction",
        "Edit an income or expense.",
        {
            "description": {"type": "string", "description": "Description to match"},
            "transactionId": {"type": "string"},
            "date": {"type": "string"},
            "type": {"type": "string", "enum": TransactionConstants.TYPES},
            "amount": {"type": "number"},
            "category": {"type": "string"},
        },
    ),
    _tool(
        "delete_transaction",
        "Remove a transaction.",
        {
            "description": {"type": "string"},
            "transactionId": {"type": "string"},
            "date": {"type": "string"},
        },
    ),
    _tool(
        "add_workout",
        "Log a workout. When the user gives no workout name use title \"Workout\"; a program name "
        "(e.g. SS, Starting Strength) becomes the title, an exercise name never does. For strength "
        "with sets/reps/weight use type \"strength\" and fill the exercises array. durationMinutes "
        "is optional (default 30).",
        {
            "date": DATE_DEFAULT_TODAY,
            "title": {"type": "string", "description": "Workout name, \"Workout\" when none given"},
            "type": {**WORKOUT_TYPE, "description": "Use strength when user mentions sets/reps/weight"},
            "durationMinutes": {"type": "number", "description": "Optional; default 30"},
            "notes": {"type": "string"},
            "exercises": _exercises(
                "For strength: each exercise with name, sets, reps, weight (kg). "
                "\"5 sets of 3\" and \"3x3\" both mean sets x reps."
            ),
        },
        ["title", "type"],
    ),
    _tool(
        "edit_workout",
        "Edit a logged workout: title, type, duration, notes, date, or the exercises list. To change, "
        "add or remove one exercise pass the full updated exercises array.",
        {
            "workoutTitle": {"type": "string"},
            "workoutId": {"type": "string"},
            "date": DATE_HINT,
            "title": {"type": "string"},
            "type": WORKOUT_TYPE,
            "durationMinutes": {"type": "number"},
            "notes": {"type": "string"},
            "exercises": _exercises("Full list of exercises (replaces existing)."),
        },
    ),
    _tool(
        "delete_workout",
        "Remove a workout.",
        {
            "workoutTitle": {"type": "string"},
            "workoutId": {"type": "string"},
            "date": DATE_HINT,
        },
    ),
    _tool(
        "add_food",
        "Log food or drink consumed. If the user says ONLY a food or drink name (e.g. \"Diet Coke\", "
        "\"ate an apple\") without buying or a price, call ONLY add_food. When the user says they "
        "bought X for Y money, call BOTH add_transaction and add_food. Output food name in English.",
        {
            "food": {"type": "string", "description": "Food name in English"},
            "amount": {"type": "number", "description": "Quantity"},
            "unit": {"type": "string", "description": "g, kg, ml, L, cup, slice, serving, etc."},
            "date": DATE_DEFAULT_TODAY,
            "startTime": {**TIME_24H, "description": "Meal start, HH:MM 24h (optional)"},
            "endTime": {**TIME_24H, "description": "Meal end, HH:MM 24h (optional)"},
        },
        ["food"],
    ),
    _tool(
        "edit_food_entry",
        "Edit a logged food entry.",
        {
            "foodName": {"type": "string"},
            "entryId": {"type": "string"},
            "date": {"type": "string"},
            "name": {"type": "string"},
            "calories": {"type": "number"},
            "protein": {"type": "number"},
            "carbs": {"type": "number"},
            "fats": {"type": "number"},
        },
    ),
    _tool(
        "delete_food_entry",
        "Remove a food log.",
        {
            "foodName": {"type": "string"},
            "entryId": {"type": "string"},
            "date": {"type": "string"},
        },
    ),
    _tool(
        "log_sleep",
        "Log sleep duration in hours. User may say slept 8 hours, slept 7, "
        "slept from 23 to 7 (8 hours), etc.",
        {
            "sleepHours": {"type": "number", "description": "Hours slept"},
            "date": DATE_DEFAULT_TODAY,
        },
        ["sleepHours"],
    ),
    _tool(
        "edit_check_in",
        "Update sleep hours for a date.",
        {
            "date": {"type": "string", "description": "YYYY-MM-DD"},
            "sleepHours": {"type": "number"},
        },
        ["date", "sleepHours"],
    ),
    _tool(
        "delete_check_in",
        "Remove a sleep log.",
        {"date": {"type": "string", "description": "YYYY-MM-DD"}},
        ["date"],
    ),
    _tool(
        "add_goal",
        "Add a goal. E.g. save 500 monthly, 3 workouts per week.",
        {
            "type": {"type": "string", "enum": GoalConstants.TYPES},
            "target": {"type": "number"},
            "period": GOAL_PERIOD,
        },
        ["type", "target", "period"],
    ),
    _tool(
        "edit_goal",
        "Edit a goal.",
        {
            "goalType": {"type": "string"},
            "goalId": {"type": "string"},
            "target": {"type": "number"},
            "period": GOAL_PERIOD,
        },
    ),
    _tool(
        "delete_goal",
        "Remove a goal.",
        {
            "goalType": {"type": "string"},
            "goalId": {"type": "string"},
        },
    ),
]

TOOL_NAMES = [tool["function"]["name"] for tool in VOICE_TOOLS]
