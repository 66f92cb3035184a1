"""
Application-wide constants.
Centralizes the allowed values shared by the voice pipeline and the domain services.
"""
from typing import Dict, List


class ScheduleConstants:
    """Constants related to daily schedule items."""

    CATEGORIES: List[str] = [
        "Work",
        "Exercise",
        "Meal",
        "Sleep",
        "Personal",
        "Social",
        "Other",
    ]

    RECURRENCES: List[str] = ["daily", "weekdays", "weekends"]

    DEFAULT_START_TIME: str = "09:00"
    DEFAULT_END_TIME: str = "10:00"
    DEFAULT_CATEGORY: str = "Other"


class TransactionConstants:
    """Constants related to income and expense records."""

    TYPES: List[str] = ["income", "expense"]

    CATEGORIES: Dict[str, List[str]] = {
        "expense": [
            "Food",
            "Housing",
            "Transportation",
            "Entertainment",
            "Shopping",
            "Healthcare",
            "Education",
            "Other",
        ],
        "income": ["Salary", "Freelance", "Investment", "Gift", "Other"],
    }

    DEFAULT_TYPE: str = "expense"
    DEFAULT_CATEGORY: str = "Other"
    FOOD_CATEGORY: str = "Food"

    @classmethod
    def all_categories(cls) -> List[str]:
        """Union of expense and income categories, in declaration order."""
        seen: List[str] = []
        for categories in cls.CATEGORIES.values():
            for category in categories:
                if category not in seen:
                    seen.append(category)
        return seen


class WorkoutConstants:
    """Constants related to workout logs."""

    TYPES: List[str] = ["strength", "cardio", "flexibility", "sports"]

    DEFAULT_TITLE: str = "Workout"
    DEFAULT_TYPE: str = "cardio"
    DEFAULT_DURATION_MINUTES: int = 30


class FoodConstants:
    """Constants related to food logging and nutrition scaling."""

    REFERENCE_QUANTITY: float = 100.0
    DEFAULT_QUANTITY: float = 100.0
    DEFAULT_UNIT: str = "g"

    PREPARATION_COOKED: str = "cooked"
    PREPARATION_UNCOOKED: str = "uncooked"


class GoalConstants:
    """Constants related to user goals."""

    TYPES: List[str] = ["calories", "workouts", "savings"]
    PERIODS: List[str] = ["weekly", "monthly", "yearly"]

    DEFAULT_TYPE: str = "workouts"
    DEFAULT_PERIOD: str = "weekly"
    DEFAULT_TARGET: float = 0


class LimitsConstants:
    """Limits and thresholds used throughout the application."""

    # Diagnostic log payloads
    LOG_TRANSCRIPT_MAX_LENGTH: int = 2000

    # Timezone names longer than this are rejected outright
    TIMEZONE_MAX_LENGTH: int = 64


__all__ = [
    'ScheduleConstants',
    'TransactionConstants',
    'WorkoutConstants',
    'FoodConstants',
    'GoalConstants',
    'LimitsConstants',
]
