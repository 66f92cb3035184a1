"""
Tests for action builders: defaults for add-style intents, sparse edits.
"""
import asyncio

from lifedesk.core.config import Settings
from lifedesk.db.schema import IntentDirective, VoiceContext
from lifedesk.services.voice.builders import ActionBuilder
from lifedesk.services.voice.nutrition import NutritionEnricher

CTX = VoiceContext(today="2025-06-01", user_id="user-1")


def build(name, args, ctx=CTX, enricher=None):
    builder = ActionBuilder(enricher or NutritionEnricher(), Settings())
    return asyncio.run(builder.build(IntentDirective(name=name, args=args), ctx))


def test_add_schedule_defaults():
    action = build("add_schedule", {"items": [{"title": "Work"}, {"startTime": "10:00"}]})
    assert len(action.items) == 1
    item = action.items[0]
    assert item.title == "Work"
    assert item.date == "2025-06-01"
    assert (item.start_time, item.end_time) == ("09:00", "10:00")
    assert item.category == "Other"
    assert item.recurrence is None


def test_add_schedule_keeps_valid_fields():
    action = build("add_schedule", {"items": [{
        "title": "Gym", "startTime": "7:00", "endTime": "8:00",
        "category": "Exercise", "recurrence": "weekdays", "date": "2025-06-03",
    }]})
    item = action.items[0]
    assert (item.start_time, item.end_time, item.category, item.recurrence, item.date) == (
        "07:00", "08:00", "Exercise", "weekdays", "2025-06-03"
    )


def test_add_schedule_unknown_recurrence_and_category():
    action = build("add_schedule", {"items": [{"title": "Read", "category": "Hobby", "recurrence": "hourly"}]})
    assert action.items[0].category == "Other"
    assert "recurrence" not in action.items[0].to_wire()


def test_add_schedule_converts_to_utc():
    ctx = VoiceContext(today="2025-07-01", timezone="Asia/Jerusalem", user_id="user-1")
    action = build("add_schedule", {"items": [{"title": "Work", "startTime": "8:00", "endTime": "18:00"}]}, ctx)
    item = action.items[0]
    assert (item.date, item.start_time, item.end_time) == ("2025-07-01", "05:00", "15:00")


def test_add_schedule_without_titles_builds_nothing():
    assert build("add_schedule", {"items": [{"startTime": "9:00"}]}) is None
    assert build("add_schedule", {}) is None


def test_add_transaction_short_description_is_food():
    action = build("add_transaction", {"type": "expense", "amount": 5, "description": "Coke"})
    assert action.category == "Food"
    assert action.currency == "USD"
    assert action.date == "2025-06-01"


def test_add_transaction_long_description_is_other():
    action = build("add_transaction", {"amount": 40, "description": "new phone charger"})
    assert action.type == "expense"
    assert action.category == "Other"


def test_add_transaction_category_checked_against_type():
    assert build("add_transaction", {"type": "income", "amount": 100, "category": "Food"}).category == "Other"
    assert build("add_transaction", {"type": "income", "amount": 100, "category": "Salary"}).category == "Salary"
    assert build("add_transaction", {"type": "gift", "amount": "x"}).amount == 0


def test_add_transaction_wire_format():
    wire = build("add_transaction", {"type": "expense", "amount": 5, "description": "Coke"}).to_wire()
    assert wire["intent"] == "add_transaction"
    assert wire["isRecurring"] is False
    assert "is_recurring" not in wire


def test_add_transaction_recurring_flag_from_strings():
    assert build("add_transaction", {"amount": 5, "isRecurring": "false"}).is_recurring is False
    assert build("add_transaction", {"amount": 5, "isRecurring": "True"}).is_recurring is True
    assert build("add_transaction", {"amount": 5, "isRecurring": "1"}).is_recurring is True
    assert build("add_transaction", {"amount": 5, "isRecurring": True}).is_recurring is True
    assert build("add_transaction", {"amount": 5, "isRecurring": 7}).is_recurring is False


def test_add_workout_defaults_and_exercises():
    action = build("add_workout", {
        "type": "strength",
        "exercises": [
            {"name": "Squat", "sets": 5, "reps": 3, "weight": 140},
            {"name": "", "sets": 3, "reps": 3},
            {"name": "Plank", "sets": -2, "reps": "x"},
        ],
    })
    assert action.title == "Workout"
    assert action.duration_minutes == 30
    assert [e.name for e in action.exercises] == ["Squat", "Plank"]
    assert (action.exercises[1].sets, action.exercises[1].reps) == (0, 0)
    assert action.exercises[0].weight == 140


def test_add_workout_invalid_type():
    action = build("add_workout", {"title": "Swim", "type": "yoga", "durationMinutes": "abc"})
    assert (action.title, action.type, action.duration_minutes) == ("Swim", "cardio", 30)


def test_add_food_without_catalog_gets_zero_nutrition():
    action = build("add_food", {"food": "Diet Coke"})
    assert (action.amount, action.unit) == (100, "g")
    assert action.name == "Diet Coke"
    assert action.calories == 0


def test_add_food_uses_catalog(catalog):
    action = build("add_food", {"food": "banana", "amount": 2, "unit": "banana"}, enricher=NutritionEnricher(catalog))
    # 2 bananas = 240 g
    assert action.name == "Banana"
    assert action.calories == round(89 * 2.4)
    assert action.carbs == round(23 * 2.4, 1)


def test_add_food_times_converted():
    ctx = VoiceContext(today="2025-01-15", timezone="Europe/London", user_id="user-1")
    action = build("add_food", {"food": "toast", "startTime": "8:00", "endTime": "bad"}, ctx)
    assert action.start_time == "08:00"
    assert action.end_time is None


def test_log_sleep_and_goal_defaults():
    sleep = build("log_sleep", {"sleepHours": -1})
    assert (sleep.sleep_hours, sleep.date) == (0, "2025-06-01")
    goal = build("add_goal", {"type": "steps", "target": "abc", "period": "daily"})
    assert (goal.type, goal.target, goal.period) == ("workouts", 0, "weekly")


def test_edit_is_sparse():
    action = build("edit_transaction", {"transactionId": "t1", "amount": 12})
    assert action.to_wire() == {"intent": "edit_transaction", "transactionId": "t1", "amount": 12}


def test_edit_schedule_drops_invalid_times():
    action = build("edit_schedule", {"itemTitle": "Work", "startTime": "10", "endTime": "18:00"})
    assert action.to_wire() == {"intent": "edit_schedule", "itemTitle": "Work", "endTime": "18:00"}


def test_edit_schedule_times_converted():
    ctx = VoiceContext(today="2025-07-01", timezone="Asia/Jerusalem", user_id="user-1")
    action = build("edit_schedule", {"itemTitle": "Work", "startTime": "10:00"}, ctx)
    assert action.start_time == "07:00"


def test_delete_goal_hint():
    action = build("delete_goal", {"goalType": "savings", "unrelated": 1})
    assert action.to_wire() == {"intent": "delete_goal", "goalType": "savings"}


def test_unknown_directive_builds_nothing():
    assert build("order_pizza", {"size": "large"}) is None
