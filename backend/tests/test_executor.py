"""
Tests for the batch executor.
"""
import asyncio

from conftest import FakeService, make_services
from lifedesk.services.voice.actions import AddFood, AddSchedule, ScheduleItem, UnknownAction
from lifedesk.services.voice.executor import execute_actions
from lifedesk.utils.time_utils import today_str


def run(actions, services, user_id="user-1"):
    return asyncio.run(execute_actions(actions, user_id, services))


def test_empty_list(services):
    assert run([], services) == []


def test_one_result_per_action_in_order(services):
    actions = [
        {"intent": "add_transaction", "type": "expense", "amount": 5, "category": "Food",
         "description": "Coke", "date": "2025-06-01"},
        {"intent": "delete_goal", "goalType": "savings"},
        {"intent": "log_sleep", "sleepHours": 7, "date": "2025-06-01"},
    ]
    results = run(actions, services)
    assert [r.intent for r in results] == ["add_transaction", "delete_goal", "log_sleep"]
    assert [r.success for r in results] == [True, False, True]
    assert results[1].message == "Goal not found"
    assert services.transactions.created[0]["amount"] == 5
    assert services.transactions.created[0]["currency"] == "USD"


def test_unmatched_transaction_id():
    services = make_services(transactions=FakeService([{"id": "t1", "description": "Coke", "user_id": "user-1"}]))
    for intent in ("edit_transaction", "delete_transaction"):
        [result] = run([{"intent": intent, "transactionId": "nope"}], services)
        assert (result.success, result.message) == (False, "Transaction not found")


def test_unmatched_id_does_not_fall_back_to_description():
    services = make_services(transactions=FakeService([{"id": "t1", "description": "Coke", "user_id": "user-1"}]))
    [result] = run([{"intent": "delete_transaction", "transactionId": "gone", "description": "Coke"}], services)
    assert (result.success, result.message) == (False, "Transaction not found")
    assert services.transactions.removed == []


def test_edit_transaction_by_description():
    services = make_services(transactions=FakeService([
        {"id": "t1", "description": "Coffee", "amount": 4, "user_id": "user-1"},
        {"id": "t2", "description": "Coke", "amount": 5, "user_id": "user-1"},
    ]))
    [result] = run([{"intent": "edit_transaction", "description": "coke", "amount": 6}], services)
    assert result.success
    assert services.transactions.updated == [("t2", {"amount": 6})]


def test_empty_schedule_batch(services):
    [result] = run([AddSchedule(items=[])], services)
    assert (result.success, result.message) == (False, "No schedule items")


def test_schedule_batch(services):
    action = AddSchedule(items=[
        ScheduleItem(title="Work", date="2025-06-01", start_time="08:00", end_time="18:00"),
        ScheduleItem(title="Eat", date="2025-06-01", start_time="18:00", end_time="22:00", category="Meal"),
    ])
    [result] = run([action.to_wire()], services)
    assert (result.success, result.message) == (True, "Added 2 item(s)")
    assert [r.title for r in services.schedule.records] == ["Work", "Eat"]


def test_delete_schedule_by_title():
    services = make_services(schedule=FakeService([{"id": "s1", "title": "Work", "user_id": "user-1"}]))
    [result] = run([{"intent": "delete_schedule", "itemTitle": "work"}], services)
    assert result.success
    assert services.schedule.removed == ["s1"]


def test_add_food_payload(services):
    action = AddFood(food="banana", amount=2, unit="banana", date="2025-06-01", name="Banana", calories=214)
    [result] = run([action], services)
    assert result.success
    payload = services.food_entries.created[0]
    assert (payload["portion_amount"], payload["portion_unit"], payload["calories"]) == (2, "banana", 214)


def test_service_error_message_passes_through():
    services = make_services(workouts=FakeService(error=RuntimeError("database is locked")))
    [result] = run([{"intent": "add_workout", "date": "2025-06-01"}], services)
    assert (result.success, result.message) == (False, "database is locked")


def test_unknown_and_unsupported(services):
    results = run([
        UnknownAction(message="Could not understand"),
        {"intent": "order_pizza"},
        "not an action",
    ], services)
    assert [(r.success, r.message) for r in results] == [
        (False, "Could not understand"),
        (False, "Unsupported action"),
        (False, "Unsupported action"),
    ]
    assert [r.intent for r in results[:2]] == ["unknown", "order_pizza"]


def test_log_sleep_upserts_by_date():
    services = make_services(check_ins=FakeService([
        {"id": "c1", "date": "2025-06-01", "sleep_hours": 5, "user_id": "user-1"},
    ]))
    run([{"intent": "log_sleep", "sleepHours": 8, "date": "2025-06-01"}], services)
    run([{"intent": "log_sleep", "sleepHours": 6, "date": "2025-06-02"}], services)
    assert services.check_ins.updated == [("c1", {"sleep_hours": 8})]
    assert services.check_ins.created == [{"date": "2025-06-02", "sleep_hours": 6}]


def test_check_in_requires_date(services):
    [result] = run([{"intent": "delete_check_in"}], services)
    assert (result.success, result.message) == (False, "Date required")
    [result] = run([{"intent": "edit_check_in", "date": "2025-01-01", "sleepHours": 7}], services)
    assert (result.success, result.message) == (False, "Check-in not found")


def test_goal_matches_on_type():
    services = make_services(goals=FakeService([{"id": "g1", "type": "savings", "target": 500, "user_id": "user-1"}]))
    [result] = run([{"intent": "edit_goal", "goalType": "Savings", "target": 800}], services)
    assert result.success
    assert services.goals.updated == [("g1", {"target": 800})]


def test_failure_does_not_stop_later_actions():
    services = make_services(transactions=FakeService(error=ValueError("boom")))
    results = run([
        {"intent": "add_transaction", "amount": 1, "date": "2025-06-01"},
        {"intent": "add_goal", "type": "workouts", "target": 3, "period": "weekly"},
    ], services)
    assert [r.success for r in results] == [False, True]


def test_sparse_add_payloads_get_defaults(services):
    today = today_str()
    results = run([
        {"intent": "add_transaction", "amount": 5},
        {"intent": "add_food", "food": "banana"},
        {"intent": "add_food", "amount": 100},
        {"intent": "add_schedule", "items": [{"title": "Gym"}]},
    ], services)

    assert [r.success for r in results] == [True, True, True, True]
    assert services.transactions.created[0]["date"] == today
    banana, unnamed = services.food_entries.created
    assert (banana["name"], banana["date"], banana["portion_amount"]) == ("banana", today, 100)
    assert unnamed["name"] == "Unknown"
    [item] = services.schedule.created
    assert (item["date"], item["start_time"], item["end_time"]) == (today, "09:00", "10:00")
