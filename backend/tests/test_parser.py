"""
Tests for transcript parsing end to end, with a fake language model.
"""
import asyncio

import httpx

from conftest import FakeLLM
from lifedesk.core.config import Settings
from lifedesk.core.llm_client import LLMClient, LLMResponseError
from lifedesk.db.crud_foods import NutritionCatalog
from lifedesk.db.schema import IntentDirective
from lifedesk.services.voice.nutrition import NutritionEnricher
from lifedesk.services.voice.parser import build_context, parse_transcript
from lifedesk.services.voice.tools import TOOL_NAMES


def parse(text, llm, diagnostics=None, enricher=None, today="2025-06-01", timezone=None):
    return asyncio.run(parse_transcript(
        text, "en", "user-1", today, timezone,
        llm=llm, enricher=enricher, diagnostics=diagnostics,
    ))


def test_bought_coke_gives_expense_and_food(catalog, diagnostics):
    llm = FakeLLM([
        IntentDirective(name="add_transaction", args={"type": "expense", "amount": 5, "description": "Coke"}),
        IntentDirective(name="add_food", args={"food": "Coke"}),
    ])
    result = parse("bought a Coke for 5", llm, diagnostics, NutritionEnricher(catalog))
    transaction, food = result["actions"]

    assert transaction == {
        "intent": "add_transaction",
        "type": "expense",
        "amount": 5,
        "currency": "USD",
        "category": "Food",
        "description": "Coke",
        "date": "2025-06-01",
        "isRecurring": False,
    }
    assert food["intent"] == "add_food"
    assert food["food"] == "Coke"
    assert (food["amount"], food["unit"]) == (100, "g")
    assert diagnostics.calls == []


def test_food_name_alone_gives_one_food_action(diagnostics):
    llm = FakeLLM([IntentDirective(name="add_food", args={"food": "Diet Coke"})])
    result = parse("Diet Coke", llm, diagnostics)
    assert [a["intent"] for a in result["actions"]] == ["add_food"]


def test_no_directives_short_transcript_falls_back_to_food(catalog, diagnostics):
    result = parse("banana", FakeLLM([]), diagnostics, NutritionEnricher(catalog))
    [action] = result["actions"]
    assert action["intent"] == "add_food"
    assert (action["amount"], action["unit"]) == (100, "g")
    # the fallback food goes through the catalog too
    assert action["name"] == "Banana"
    assert action["calories"] == 89
    assert diagnostics.calls == []


def test_no_directives_otherwise_gives_unknown_and_one_log(diagnostics):
    result = parse("I slept from 23:00 until 7", FakeLLM([]), diagnostics)
    assert result == {"actions": [{"intent": "unknown", "message": "Could not understand"}]}
    assert len(diagnostics.calls) == 1
    assert diagnostics.calls[0]["details"]["reason"] == "no_directives"


def test_llm_failure_goes_to_fallback(diagnostics):
    for error in (httpx.ConnectError("refused"), LLMResponseError("blocked")):
        result = parse("Diet Coke", FakeLLM(error=error), diagnostics)
        assert [a["intent"] for a in result["actions"]] == ["add_food"]
    assert diagnostics.calls == []


def test_all_directives_dropped_goes_to_fallback(diagnostics):
    llm = FakeLLM([IntentDirective(name="add_transaction", args={"type": "expense", "amount": -5})])
    result = parse("spent minus five on my schedule", llm, diagnostics)
    assert result["actions"][0]["intent"] == "unknown"
    assert diagnostics.calls[0]["details"]["reason"] == "all_directives_dropped"


def test_bad_directive_is_dropped_others_kept(diagnostics):
    llm = FakeLLM([
        IntentDirective(name="log_sleep", args={"sleepHours": "a lot"}),
        IntentDirective(name="add_goal", args={"type": "workouts", "target": 3, "period": "weekly"}),
    ])
    result = parse("slept a lot, 3 workouts a week", llm, diagnostics)
    assert [a["intent"] for a in result["actions"]] == ["add_goal"]


def test_tool_catalog_and_today_sent_to_model(diagnostics):
    llm = FakeLLM([IntentDirective(name="log_sleep", args={"sleepHours": 7})])
    parse("slept 7 hours", llm, diagnostics)
    call = llm.calls[0]
    assert call["today"] == "2025-06-01"
    assert [tool["function"]["name"] for tool in call["tools"]] == TOOL_NAMES
    assert len(TOOL_NAMES) == 18


def test_timezone_applied_to_schedule(diagnostics):
    llm = FakeLLM([IntentDirective(name="add_schedule", args={"items": [
        {"title": "Work", "startTime": "8:00", "endTime": "18:00"},
    ]})])
    result = parse("work 8-18", llm, diagnostics, today="2025-07-01", timezone="Asia/Jerusalem")
    item = result["actions"][0]["items"][0]
    assert (item["startTime"], item["endTime"]) == ("05:00", "15:00")


def test_invalid_today_and_timezone_are_ignored():
    ctx = build_context("user-1", "not-a-date", "Nowhere/City")
    assert ctx.timezone is None
    assert len(ctx.today) == 10
    assert build_context("user-1", "2025-06-01", "Europe/London").today == "2025-06-01"


def test_garbled_lookup_answer_keeps_food_with_zero_nutrition(db, diagnostics):
    lookup_client = LLMClient(
        Settings(llm_base_url="http://llm.test"),
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>proxy error</html>")),
    )
    enricher = NutritionEnricher(NutritionCatalog(db), lookup_client.lookup_food_nutrition)
    llm = FakeLLM([IntentDirective(name="add_food", args={"food": "quinoa"})])

    [action] = parse("quinoa", llm, diagnostics, enricher)["actions"]

    assert action["intent"] == "add_food"
    assert action["name"] == "quinoa"
    assert (action["calories"], action["protein"], action["carbs"], action["fats"]) == (0, 0, 0, 0)
