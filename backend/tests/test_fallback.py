"""
Tests for the fallback classifier.
"""
from lifedesk.db.schema import VoiceContext
from lifedesk.services.voice.actions import AddFood, UnknownAction
from lifedesk.services.voice.fallback import classify_fallback, looks_like_food

CTX = VoiceContext(today="2025-06-01", user_id="user-1")


def test_short_food_name_becomes_food_log(diagnostics):
    action = classify_fallback("Diet Coke", CTX, diagnostics, "no_directives")
    assert isinstance(action, AddFood)
    assert (action.food, action.amount, action.unit, action.date) == ("Diet Coke", 100, "g", "2025-06-01")
    assert action.calories == 0
    assert diagnostics.calls == []


def test_time_patterns_are_not_food():
    assert not looks_like_food("ran 30 minutes")
    assert not looks_like_food("work 9:00")
    assert not looks_like_food("slept badly")
    assert not looks_like_food("ישנתי 7 שעות")
    assert not looks_like_food("2h")
    assert looks_like_food("hummus and pita")


def test_long_transcript_is_not_food():
    assert not looks_like_food("x" * 81)
    assert looks_like_food("x" * 80)
    assert not looks_like_food("x" * 11, max_length=10)


def test_unknown_logs_one_diagnostic(diagnostics):
    action = classify_fallback("woke up at 7:30 and went to a meeting", CTX, diagnostics, "llm_error")
    assert isinstance(action, UnknownAction)
    assert action.message == "Could not understand"
    assert len(diagnostics.calls) == 1
    call = diagnostics.calls[0]
    assert call["user_id"] == "user-1"
    assert call["details"]["reason"] == "llm_error"
    assert "7:30" in call["details"]["transcript"]


def test_empty_transcript_is_unknown(diagnostics):
    assert isinstance(classify_fallback("   ", CTX, diagnostics, "no_directives"), UnknownAction)


def test_works_without_diagnostics():
    assert isinstance(classify_fallback("slept 8 hours", CTX, None, "no_directives"), UnknownAction)
