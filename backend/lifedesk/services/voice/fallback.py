"""
Fallback classification for transcripts the language model could not handle.

A short utterance without any time or sleep/schedule cue is almost always a food
name ("Diet Coke", "banana"), so it becomes a food log. Anything else becomes an
unknown action and a diagnostic event.
"""
import re
from typing import Any, Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from lifedesk.core.config import get_settings
from lifedesk.core.constants import FoodConstants, LimitsConstants
from lifedesk.core.logging import get_logger
from lifedesk.db.schema import VoiceContext
from lifedesk.services.voice.actions import ActionBase, AddFood, UnknownAction

logger = get_logger("services.voice.fallback")

UNKNOWN_INTENT_MESSAGE = "Could not understand"

DURATION_RE = re.compile(
    r"\d+(?:[.,]\d+)?\s*(?:minutes?|mins?|hours?|hrs?|h|שעות|שעה|דקות|דקה)\b",
    re.IGNORECASE,
)
CLOCK_RE = re.compile(r"\b\d{1,2}:\d{2}\b")
KEYWORD_RE = re.compile(
    r"\b(?:sleep|slept|wake|woke|nap|bed|schedule|meeting|appointment|remind)"
    r"|ישנתי|שינה|לישון|התעוררתי|קמתי|פגישה|לו\"ז|תזכורת",
    re.IGNORECASE,
)


class DiagnosticsSink(Protocol):
    def log_error(self, message: str, details: Optional[Dict[str, Any]] = None, user_id: Optional[str] = None) -> None:
        ...


def looks_like_food(transcript: str, max_length: Optional[int] = None) -> bool:
    """True for a short transcript with no duration, clock time or sleep/schedule word."""
    text = (transcript or "").strip()
    if max_length is None:
        max_length = get_settings().fallback_max_transcript_length
    if not text or len(text) > max_length:
        return False
    return not (DURATION_RE.search(text) or CLOCK_RE.search(text) or KEYWORD_RE.search(text))


def classify_fallback(
    transcript: str,
    ctx: VoiceContext,
    diagnostics: Optional[DiagnosticsSink],
    reason: str,
) -> ActionBase:
    """
    Produce the single action for a transcript the model step could not parse.

    Returns an add_food placeholder (100 g, zero nutrition) or an unknown action.
    Never raises.
    """
    text = (transcript or "").strip()
    if looks_like_food(text):
        logger.info(f"[Fallback] Treating '{text}' as a food log ({reason})")
        return AddFood(
            food=text,
            amount=FoodConstants.DEFAULT_QUANTITY,
            unit=FoodConstants.DEFAULT_UNIT,
            date=ctx.today,
            name=text,
        )

    logger.warning(f"[Fallback] Could not understand transcript ({reason})")
    if diagnostics is not None:
        try:
            diagnostics.log_error(
                "Voice intent unknown",
                {"transcript": text[:LimitsConstants.LOG_TRANSCRIPT_MAX_LENGTH], "reason": reason},
                ctx.user_id,
            )
        except SQLAlchemyError as e:
            logger.error(f"[Fallback] Diagnostic log failed: {e}")
    return UnknownAction(message=UNKNOWN_INTENT_MESSAGE)
