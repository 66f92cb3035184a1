"""
Transcript parser: the understand half of the voice pipeline.

transcript -> LLM tool calls -> argument validation -> action builders,
with the fallback classifier taking over when nothing usable comes back.
"""
from typing import Any, Dict, List, Optional, Protocol

import httpx

from lifedesk.core.llm_client import LLMResponseError
from lifedesk.core.logging import get_logger
from lifedesk.db.schema import IntentDirective, VoiceContext
from lifedesk.services.voice.actions import ActionBase, AddFood
from lifedesk.services.voice.builders import ActionBuilder
from lifedesk.services.voice.fallback import DiagnosticsSink, classify_fallback
from lifedesk.services.voice.nutrition import NutritionEnricher
from lifedesk.services.voice.tools import VOICE_TOOLS
from lifedesk.services.voice.validators import validate_directives
from lifedesk.utils.time_utils import is_valid_date_str, is_valid_timezone, today_str

logger = get_logger("services.voice.parser")


class ToolCallingLLM(Protocol):
    async def call_tools(
        self, transcript: str, lang: str, tools: List[Dict[str, Any]], today: str
    ) -> List[IntentDirective]:
        ...


def build_context(user_id: Optional[str], today: Optional[str] = None, timezone: Optional[str] = None) -> VoiceContext:
    """Context for one transcript. An invalid today or timezone is ignored."""
    tz = timezone if is_valid_timezone(timezone) else None
    if timezone and tz is None:
        logger.warning(f"[Parser] Ignoring invalid timezone '{str(timezone)[:64]}'")
    if today and not is_valid_date_str(today):
        logger.warning(f"[Parser] Ignoring invalid date '{str(today)[:32]}'")
        today = None
    return VoiceContext(today=today or today_str(tz), timezone=tz, user_id=user_id)


async def _enrich_placeholder(action: AddFood, enricher: NutritionEnricher) -> AddFood:
    nutrition = await enricher.resolve(action.food, action.amount, action.unit)
    return action.model_copy(update={
        "name": nutrition.name,
        "calories": nutrition.calories,
        "protein": nutrition.protein,
        "carbs": nutrition.carbs,
        "fats": nutrition.fat,
    })


async def parse_transcript(
    text: str,
    lang: str,
    user_id: Optional[str],
    today: Optional[str] = None,
    timezone: Optional[str] = None,
    *,
    llm: ToolCallingLLM,
    enricher: Optional[NutritionEnricher] = None,
    diagnostics: Optional[DiagnosticsSink] = None,
) -> Dict[str, List[Dict[str, Any]]]:
    """
    Turn a transcript into built actions.

    Args:
        text: Transcript (spoken or typed)
        lang: Language hint passed to the model ("en", "he", "auto")
        user_id: Acting user, used for diagnostics
        today: Client's local date (YYYY-MM-DD); computed when missing or invalid
        timezone: Client's IANA timezone; times are stored in UTC when given
        llm: Tool-calling model client
        enricher: Nutrition cascade for food actions
        diagnostics: Sink for unknown-intent events

    Returns:
        {"actions": [...]} with camelCase action dicts, never empty
    """
    ctx = build_context(user_id, today, timezone)
    transcript = (text or "").strip()
    enricher = enricher or NutritionEnricher()
    builder = ActionBuilder(enricher)

    reason = None
    try:
        directives = await llm.call_tools(transcript, lang or "auto", VOICE_TOOLS, ctx.today)
    except (httpx.HTTPError, LLMResponseError, ValueError) as e:
        logger.warning(f"[Parser] LLM call failed: {e}")
        directives = []
        reason = f"llm_error: {type(e).__name__}"

    valid = validate_directives(directives)
    actions: List[ActionBase] = []
    for directive in valid:
        action = await builder.build(directive, ctx)
        if action is not None:
            actions.append(action)

    if not actions:
        if reason is None:
            reason = "no_directives" if not directives else "all_directives_dropped"
        action = classify_fallback(transcript, ctx, diagnostics, reason)
        if isinstance(action, AddFood):
            action = await _enrich_placeholder(action, enricher)
        actions = [action]

    logger.info(f"[Parser] {len(actions)} action(s): {[a.intent for a in actions]}")
    return {"actions": [action.to_wire() for action in actions]}
