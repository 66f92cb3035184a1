"""
LLM client for text-based AI operations.
Model-agnostic interface for voice intent parsing and food nutrition lookup.
"""
import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from lifedesk.db.schema import FoodLookupResult, IntentDirective
from lifedesk.core.logging import get_logger
from lifedesk.core.base_client import BaseAIClient
from lifedesk.utils.json_parser import extract_json_from_llm_response

logger = get_logger("core.llm_client")


class LLMResponseError(RuntimeError):
    """The model answered without a usable message (blocked, empty or malformed)."""


class LLMClient(BaseAIClient):
    """Client for interacting with Language Models."""

    async def _call_ollama(self, prompt: str, system: Optional[str] = None, json_mode: bool = False) -> str:
        """Call Ollama generate API."""
        url = f"{self.settings.llm_base_url}/api/generate"

        payload = {
            "model": self.settings.llm_model,
            "prompt": prompt,
            "stream": False
        }

        if system:
            payload["system"] = system
        if json_mode:
            payload["format"] = "json"

        response_json = await self._make_request(url, payload, log_prefix="LLM Client")
        if "response" not in response_json:
            raise LLMResponseError("Empty response from model")
        return response_json["response"]

    async def call_tools(
        self,
        transcript: str,
        lang: str,
        tools: List[Dict[str, Any]],
        today: str,
    ) -> List[IntentDirective]:
        """
        Ask the model which tools the transcript calls for.

        Args:
            transcript: What the user said or typed
            lang: Language hint ("en", "he" or "auto")
            tools: Tool catalog in function-calling format
            today: Reference date (YYYY-MM-DD) for relative dates

        Returns:
            Function-call directives, possibly empty

        Raises:
            LLMResponseError: If the model returned no message at all
            httpx.HTTPError: On transport or status errors
        """
        system_prompt, user_prompt = self._render_prompt(
            "voice_intent",
            "User transcript (lang: {lang}):\n{transcript}",
            lang=lang, today=today, transcript=transcript,
        )

        url = f"{self.settings.llm_base_url}/api/chat"
        payload = {
            "model": self.settings.llm_model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "tools": tools,
            "stream": False,
            "options": {
                "temperature": 0.1
            }
        }

        response_json = await self._make_request(url, payload, log_prefix="LLM Tools")
        message = response_json.get("message")
        if not message:
            raise LLMResponseError("Empty response from model")

        directives = []
        for call in message.get("tool_calls") or []:
            function = call.get("function") or {}
            name = function.get("name")
            args = function.get("arguments") or {}
            # OpenAI-compatible servers send arguments as a JSON string
            if isinstance(args, str):
                try:
                    args = json.loads(args)
                except json.JSONDecodeError:
                    logger.warning(f"[LLM Tools] Unparseable arguments for {name}: {args[:200]}")
                    args = {}
            if not name:
                continue
            directives.append(IntentDirective(name=name, args=args if isinstance(args, dict) else {}))

        logger.info(f"[LLM Tools] {len(directives)} directive(s): {[d.name for d in directives]}")
        return directives

    async def lookup_food_nutrition(self, food_name: str) -> Optional[FoodLookupResult]:
        """
        Ask the model for per-100g (or per-100ml) nutrition of a food.

        Args:
            food_name: Food or drink name, in English

        Returns:
            Validated FoodLookupResult, or None when the answer is unusable
        """
        system_prompt, user_prompt = self._render_prompt(
            "food_lookup", "Food or drink name: {food_name}", food_name=food_name
        )
        response = await self._call_ollama(user_prompt, system_prompt, json_mode=True)

        try:
            data = extract_json_from_llm_response(response)
            return FoodLookupResult.model_validate(data)
        except (ValueError, ValidationError) as e:
            logger.warning(f"Food lookup returned unusable nutrition for '{food_name}': {e}")
            logger.debug(f"LLM Response: {response[:500]}")
            return None


# Global instance
_llm_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    """Get or create global LLMClient instance."""
    global _llm_client
    if _llm_client is None:
        _llm_client = LLMClient()
    return _llm_client
