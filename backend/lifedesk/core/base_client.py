"""
Base client for AI operations.
Shared HTTP plumbing and prompt rendering for the LLM client.
"""
from typing import Dict, Any, Optional, Tuple
import httpx
from lifedesk.core.config import Settings, get_settings
from lifedesk.utils.prompt_loader import get_prompt_loader
from lifedesk.core.logging import get_logger

logger = get_logger("core.base_client")


def _joined(value: Any) -> str:
    """Prompt entries may be stored as a list of lines."""
    return "\n".join(value) if isinstance(value, list) else (value or "")


class BaseAIClient:
    """Base client for interacting with AI Models."""

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        """
        Args:
            settings: Overrides the cached application settings
            transport: Custom httpx transport (tests pass an httpx.MockTransport)
        """
        self.settings = settings or get_settings()
        self.prompt_loader = get_prompt_loader()
        self.timeout = self.settings.llm_timeout_seconds
        self.transport = transport

    def _render_prompt(self, prompt_key: str, default_user_template: str, **values: Any) -> Tuple[str, str]:
        """Return (system, user) text for a prompt in llm_prompts.json."""
        config = self.prompt_loader.get_llm_prompt(prompt_key)
        if not config:
            logger.warning(f"Prompt '{prompt_key}' missing, using the built-in user template")
        system_prompt = _joined(config.get("system"))
        user_template = _joined(config.get("user_template")) or default_user_template
        return system_prompt, self.prompt_loader.format_prompt(user_template, **values)

    async def _make_request(
        self,
        url: str,
        payload: Dict[str, Any],
        log_prefix: str = "AI Client"
    ) -> Dict[str, Any]:
        """
        POST a JSON payload to the model server.

        Raises:
            httpx.HTTPStatusError: If the server answers with an error status
            httpx.TransportError: If the server cannot be reached in time
        """
        logger.debug(f"[{log_prefix}] Calling {url} with model {payload.get('model')}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(url, json=payload)

            if response.is_error:
                logger.error(f"[{log_prefix}] {response.status_code} from model server: {response.text[:500]}")

            response.raise_for_status()
            return response.json()
