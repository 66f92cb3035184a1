"""
Robust JSON extraction utilities for LLM responses.
Handles code fences, chatty prefixes and trailing commas in AI-generated JSON.
"""
import json
import re
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)


def extract_json_from_llm_response(
    response: str,
    fallback: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Extract a JSON object from an LLM response with several fallback strategies.

    Tries:
    1. Markdown code blocks (```json)
    2. Standard { } extraction
    3. First balanced JSON object
    4. Returns fallback if all fail

    Args:
        response: Raw LLM response string
        fallback: Default value if extraction fails

    Returns:
        Parsed JSON dictionary or fallback

    Raises:
        ValueError: If extraction fails and no fallback provided
    """
    if not response or not isinstance(response, str):
        if fallback is not None:
            return fallback
        raise ValueError("Empty or invalid response")

    for strategy in (_extract_markdown_json, _extract_standard_json, _extract_first_json_object):
        try:
            result = strategy(response)
        except json.JSONDecodeError as e:
            logger.debug(f"{strategy.__name__} failed: {e}")
            continue
        if isinstance(result, dict):
            return result

    if fallback is not None:
        logger.warning("All JSON extraction strategies failed, using fallback")
        return fallback

    raise ValueError(f"Could not extract JSON from response: {response[:200]}...")


def _extract_markdown_json(response: str) -> Optional[Dict[str, Any]]:
    """Extract JSON from ```json or bare ``` code blocks."""
    match = re.search(r'```(?:json)?\s*(.*?)```', response, re.DOTALL | re.IGNORECASE)
    if not match:
        return None
    content = match.group(1).strip()
    if not content.startswith('{'):
        return None
    return json.loads(_fix_common_json_errors(content))


def _extract_standard_json(response: str) -> Optional[Dict[str, Any]]:
    """Extract JSON using the outermost { } markers."""
    json_start = response.find('{')
    json_end = response.rfind('}') + 1

    if json_start >= 0 and json_end > json_start:
        return json.loads(_fix_common_json_errors(response[json_start:json_end]))

    return None


def _extract_first_json_object(response: str) -> Optional[Dict[str, Any]]:
    """Find and extract the first complete JSON object."""
    depth = 0
    start_idx = None

    for i, char in enumerate(response):
        if char == '{':
            if depth == 0:
                start_idx = i
            depth += 1
        elif char == '}' and depth:
            depth -= 1
            if depth == 0 and start_idx is not None:
                try:
                    return json.loads(response[start_idx:i + 1])
                except json.JSONDecodeError:
                    start_idx = None

    return None


def _fix_common_json_errors(json_str: str) -> str:
    """Remove trailing commas before } or ]."""
    return re.sub(r',(\s*[}\]])', r'\1', json_str)
