"""Turn raw model text into a list of candidate suggestion records.

Models frequently wrap JSON in markdown fences even when told not to, so the
text goes through :func:`strip_code_fences` before ``json.loads``. The rule is
fixed: every "```json" or "```" marker is removed together with at most one
newline directly before it and one directly after it, then surrounding
whitespace is trimmed. Nothing else in the text is touched.
"""
import json
import logging
import re
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"\n?```(?:json)?\n?")


class MalformedPayload(ValueError):
    """The model answered, but not with a usable {"names": [...]} document."""


def strip_code_fences(raw: str) -> str:
    return _FENCE_RE.sub("", raw).strip()


def parse_response(raw: str) -> List[Dict[str, Any]]:
    """Return the unvalidated ``names`` records, or raise MalformedPayload."""
    cleaned = strip_code_fences(raw)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error(f"[LLM] JSON parsing failed: {exc}. Raw content: {raw!r}")
        raise MalformedPayload("Model output is not valid JSON") from exc

    if not isinstance(parsed, dict) or not isinstance(parsed.get("names"), list):
        logger.error(f"[LLM] Parsed JSON lacks a 'names' list: {cleaned!r}")
        raise MalformedPayload("Model output has no 'names' list")

    return parsed["names"]
