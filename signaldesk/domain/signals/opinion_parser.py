"""
Parsing of free-text provider replies into ProviderOpinion values.

Providers are asked for a JSON object but may wrap it in prose or code
fences. The whole reply is tried first; failing that, the first
brace-delimited substring that decodes as a JSON object is used.
"""

import json
import logging
import math
from typing import Any, Optional

from signaldesk.domain.signals.entities import ProviderName, ProviderOpinion
from signaldesk.domain.signals.errors import OpinionParseError

logger = logging.getLogger(__name__)

_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> Optional[dict[str, Any]]:
    """Return the first JSON object found in text, or None."""
    stripped = text.strip()
    try:
        value = json.loads(stripped)
    except ValueError:
        value = None
    if isinstance(value, dict):
        return value

    start = stripped.find("{")
    while start != -1:
        try:
            value, _ = _decoder.raw_decode(stripped, start)
        except ValueError:
            value = None
        if isinstance(value, dict):
            return value
        start = stripped.find("{", start + 1)
    return None


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _as_action(value: Any) -> Optional[str]:
    # Kept unstripped: a fallback signal stores the action exactly as sent.
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip().rstrip("%"))
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_opinion(provider: ProviderName, text: Optional[str]) -> ProviderOpinion:
    """Parse a provider reply into an opinion.

    Args:
        provider: The provider that produced the reply.
        text: Raw reply text.

    Returns:
        The opinion; fields that are absent or of the wrong type are None.

    Raises:
        OpinionParseError: If the reply is not text or holds no JSON object.
    """
    if text is not None and not isinstance(text, str):
        raise OpinionParseError(provider.value, "reply is not text")
    if not text or not text.strip():
        raise OpinionParseError(provider.value, "empty reply")

    payload = extract_json_object(text)
    if payload is None:
        raise OpinionParseError(provider.value, "no JSON object in reply")

    opinion = ProviderOpinion(
        provider=provider,
        action=_as_action(payload.get("action")),
        confidence=_as_number(payload.get("confidence")),
        analysis=_as_text(payload.get("analysis")),
    )
    logger.debug(
        "Parsed %s opinion: action=%s confidence=%s",
        provider.value,
        opinion.action,
        opinion.confidence,
    )
    return opinion
