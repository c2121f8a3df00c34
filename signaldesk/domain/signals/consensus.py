"""
Consensus aggregation of provider opinions.

Fuses one opinion per provider into a single signal action:

    1. Two or more buy-class opinions  → BUY/CALL, verified by the buyers.
    2. Two or more sell-class opinions → SELL/PUT, verified by the sellers.
    3. Otherwise the most confident opinion wins on its own; ties go to
       the earliest provider in fixed order (OpenAI, Anthropic, Gemini).

Confidence is always the mean of all three opinions (missing counts as 0),
so a dissenting or silent provider lowers the final confidence even when
the majority is unanimous among the others.
"""

from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Optional

from signaldesk.domain.signals.entities import (
    Consensus,
    ProviderName,
    ProviderOpinion,
    SignalAction,
)

BUY_TOKENS = ("BUY", "CALL")
SELL_TOKENS = ("SELL", "PUT")
MAJORITY = 2
ANALYSIS_SEPARATOR = "\n\n"
MISSING_ANALYSIS = "N/A"
MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100


class Bucket(Enum):
    """Vote bucket of a single opinion."""

    BUY = "buy"
    SELL = "sell"
    NONE = "none"


def classify_action(action: Optional[str]) -> Bucket:
    """Classify a raw action string by substring match.

    An action carrying both buy and sell tokens is ambiguous and does not vote.
    """
    if not action:
        return Bucket.NONE
    upper = action.upper()
    is_buy = any(token in upper for token in BUY_TOKENS)
    is_sell = any(token in upper for token in SELL_TOKENS)
    if is_buy and not is_sell:
        return Bucket.BUY
    if is_sell and not is_buy:
        return Bucket.SELL
    return Bucket.NONE


def normalize_opinions(opinions: Iterable[ProviderOpinion]) -> list[ProviderOpinion]:
    """Return exactly one opinion per provider, in fixed provider order.

    Providers without an opinion get an empty one.

    Raises:
        ValueError: If two opinions name the same provider.
    """
    by_provider: dict[ProviderName, ProviderOpinion] = {}
    for opinion in opinions:
        if opinion.provider in by_provider:
            raise ValueError(f"Duplicate opinion for provider {opinion.provider.value}")
        by_provider[opinion.provider] = opinion
    return [
        by_provider.get(provider, ProviderOpinion.empty(provider))
        for provider in ProviderName.ordered()
    ]


def _confidence_value(opinion: ProviderOpinion) -> float:
    return opinion.confidence if opinion.confidence is not None else 0.0


def mean_confidence(opinions: list[ProviderOpinion]) -> int:
    """Round half up the mean confidence of all opinions, clamped to 0-100."""
    total = sum(Decimal(str(_confidence_value(o))) for o in opinions)
    mean = (total / len(opinions)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, int(mean)))


def join_analysis(opinions: list[ProviderOpinion]) -> str:
    """Concatenate every provider's rationale, tagged by provider name."""
    return ANALYSIS_SEPARATOR.join(
        f"{o.provider.value}: {o.analysis or MISSING_ANALYSIS}" for o in opinions
    )


def aggregate_opinions(opinions: Iterable[ProviderOpinion]) -> Consensus:
    """Fuse provider opinions into a single consensus.

    Args:
        opinions: Up to one opinion per provider, in any order.

    Returns:
        The consensus action, confidence, analysis and verifiers.
    """
    ordered = normalize_opinions(opinions)
    buckets = [(o, classify_action(o.action)) for o in ordered]
    buyers = [o.provider.value for o, b in buckets if b is Bucket.BUY]
    sellers = [o.provider.value for o, b in buckets if b is Bucket.SELL]

    if len(buyers) >= MAJORITY:
        action, verifiers, majority = SignalAction.BUY.value, buyers, True
    elif len(sellers) >= MAJORITY:
        action, verifiers, majority = SignalAction.SELL.value, sellers, True
    else:
        # max() keeps the first maximal element, i.e. fixed provider order.
        best = max(ordered, key=_confidence_value)
        action = best.action or SignalAction.BUY.value
        verifiers, majority = [best.provider.value], False

    return Consensus(
        action=action,
        confidence=mean_confidence(ordered),
        analysis=join_analysis(ordered),
        verifiers=verifiers,
        majority=majority,
    )
