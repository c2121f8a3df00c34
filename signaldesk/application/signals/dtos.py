"""
Data Transfer Objects for the signals application layer.

DTOs carry data between the interface and application layers.
They are plain dataclasses with no behavior.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from signaldesk.domain.signals.entities import Signal


@dataclass(frozen=True)
class GenerateSignalCommand:
    """Input DTO for generating a new consensus signal.

    Attributes:
        pair: Instrument identifier, e.g. "EUR/USD".
    """

    pair: str


@dataclass(frozen=True)
class SignalResult:
    """Output DTO for a stored signal.

    Attributes:
        id: Storage-assigned identifier.
        pair: Instrument identifier.
        action: Final action (BUY/CALL, SELL/PUT, or a fallback raw action).
        confidence: Integer confidence 0-100.
        start_time: Window start, "HH:MM <label>".
        end_time: Window end, "HH:MM <label>".
        status: Lifecycle tag.
        analysis: Provider-tagged rationales.
        verifiers: Providers that agreed with the final action.
        created_at: Insert timestamp.
    """

    id: int
    pair: str
    action: str
    confidence: int
    start_time: str
    end_time: str
    status: str
    analysis: str
    verifiers: list[str]
    created_at: Optional[datetime]

    @classmethod
    def from_entity(cls, signal: Signal) -> "SignalResult":
        return cls(
            id=signal.id,
            pair=signal.pair,
            action=signal.action,
            confidence=signal.confidence,
            start_time=signal.start_time,
            end_time=signal.end_time,
            status=signal.status,
            analysis=signal.analysis,
            verifiers=list(signal.verifiers),
            created_at=signal.created_at,
        )


@dataclass(frozen=True)
class ClearSignalsResult:
    """Output DTO for a history clear.

    Attributes:
        deleted: Number of signals removed.
    """

    deleted: int


@dataclass(frozen=True)
class ShareTextResult:
    """Output DTO for the latest signal's share text."""

    signal_id: int
    text: str


@dataclass(frozen=True)
class GetMarketDataQuery:
    """Input DTO for the synthetic chart series.

    Attributes:
        pair: Instrument identifier. Echoed only; the series is synthetic.
    """

    pair: str


@dataclass(frozen=True)
class MarketPointResult:
    """Output DTO for a single chart point."""

    time: str
    value: float


@dataclass(frozen=True)
class MarketSessionResult:
    """Output DTO for a forex session and whether it is open now."""

    name: str
    open_hour: int
    close_hour: int
    active: bool
