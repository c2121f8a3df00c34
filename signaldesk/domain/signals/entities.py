"""
Domain entities for the signals bounded context.

Entities represent core business objects with identity and lifecycle.
They contain no framework imports and no IO operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class ProviderName(Enum):
    """AI providers consulted for every signal.

    Declaration order is the fixed provider order: it decides the
    fallback tie-break and the order of analysis segments.
    """

    OPENAI = "OpenAI"
    ANTHROPIC = "Anthropic"
    GEMINI = "Gemini"

    @classmethod
    def ordered(cls) -> list["ProviderName"]:
        return list(cls)


class SignalAction(Enum):
    """Canonical directional tokens stored on a signal."""

    BUY = "BUY/CALL"
    SELL = "SELL/PUT"


class SignalStatus(Enum):
    """Signal lifecycle tag."""

    ACTIVE = "active"


@dataclass(frozen=True)
class ProviderOpinion:
    """One AI provider's raw directional prediction for one request.

    Every field except the provider may be missing: providers return
    free text and nothing here is validated.
    """

    provider: ProviderName
    action: Optional[str] = None
    confidence: Optional[float] = None
    analysis: Optional[str] = None

    @classmethod
    def empty(cls, provider: ProviderName) -> "ProviderOpinion":
        """Return the opinion substituted for a failed or unparsable provider."""
        return cls(provider=provider)

    @property
    def is_empty(self) -> bool:
        return self.action is None and self.confidence is None and self.analysis is None


@dataclass(frozen=True)
class Consensus:
    """Outcome of fusing the three provider opinions."""

    action: str
    confidence: int
    analysis: str
    verifiers: list[str]
    majority: bool


@dataclass(frozen=True)
class SignalWindow:
    """The 5-minute validity interval attached to a signal."""

    start: datetime
    end: datetime
    start_time: str
    end_time: str


@dataclass(frozen=True)
class NewSignal:
    """A signal ready to be inserted. Storage assigns id and created_at."""

    pair: str
    action: str
    confidence: int
    start_time: str
    end_time: str
    analysis: str
    verifiers: list[str] = field(default_factory=list)
    status: SignalStatus = SignalStatus.ACTIVE


@dataclass(frozen=True)
class Signal:
    """A persisted trading signal."""

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


@dataclass(frozen=True)
class MarketPoint:
    """A single point of the synthetic price chart."""

    time: str
    value: float


@dataclass(frozen=True)
class MarketSession:
    """A forex trading session expressed in UTC hours."""

    name: str
    open_hour: int
    close_hour: int
    active: bool
