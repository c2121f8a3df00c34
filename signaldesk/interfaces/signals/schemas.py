"""
Pydantic schemas for signals API request/response validation.

These schemas define the API contract consumed by the dashboard.
Signal payloads use the dashboard's camelCase field names.
No business logic belongs here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from signaldesk.application.signals.dtos import SignalResult


class GenerateSignalRequest(BaseModel):
    """Request schema for signal generation.

    Attributes:
        pair: Instrument identifier, e.g. "EUR/USD". Blank values are
            rejected by the use case with a 400.
    """

    pair: str = Field(..., description="Instrument identifier, e.g. EUR/USD")


class SignalResponse(BaseModel):
    """A stored trading signal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    pair: str
    action: str
    confidence: int = Field(..., ge=0, le=100)
    start_time: str
    end_time: str
    status: str
    analysis: str
    verifiers: list[str]
    created_at: Optional[datetime]

    @classmethod
    def from_result(cls, result: SignalResult) -> "SignalResponse":
        return cls(
            id=result.id,
            pair=result.pair,
            action=result.action,
            confidence=result.confidence,
            start_time=result.start_time,
            end_time=result.end_time,
            status=result.status,
            analysis=result.analysis,
            verifiers=result.verifiers,
            created_at=result.created_at,
        )


class ShareTextResponse(BaseModel):
    """Share text for the latest signal."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    signal_id: int
    text: str


class MarketPointItem(BaseModel):
    """A single synthetic chart point."""

    time: str
    value: float


class MarketSessionItem(BaseModel):
    """A forex session and whether it is open now (UTC hours)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    open_hour: int
    close_hour: int
    active: bool


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    message: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response schema."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    service: str
    version: str
    configured_providers: list[str]
