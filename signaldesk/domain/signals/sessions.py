"""
Forex market sessions.

Approximate session hours in UTC. Sydney wraps midnight.
"""

from signaldesk.domain.signals.entities import MarketSession

# name, open hour, close hour (UTC, close exclusive)
SESSION_HOURS = (
    ("London", 7, 16),
    ("New York", 12, 21),
    ("Tokyo", 0, 9),
    ("Sydney", 21, 6),
)


def is_session_open(hour: int, open_hour: int, close_hour: int) -> bool:
    """Return True when `hour` falls inside [open_hour, close_hour)."""
    if open_hour <= close_hour:
        return open_hour <= hour < close_hour
    return hour >= open_hour or hour < close_hour


def market_sessions(hour: int) -> list[MarketSession]:
    """Return every session with its active flag for a UTC hour."""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0..23, got {hour}")
    return [
        MarketSession(
            name=name,
            open_hour=open_hour,
            close_hour=close_hour,
            active=is_session_open(hour, open_hour, close_hour),
        )
        for name, open_hour, close_hour in SESSION_HOURS
    ]
