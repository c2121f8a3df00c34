"""
Signal validity window.

A signal is valid for the next full 5-minute slot: the current minute is
rounded up with ceil((minute + 1) / 5) * 5, so the window never starts
at the current minute. The window is independent of any opinion.
"""

import math
from datetime import datetime, timedelta

from signaldesk.domain.signals.entities import SignalWindow

WINDOW_MINUTES = 5
TIME_FORMAT = "%H:%M"


def compute_window(now: datetime, label: str = "UTC") -> SignalWindow:
    """Compute the validity window for a signal created at `now`.

    Args:
        now: Wall-clock creation time.
        label: Timezone label appended to both formatted bounds.

    Returns:
        The window bounds, raw and formatted as "HH:MM <label>".
    """
    rounded = math.ceil((now.minute + 1) / WINDOW_MINUTES) * WINDOW_MINUTES
    top_of_hour = now.replace(minute=0, second=0, microsecond=0)
    start = top_of_hour + timedelta(minutes=rounded)
    end = start + timedelta(minutes=WINDOW_MINUTES)
    return SignalWindow(
        start=start,
        end=end,
        start_time=f"{start.strftime(TIME_FORMAT)} {label}",
        end_time=f"{end.strftime(TIME_FORMAT)} {label}",
    )
