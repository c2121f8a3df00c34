"""
Synthetic market data for the dashboard chart.

No real quotes are fetched: the series is a random walk around 100.0,
one point every 5 minutes, oldest first.
"""

from datetime import datetime, timedelta
from typing import Optional

import numpy as np

from signaldesk.domain.signals.entities import MarketPoint

POINT_COUNT = 20
STEP_MINUTES = 5
START_PRICE = 100.0
STEP_SCALE = 0.5
PRICE_DECIMALS = 4


def simulate_market_data(
    now: datetime,
    rng: Optional[np.random.Generator] = None,
    points: int = POINT_COUNT,
) -> list[MarketPoint]:
    """Generate a random-walk price series ending 5 minutes before `now`.

    Args:
        now: Reference time of the most recent slot.
        rng: Random generator; a fresh unseeded one when omitted.
        points: Number of points to produce.

    Returns:
        Points ordered oldest first.
    """
    rng = rng if rng is not None else np.random.default_rng()
    steps = (rng.random(points) - 0.5) * STEP_SCALE
    prices = START_PRICE + np.cumsum(steps)

    series = []
    for offset, price in zip(range(points, 0, -1), prices):
        when = now - timedelta(minutes=offset * STEP_MINUTES)
        series.append(
            MarketPoint(
                time=when.strftime("%H:%M"),
                value=round(float(price), PRICE_DECIMALS),
            )
        )
    return series
