"""
Use case: Get the synthetic chart series for a pair.

Input: GetMarketDataQuery (pair)
Output: list[MarketPointResult], oldest first.
Side effects: None.
Failure cases: None.
"""

import logging
from typing import Optional

import numpy as np

from signaldesk.application.signals.clock import Clock, utc_now
from signaldesk.application.signals.dtos import GetMarketDataQuery, MarketPointResult
from signaldesk.domain.signals.market_data import simulate_market_data

logger = logging.getLogger(__name__)


class GetMarketDataUseCase:
    """Produces a random-walk price series for the dashboard chart.

    The pair is not used to shape the series: every pair gets an
    independent walk around 100.0.
    """

    def __init__(
        self,
        clock: Clock = utc_now,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        self._clock = clock
        self._rng = rng

    def execute(self, query: GetMarketDataQuery) -> list[MarketPointResult]:
        logger.debug("Simulating market data for pair=%s", query.pair)
        points = simulate_market_data(self._clock(), rng=self._rng)
        return [MarketPointResult(time=p.time, value=p.value) for p in points]
