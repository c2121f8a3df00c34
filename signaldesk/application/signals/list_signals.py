"""
Use case: List signal history.

Input: None
Output: list[SignalResult], newest first.
Side effects: None.
Failure cases: SignalPersistenceError.
"""

import logging

from signaldesk.application.signals.dtos import SignalResult
from signaldesk.domain.signals.ports import SignalRepository

logger = logging.getLogger(__name__)


class ListSignalsUseCase:
    """Returns every stored signal ordered by creation time, newest first."""

    def __init__(self, repository: SignalRepository) -> None:
        self._repository = repository

    def execute(self) -> list[SignalResult]:
        signals = self._repository.list_all()
        logger.debug("Listed %d signals", len(signals))
        return [SignalResult.from_entity(s) for s in signals]
