"""
Use case: Clear signal history.

Input: None
Output: ClearSignalsResult
Side effects: Deletes every stored signal.
Failure cases: SignalPersistenceError. Clearing an empty history succeeds.
"""

import logging

from signaldesk.application.signals.dtos import ClearSignalsResult
from signaldesk.domain.signals.ports import SignalRepository

logger = logging.getLogger(__name__)


class ClearSignalsUseCase:
    """Removes all signals in one bulk delete."""

    def __init__(self, repository: SignalRepository) -> None:
        self._repository = repository

    def execute(self) -> ClearSignalsResult:
        deleted = self._repository.delete_all()
        logger.info("Cleared signal history, deleted=%d", deleted)
        return ClearSignalsResult(deleted=deleted)
