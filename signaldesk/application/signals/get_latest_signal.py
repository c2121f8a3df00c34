"""
Use case: Get the most recent signal.

Input: None
Output: SignalResult, or None when no signal exists.
Side effects: None.
Failure cases: SignalPersistenceError.
"""

from typing import Optional

from signaldesk.application.signals.dtos import SignalResult
from signaldesk.domain.signals.ports import SignalRepository


class GetLatestSignalUseCase:
    """Returns the newest signal; polled by the dashboard every few seconds."""

    def __init__(self, repository: SignalRepository) -> None:
        self._repository = repository

    def execute(self) -> Optional[SignalResult]:
        signal = self._repository.get_latest()
        if signal is None:
            return None
        return SignalResult.from_entity(signal)
