"""
Use case: Build the share text for the latest signal.

Input: None
Output: ShareTextResult
Side effects: None.
Failure cases: SignalNotFoundError when no signal exists, SignalPersistenceError.
"""

from signaldesk.application.signals.dtos import ShareTextResult
from signaldesk.domain.signals.errors import SignalNotFoundError
from signaldesk.domain.signals.ports import SignalRepository
from signaldesk.domain.signals.share import format_share_text


class GetShareTextUseCase:
    """Formats the latest signal for the dashboard's social share buttons."""

    def __init__(self, repository: SignalRepository) -> None:
        self._repository = repository

    def execute(self) -> ShareTextResult:
        """Return the share text of the newest signal.

        Raises:
            SignalNotFoundError: If no signal has been generated yet.
        """
        signal = self._repository.get_latest()
        if signal is None:
            raise SignalNotFoundError()
        return ShareTextResult(signal_id=signal.id, text=format_share_text(signal))
