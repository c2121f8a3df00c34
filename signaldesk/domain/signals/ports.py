"""
Port interfaces (ABCs) for the signals bounded context.

Ports define the contracts that the domain requires from the outside world.
Infrastructure adapters implement these interfaces.
The domain layer never depends on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Optional

from signaldesk.domain.signals.entities import (
    NewSignal,
    ProviderName,
    ProviderOpinion,
    Signal,
)


class SignalRepository(ABC):
    """Port for persisting and retrieving generated signals.

    Only four access patterns exist: no lookup by id, no filter by pair.
    Implementations raise SignalPersistenceError on storage failures.
    """

    @abstractmethod
    def list_all(self) -> list[Signal]:
        """Return every stored signal ordered by created_at descending."""
        raise NotImplementedError

    @abstractmethod
    def get_latest(self) -> Optional[Signal]:
        """Return the most recently created signal, or None if empty."""
        raise NotImplementedError

    @abstractmethod
    def insert(self, new_signal: NewSignal) -> Signal:
        """Persist a signal and return it with storage-assigned fields."""
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> int:
        """Delete every stored signal.

        Returns:
            Number of rows removed (0 on an empty store).
        """
        raise NotImplementedError


class OpinionProvider(ABC):
    """Port for querying one AI provider for a directional opinion."""

    @property
    @abstractmethod
    def name(self) -> ProviderName:
        """The provider this client talks to."""
        raise NotImplementedError

    @abstractmethod
    async def query(self, pair: str, prompt: str) -> ProviderOpinion:
        """Ask the provider for an opinion on a pair.

        Args:
            pair: Instrument identifier, e.g. "EUR/USD".
            prompt: Fully rendered user prompt.

        Returns:
            The parsed opinion.

        Raises:
            ProviderError: The provider is not configured or the call failed.
            OpinionParseError: The reply held no recoverable JSON object.
        """
        raise NotImplementedError
