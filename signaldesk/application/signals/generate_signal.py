"""
Use case: Generate a consensus trading signal for a pair.

Input: GenerateSignalCommand (pair)
Output: SignalResult
Side effects: Queries every configured AI provider concurrently and
    inserts exactly one signal row.
Failure cases:
    - InvalidPairError: blank or oversized pair, raised before any provider call.
    - ProvidersUnavailableError: every provider query raised or timed out.
    - SignalPersistenceError: the insert failed.
    A single failing, slow or unparsable provider is replaced by an empty
    opinion and does not fail the request.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from signaldesk.application.signals.clock import Clock, utc_now
from signaldesk.application.signals.dtos import GenerateSignalCommand, SignalResult
from signaldesk.domain.signals.consensus import aggregate_opinions
from signaldesk.domain.signals.entities import NewSignal, ProviderOpinion
from signaldesk.domain.signals.errors import (
    InvalidPairError,
    OpinionParseError,
    ProviderError,
    ProvidersUnavailableError,
)
from signaldesk.domain.signals.ports import OpinionProvider, SignalRepository
from signaldesk.domain.signals.window import compute_window

logger = logging.getLogger(__name__)

MAX_PAIR_LENGTH = 32
DEFAULT_PROVIDER_TIMEOUT = 30.0

PromptRenderer = Callable[[str, datetime], str]


class GenerateSignalUseCase:
    """Orchestrates multi-provider signal generation.

    Dispatches the same prompt to every provider at once, waits for all
    of them to settle, fuses the opinions by majority vote and stores
    the resulting signal.
    """

    def __init__(
        self,
        providers: Sequence[OpinionProvider],
        repository: SignalRepository,
        render_prompt: PromptRenderer,
        provider_timeout: float = DEFAULT_PROVIDER_TIMEOUT,
        window_label: str = "UTC",
        clock: Clock = utc_now,
    ) -> None:
        names = [p.name for p in providers]
        if not names:
            raise ValueError("At least one opinion provider is required")
        if len(set(names)) != len(names):
            raise ValueError("Opinion providers must be distinct")
        self._providers = list(providers)
        self._repository = repository
        self._render_prompt = render_prompt
        self._provider_timeout = provider_timeout
        self._window_label = window_label
        self._clock = clock

    async def execute(self, command: GenerateSignalCommand) -> SignalResult:
        """Run the signal generation use case.

        Args:
            command: The generation request with the pair to analyze.

        Returns:
            The stored signal.

        Raises:
            InvalidPairError: If the pair is blank or too long.
            ProvidersUnavailableError: If no provider could be reached.
            SignalPersistenceError: If the signal could not be stored.
        """
        pair = self._validate_pair(command.pair)
        now = self._clock()
        prompt = self._render_prompt(pair, now)

        logger.info(
            "Generating signal for pair=%s across %d providers",
            pair,
            len(self._providers),
        )

        outcomes = await self._ask_all(pair, prompt)
        opinions = [opinion for opinion, _ in outcomes]
        unreachable = [
            provider.name.value
            for provider, (_, reached) in zip(self._providers, outcomes)
            if not reached
        ]
        if len(unreachable) == len(self._providers):
            raise ProvidersUnavailableError(unreachable)

        consensus = aggregate_opinions(opinions)
        window = compute_window(now, self._window_label)

        new_signal = NewSignal(
            pair=pair,
            action=consensus.action,
            confidence=consensus.confidence,
            start_time=window.start_time,
            end_time=window.end_time,
            analysis=consensus.analysis,
            verifiers=consensus.verifiers,
        )
        signal = await asyncio.to_thread(self._repository.insert, new_signal)

        logger.info(
            "Stored signal id=%d pair=%s action=%s confidence=%d verifiers=%s majority=%s",
            signal.id,
            signal.pair,
            signal.action,
            signal.confidence,
            ",".join(signal.verifiers),
            consensus.majority,
        )
        return SignalResult.from_entity(signal)

    @staticmethod
    def _validate_pair(pair: str) -> str:
        cleaned = (pair or "").strip()
        if not cleaned or len(cleaned) > MAX_PAIR_LENGTH:
            raise InvalidPairError(pair)
        return cleaned

    async def _ask_all(
        self, pair: str, prompt: str
    ) -> list[tuple[ProviderOpinion, bool]]:
        """Query every provider at once and wait for all of them.

        If one query raises an unexpected error, the remaining queries are
        cancelled and awaited before the error propagates.
        """
        tasks = [
            asyncio.create_task(self._ask(provider, pair, prompt))
            for provider in self._providers
        ]
        try:
            return await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def _ask(
        self, provider: OpinionProvider, pair: str, prompt: str
    ) -> tuple[ProviderOpinion, bool]:
        """Query one provider, substituting an empty opinion on failure.

        Returns:
            The opinion and whether the provider was reached at all.
            An unparsable reply counts as reached.
        """
        try:
            opinion = await asyncio.wait_for(
                provider.query(pair, prompt), timeout=self._provider_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "%s timed out after %.1fs", provider.name.value, self._provider_timeout
            )
            return ProviderOpinion.empty(provider.name), False
        except ProviderError as exc:
            logger.warning("%s unavailable: %s", provider.name.value, exc.reason)
            return ProviderOpinion.empty(provider.name), False
        except OpinionParseError as exc:
            logger.warning("%s reply ignored: %s", provider.name.value, exc.reason)
            return ProviderOpinion.empty(provider.name), True
        return opinion, True
