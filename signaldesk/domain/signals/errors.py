"""
Domain-specific errors for the signals bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class SignalDomainError(Exception):
    """Base error for all signals domain errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class InvalidPairError(SignalDomainError):
    """Raised when the requested instrument identifier is unusable."""

    def __init__(self, pair: str) -> None:
        super().__init__(f"Invalid pair: {pair!r}")
        self.pair = pair


class SignalNotFoundError(SignalDomainError):
    """Raised when an operation needs a signal and none is stored."""

    def __init__(self) -> None:
        super().__init__("No signal has been generated yet")


class ProviderError(SignalDomainError):
    """Base error for a single AI provider query."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider} query failed: {reason}")
        self.provider = provider
        self.reason = reason


class ProviderNotConfiguredError(ProviderError):
    """Raised when a provider is queried without credentials."""

    def __init__(self, provider: str) -> None:
        super().__init__(provider, "provider is not configured (missing API key)")


class ProviderRequestError(ProviderError):
    """Raised on network errors, non-2xx responses and timeouts."""


class OpinionParseError(SignalDomainError):
    """Raised when a provider reply holds no recoverable JSON object."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"Could not parse {provider} reply: {reason}")
        self.provider = provider
        self.reason = reason


class ProvidersUnavailableError(SignalDomainError):
    """Raised when every provider query failed for one generation."""

    def __init__(self, providers: list[str]) -> None:
        super().__init__(f"All AI providers failed: {', '.join(providers)}")
        self.providers = providers


class SignalPersistenceError(SignalDomainError):
    """Raised when the signal store cannot complete an operation."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(f"Signal store {operation} failed: {reason}")
        self.operation = operation
        self.reason = reason
