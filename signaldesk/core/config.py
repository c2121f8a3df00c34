"""
Application configuration.

Loads settings from environment variables and .env file.
Provider credentials, storage DSN and signal defaults all live here.
"""

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Attributes:
        project_name: Display name for the API.
        version: Current API version string.
        debug: Enable debug mode. Must be False in production.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
        rate_limit_default: Default rate limit for all endpoints.
        rate_limit_heavy: Rate limit for signal generation (three LLM calls).
        provider_timeout_seconds: Upper bound on a single provider query.
        signal_timezone_label: Suffix appended to signal window times.

    Provider API keys are optional. A provider without a key is reported
    as not configured when queried and the remaining providers still vote.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )

    project_name: str = "SignalDesk"
    version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    rate_limit_default: str = "60/minute"
    rate_limit_heavy: str = "10/minute"

    # Storage
    database_url: Optional[str] = None
    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_db: str = "signaldesk"

    # AI providers
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "AI_INTEGRATIONS_OPENAI_API_KEY"),
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL", "AI_INTEGRATIONS_OPENAI_BASE_URL"),
    )
    openai_model: str = "gpt-4o"
    anthropic_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "ANTHROPIC_API_KEY", "AI_INTEGRATIONS_ANTHROPIC_API_KEY"
        ),
    )
    anthropic_base_url: str = "https://api.anthropic.com"
    anthropic_model: str = "claude-3-5-sonnet-latest"
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("GEMINI_API_KEY", "AI_INTEGRATIONS_GEMINI_API_KEY"),
    )
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    gemini_model: str = "gemini-2.0-flash"
    provider_timeout_seconds: float = 30.0
    llm_temperature: float = 0.3
    llm_max_tokens: int = 300

    # Signals
    signal_timezone_label: str = "UTC"
    supported_pairs: list[str] = ["AUD/JPY", "EUR/USD", "GBP/USD", "USD/JPY", "AUD/USD"]

    def get_database_dsn(self) -> str:
        """Return the effective DSN for the signal store.

        Priority:
        1. Explicit `DATABASE_URL`
        2. Build DSN from postgres_* values (useful for Docker Compose or local setups)
        """
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}@"
            f"{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )


settings = Settings()
