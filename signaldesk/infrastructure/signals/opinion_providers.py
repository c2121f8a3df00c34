"""
Adapters: AI opinion providers.

Implements the OpinionProvider port for OpenAI, Anthropic and Gemini by
calling their REST APIs directly with httpx. Each client is an explicit,
constructed handle holding its own credentials: nothing is stored in
module-level state or in the process environment.

Architecture:
    GenerateSignalUseCase ──▶ OpenAIOpinionProvider    ──▶ /chat/completions
                          ──▶ AnthropicOpinionProvider ──▶ /v1/messages
                          ──▶ GeminiOpinionProvider    ──▶ :generateContent
"""

import logging
from abc import abstractmethod
from typing import Any, Optional

import httpx

from signaldesk.core.config import Settings
from signaldesk.domain.signals.entities import ProviderName, ProviderOpinion
from signaldesk.domain.signals.errors import (
    OpinionParseError,
    ProviderNotConfiguredError,
    ProviderRequestError,
)
from signaldesk.domain.signals.opinion_parser import parse_opinion
from signaldesk.domain.signals.ports import OpinionProvider

logger = logging.getLogger(__name__)

ANTHROPIC_VERSION = "2023-06-01"


class HttpOpinionProvider(OpinionProvider):
    """Base class for providers reached with a single JSON POST.

    Args:
        api_key: Provider API key. None means the provider is not configured.
        model: Model identifier sent with every request.
        base_url: API root, without a trailing slash.
        system_prompt: Instructions sent alongside the user prompt.
        timeout: HTTP timeout in seconds.
        temperature: Sampling temperature.
        max_tokens: Upper bound on the reply length.
        client: Optional shared AsyncClient; a short-lived one is opened
            per query when omitted.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        system_prompt: str,
        timeout: float = 30.0,
        temperature: float = 0.3,
        max_tokens: int = 300,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._system_prompt = system_prompt
        self._timeout = timeout
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key)

    @abstractmethod
    def _build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        """Return the URL, headers and JSON payload for a prompt."""
        raise NotImplementedError

    @abstractmethod
    def _extract_text(self, body: dict[str, Any]) -> str:
        """Return the model's reply text from a response body."""
        raise NotImplementedError

    async def query(self, pair: str, prompt: str) -> ProviderOpinion:
        """Ask the provider for an opinion and parse its reply.

        Raises:
            ProviderNotConfiguredError: No API key was supplied.
            ProviderRequestError: Network error, timeout or non-2xx status.
            OpinionParseError: The reply held no usable JSON object.
        """
        provider = self.name.value
        if not self.is_configured:
            raise ProviderNotConfiguredError(provider)

        url, headers, payload = self._build_request(prompt)
        logger.debug("Querying %s model=%s pair=%s", provider, self._model, pair)

        try:
            response = await self._post(url, headers, payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as exc:
            raise ProviderRequestError(
                provider, f"HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise ProviderRequestError(provider, type(exc).__name__) from exc
        except ValueError as exc:
            raise ProviderRequestError(provider, "response body is not JSON") from exc

        try:
            text = self._extract_text(body)
        except (KeyError, IndexError, TypeError, AttributeError) as exc:
            raise OpinionParseError(provider, "unexpected response shape") from exc

        return parse_opinion(self.name, text)

    async def _post(
        self, url: str, headers: dict[str, str], payload: dict[str, Any]
    ) -> httpx.Response:
        if self._client is not None:
            return await self._client.post(
                url, headers=headers, json=payload, timeout=self._timeout
            )
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(url, headers=headers, json=payload)


class OpenAIOpinionProvider(HttpOpinionProvider):
    """OpenAI chat completions in JSON mode."""

    @property
    def name(self) -> ProviderName:
        return ProviderName.OPENAI

    def _build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
            "response_format": {"type": "json_object"},
        }
        return f"{self._base_url}/chat/completions", headers, payload

    def _extract_text(self, body: dict[str, Any]) -> str:
        return body["choices"][0]["message"]["content"]


class AnthropicOpinionProvider(HttpOpinionProvider):
    """Anthropic messages API."""

    @property
    def name(self) -> ProviderName:
        return ProviderName.ANTHROPIC

    def _build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        payload = {
            "model": self._model,
            "system": self._system_prompt,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }
        return f"{self._base_url}/v1/messages", headers, payload

    def _extract_text(self, body: dict[str, Any]) -> str:
        return "".join(
            block["text"] for block in body["content"] if block.get("type") == "text"
        )


class GeminiOpinionProvider(HttpOpinionProvider):
    """Google Gemini generateContent with a JSON response MIME type."""

    @property
    def name(self) -> ProviderName:
        return ProviderName.GEMINI

    def _build_request(self, prompt: str) -> tuple[str, dict[str, str], dict[str, Any]]:
        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        payload = {
            "systemInstruction": {"parts": [{"text": self._system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_tokens,
                "responseMimeType": "application/json",
            },
        }
        return f"{self._base_url}/models/{self._model}:generateContent", headers, payload

    def _extract_text(self, body: dict[str, Any]) -> str:
        return body["candidates"][0]["content"]["parts"][0]["text"]


def build_opinion_providers(
    settings: Settings,
    system_prompt: str,
    client: Optional[httpx.AsyncClient] = None,
) -> list[HttpOpinionProvider]:
    """Construct one client per provider, in fixed provider order."""
    common = {
        "system_prompt": system_prompt,
        "timeout": settings.provider_timeout_seconds,
        "temperature": settings.llm_temperature,
        "max_tokens": settings.llm_max_tokens,
        "client": client,
    }
    providers: list[HttpOpinionProvider] = [
        OpenAIOpinionProvider(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            **common,
        ),
        AnthropicOpinionProvider(
            api_key=settings.anthropic_api_key,
            model=settings.anthropic_model,
            base_url=settings.anthropic_base_url,
            **common,
        ),
        GeminiOpinionProvider(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            **common,
        ),
    ]
    missing = [p.name.value for p in providers if not p.is_configured]
    if missing:
        logger.warning("AI providers without API key: %s", ", ".join(missing))
    return providers
