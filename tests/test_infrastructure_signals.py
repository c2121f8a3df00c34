"""
Tests for the signals infrastructure adapters.

The repository runs against in-memory SQLite; provider adapters run
against httpx.MockTransport. No network or PostgreSQL needed.
"""

import json
from datetime import datetime, timedelta, timezone

import httpx
import pytest
from sqlalchemy import create_engine, insert
from sqlalchemy.pool import StaticPool

from signaldesk.application.signals.dtos import GenerateSignalCommand
from signaldesk.application.signals.generate_signal import GenerateSignalUseCase
from signaldesk.core.config import Settings
from signaldesk.domain.signals.entities import NewSignal, ProviderName
from signaldesk.domain.signals.errors import (
    OpinionParseError,
    ProviderNotConfiguredError,
    ProviderRequestError,
    SignalPersistenceError,
)
from signaldesk.infrastructure.signals.opinion_providers import (
    AnthropicOpinionProvider,
    GeminiOpinionProvider,
    OpenAIOpinionProvider,
    build_opinion_providers,
)
from signaldesk.infrastructure.signals.prompt_loader import (
    FALLBACK_PROMPTS,
    PROMPT_KEY,
    PromptLoader,
)
from signaldesk.infrastructure.signals.signal_repository import (
    SignalRepositoryAdapter,
    create_schema,
    signals_table,
)

REPLY = {"action": "SELL/PUT", "confidence": 84, "analysis": "Bearish engulfing"}


def _sqlite_engine():
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def engine():
    eng = _sqlite_engine()
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def repository(engine) -> SignalRepositoryAdapter:
    return SignalRepositoryAdapter(engine)


def _new_signal(pair: str = "EUR/USD", **overrides) -> NewSignal:
    data = dict(
        pair=pair,
        action="BUY/CALL",
        confidence=82,
        start_time="10:10 UTC",
        end_time="10:15 UTC",
        analysis="OpenAI: x\n\nAnthropic: y\n\nGemini: N/A",
        verifiers=["OpenAI", "Anthropic"],
    )
    data.update(overrides)
    return NewSignal(**data)


# ══════════════════════════════════════════════════════════════════════
# SignalRepositoryAdapter
# ══════════════════════════════════════════════════════════════════════


class TestSignalRepositoryAdapter:
    """SQLAlchemy signal store on SQLite."""

    def test_insert_returns_stored_signal(self, repository) -> None:
        stored = repository.insert(_new_signal())
        assert stored.id == 1
        assert stored.status == "active"
        assert stored.verifiers == ["OpenAI", "Anthropic"]
        assert stored.created_at.tzinfo is not None

    def test_round_trip_preserves_fields(self, repository) -> None:
        repository.insert(_new_signal(verifiers=["Gemini"], confidence=0))
        [loaded] = repository.list_all()
        assert loaded.pair == "EUR/USD"
        assert loaded.confidence == 0
        assert loaded.verifiers == ["Gemini"]
        assert loaded.analysis.endswith("Gemini: N/A")

    def test_list_all_newest_first(self, repository) -> None:
        repository.insert(_new_signal("EUR/USD"))
        repository.insert(_new_signal("GBP/USD"))
        repository.insert(_new_signal("USD/JPY"))
        assert [s.pair for s in repository.list_all()] == ["USD/JPY", "GBP/USD", "EUR/USD"]

    def test_same_timestamp_ordered_by_id(self, engine, repository) -> None:
        created = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
        with engine.begin() as conn:
            for pair in ("AUD/JPY", "AUD/USD"):
                conn.execute(
                    insert(signals_table).values(
                        pair=pair,
                        action="SELL/PUT",
                        confidence=70,
                        start_time="10:05 UTC",
                        end_time="10:10 UTC",
                        status="active",
                        analysis="",
                        verifiers=[],
                        created_at=created,
                    )
                )
        assert repository.get_latest().pair == "AUD/USD"

    def test_older_created_at_sorts_last(self, engine, repository) -> None:
        repository.insert(_new_signal("EUR/USD"))
        with engine.begin() as conn:
            conn.execute(
                insert(signals_table).values(
                    pair="OLD/ONE",
                    action="BUY/CALL",
                    confidence=70,
                    start_time="09:05 UTC",
                    end_time="09:10 UTC",
                    analysis="",
                    verifiers=[],
                    created_at=datetime.now(timezone.utc) - timedelta(days=1),
                )
            )
        pairs = [s.pair for s in repository.list_all()]
        assert pairs == ["EUR/USD", "OLD/ONE"]

    def test_status_defaults_to_active(self, engine, repository) -> None:
        with engine.begin() as conn:
            conn.execute(
                insert(signals_table).values(
                    pair="EUR/USD",
                    action="BUY/CALL",
                    confidence=70,
                    start_time="10:05 UTC",
                    end_time="10:10 UTC",
                    analysis="",
                    verifiers=[],
                    created_at=datetime.now(timezone.utc),
                )
            )
        assert repository.get_latest().status == "active"

    def test_latest_on_empty_table(self, repository) -> None:
        assert repository.get_latest() is None
        assert repository.list_all() == []

    def test_delete_all_returns_count(self, repository) -> None:
        repository.insert(_new_signal())
        repository.insert(_new_signal())
        assert repository.delete_all() == 2
        assert repository.list_all() == []

    def test_delete_all_on_empty_table(self, repository) -> None:
        assert repository.delete_all() == 0

    def test_ids_keep_increasing(self, repository) -> None:
        first = repository.insert(_new_signal())
        second = repository.insert(_new_signal())
        assert second.id > first.id

    @pytest.mark.parametrize(
        "operation",
        [
            lambda repo: repo.list_all(),
            lambda repo: repo.get_latest(),
            lambda repo: repo.insert(_new_signal()),
            lambda repo: repo.delete_all(),
        ],
    )
    def test_storage_failure_raises_persistence_error(self, operation) -> None:
        eng = _sqlite_engine()  # schema never created
        with pytest.raises(SignalPersistenceError):
            operation(SignalRepositoryAdapter(eng))
        eng.dispose()


# ══════════════════════════════════════════════════════════════════════
# Provider adapters
# ══════════════════════════════════════════════════════════════════════


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _openai_body(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


def _provider(cls, client, api_key="test-key", base_url="https://llm.test"):
    return cls(
        api_key=api_key,
        model="test-model",
        base_url=base_url,
        system_prompt="system",
        timeout=5.0,
        client=client,
    )


class TestOpenAIOpinionProvider:
    """Chat completions request shape and error mapping."""

    @pytest.mark.asyncio
    async def test_successful_query(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_openai_body(json.dumps(REPLY)))

        async with _client(handler) as client:
            opinion = await _provider(OpenAIOpinionProvider, client).query(
                "EUR/USD", "prompt text"
            )

        assert opinion.provider is ProviderName.OPENAI
        assert opinion.action == "SELL/PUT"
        assert opinion.confidence == 84
        assert seen["url"] == "https://llm.test/chat/completions"
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["model"] == "test-model"
        assert seen["body"]["messages"][1] == {"role": "user", "content": "prompt text"}
        assert seen["body"]["response_format"] == {"type": "json_object"}

    @pytest.mark.asyncio
    async def test_prose_wrapped_reply(self) -> None:
        text = "Here is my view:\n```json\n" + json.dumps(REPLY) + "\n```"

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_openai_body(text))

        async with _client(handler) as client:
            opinion = await _provider(OpenAIOpinionProvider, client).query("EUR/USD", "p")
        assert opinion.analysis == "Bearish engulfing"

    @pytest.mark.asyncio
    async def test_missing_key_skips_request(self) -> None:
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=_openai_body("{}"))

        async with _client(handler) as client:
            provider = _provider(OpenAIOpinionProvider, client, api_key=None)
            assert not provider.is_configured
            with pytest.raises(ProviderNotConfiguredError):
                await provider.query("EUR/USD", "p")
        assert calls == []

    @pytest.mark.asyncio
    async def test_http_error_status(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, json={"error": "boom"})

        async with _client(handler) as client:
            with pytest.raises(ProviderRequestError, match="HTTP 500"):
                await _provider(OpenAIOpinionProvider, client).query("EUR/USD", "p")

    @pytest.mark.asyncio
    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with pytest.raises(ProviderRequestError, match="ConnectError"):
                await _provider(OpenAIOpinionProvider, client).query("EUR/USD", "p")

    @pytest.mark.asyncio
    async def test_non_json_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>gateway</html>")

        async with _client(handler) as client:
            with pytest.raises(ProviderRequestError, match="not JSON"):
                await _provider(OpenAIOpinionProvider, client).query("EUR/USD", "p")

    @pytest.mark.asyncio
    async def test_unexpected_response_shape(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"choices": []})

        async with _client(handler) as client:
            with pytest.raises(OpinionParseError, match="unexpected response shape"):
                await _provider(OpenAIOpinionProvider, client).query("EUR/USD", "p")

    @pytest.mark.asyncio
    async def test_reply_without_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=_openai_body("I cannot help with that."))

        async with _client(handler) as client:
            with pytest.raises(OpinionParseError):
                await _provider(OpenAIOpinionProvider, client).query("EUR/USD", "p")


class TestAnthropicOpinionProvider:
    """Messages API request shape."""

    @pytest.mark.asyncio
    async def test_successful_query(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["headers"] = request.headers
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "content": [
                        {"type": "text", "text": json.dumps(REPLY)},
                    ]
                },
            )

        async with _client(handler) as client:
            opinion = await _provider(
                AnthropicOpinionProvider, client, base_url="https://llm.test/"
            ).query("GBP/USD", "prompt text")

        assert opinion.provider is ProviderName.ANTHROPIC
        assert opinion.action == "SELL/PUT"
        assert seen["url"] == "https://llm.test/v1/messages"
        assert seen["headers"]["x-api-key"] == "test-key"
        assert seen["headers"]["anthropic-version"] == "2023-06-01"
        assert seen["body"]["system"] == "system"
        assert seen["body"]["messages"] == [{"role": "user", "content": "prompt text"}]


class TestGeminiOpinionProvider:
    """generateContent request shape."""

    @pytest.mark.asyncio
    async def test_successful_query(self) -> None:
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers["x-goog-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": json.dumps(REPLY)}]}}]},
            )

        async with _client(handler) as client:
            opinion = await _provider(GeminiOpinionProvider, client).query(
                "USD/JPY", "prompt text"
            )

        assert opinion.provider is ProviderName.GEMINI
        assert opinion.confidence == 84
        assert seen["url"] == "https://llm.test/models/test-model:generateContent"
        assert seen["key"] == "test-key"
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "prompt text"
        assert seen["body"]["generationConfig"]["responseMimeType"] == "application/json"

    @pytest.mark.asyncio
    async def test_blocked_reply_without_candidates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})

        async with _client(handler) as client:
            with pytest.raises(OpinionParseError):
                await _provider(GeminiOpinionProvider, client).query("USD/JPY", "p")


class TestMalformedReplyShapes:
    """Valid JSON bodies with the wrong field types are parse errors."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "cls, body",
        [
            (AnthropicOpinionProvider, {"content": ["plain string block"]}),
            (AnthropicOpinionProvider, {"content": [{"type": "text", "text": 7}]}),
            (OpenAIOpinionProvider, {"choices": [{"message": {"content": {"action": "BUY"}}}]}),
            (OpenAIOpinionProvider, [{"choices": []}]),
            (GeminiOpinionProvider, {"candidates": [{"content": {"parts": [{"text": 42}]}}]}),
            (GeminiOpinionProvider, {"candidates": ["blocked"]}),
        ],
    )
    async def test_wrong_types_raise_opinion_parse_error(self, cls, body) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=body)

        async with _client(handler) as client:
            with pytest.raises(OpinionParseError):
                await _provider(cls, client).query("EUR/USD", "p")

    @pytest.mark.asyncio
    async def test_malformed_provider_does_not_abort_generation(self, repository) -> None:
        """One adapter gets a garbled body; the other two still produce a signal."""
        buy = json.dumps({"action": "BUY/CALL", "confidence": 90, "analysis": "breakout"})

        def handler(request: httpx.Request) -> httpx.Response:
            host = request.url.host
            if host == "openai.test":
                return httpx.Response(200, json=_openai_body(buy))
            if host == "anthropic.test":
                return httpx.Response(200, json={"content": ["plain string block"]})
            return httpx.Response(
                200, json={"candidates": [{"content": {"parts": [{"text": buy}]}}]}
            )

        async with _client(handler) as client:
            providers = [
                _provider(OpenAIOpinionProvider, client, base_url="https://openai.test"),
                _provider(AnthropicOpinionProvider, client, base_url="https://anthropic.test"),
                _provider(GeminiOpinionProvider, client, base_url="https://gemini.test"),
            ]
            use_case = GenerateSignalUseCase(
                providers=providers,
                repository=repository,
                render_prompt=lambda pair, now: f"analyze {pair}",
                clock=lambda: datetime(2024, 1, 1, 10, 7, tzinfo=timezone.utc),
            )
            result = await use_case.execute(GenerateSignalCommand(pair="EUR/USD"))

        assert result.action == "BUY/CALL"
        assert result.verifiers == ["OpenAI", "Gemini"]
        assert "Anthropic: N/A" in result.analysis
        assert len(repository.list_all()) == 1


class TestBuildOpinionProviders:
    """Provider construction from settings."""

    def test_fixed_order_and_configuration(self, monkeypatch) -> None:
        for var in (
            "OPENAI_API_KEY",
            "AI_INTEGRATIONS_OPENAI_API_KEY",
            "ANTHROPIC_API_KEY",
            "AI_INTEGRATIONS_ANTHROPIC_API_KEY",
            "GEMINI_API_KEY",
            "AI_INTEGRATIONS_GEMINI_API_KEY",
        ):
            monkeypatch.delenv(var, raising=False)
        monkeypatch.setenv("AI_INTEGRATIONS_OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("GEMINI_API_KEY", "gm-key")

        providers = build_opinion_providers(Settings(_env_file=None), "system")

        assert [p.name for p in providers] == list(ProviderName.ordered())
        assert [p.is_configured for p in providers] == [True, False, True]


# ══════════════════════════════════════════════════════════════════════
# PromptLoader
# ══════════════════════════════════════════════════════════════════════


class TestPromptLoader:
    """YAML prompt loading with built-in fallback."""

    def test_bundled_prompts(self) -> None:
        loader = PromptLoader()
        prompt = loader.render_user_prompt(
            "EUR/USD", datetime(2024, 1, 1, 10, 7, 5, tzinfo=timezone.utc)
        )
        assert "EUR/USD" in prompt
        assert "10:07:05 UTC" in prompt
        assert loader.system_prompt

    def test_missing_file_falls_back(self, tmp_path) -> None:
        loader = PromptLoader(tmp_path / "absent.yaml")
        assert loader.prompts is FALLBACK_PROMPTS

    def test_malformed_file_falls_back(self, tmp_path) -> None:
        path = tmp_path / "prompts.yaml"
        path.write_text("signal_analysis: [unclosed", encoding="utf-8")
        assert PromptLoader(path).prompts is FALLBACK_PROMPTS

    def test_file_without_prompt_key_falls_back(self, tmp_path) -> None:
        path = tmp_path / "prompts.yaml"
        path.write_text("other: {}\n", encoding="utf-8")
        assert PromptLoader(path).prompts is FALLBACK_PROMPTS

    def test_custom_template(self, tmp_path) -> None:
        path = tmp_path / "prompts.yaml"
        path.write_text(
            f"{PROMPT_KEY}:\n"
            "  system: Be brief.\n"
            "  user_template: 'Pair {pair} @ {current_time}'\n",
            encoding="utf-8",
        )
        loader = PromptLoader(path)
        now = datetime(2024, 1, 1, 8, 0, 0, tzinfo=timezone.utc)
        assert loader.system_prompt == "Be brief."
        assert loader.render_user_prompt("AUD/JPY", now) == "Pair AUD/JPY @ 08:00:00 UTC"
