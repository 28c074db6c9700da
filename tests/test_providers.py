"""Tests for the HTTP tag providers."""

import json

import httpx
import pytest
import respx
from httpx import Response

from vault_tagger.constants import GEMINI_URL, MAX_INPUT_CHARS, MISTRAL_URL, OPENAI_URL
from vault_tagger.data_models import TaggerSettings
from vault_tagger.errors import ConfigurationError, ProviderError
from vault_tagger.providers import (
    GeminiProvider,
    MistralProvider,
    OllamaProvider,
    OpenAIProvider,
    TagProvider,
    create_provider,
    is_provider_configured,
    split_tag_response,
)


def make_chat_response(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


class TestSplitTagResponse:
    """Tests for parsing free-text backend answers."""

    def test_comma_separated(self):
        assert split_tag_response("python, machine learning ,  testing") == [
            "python",
            "machine learning",
            "testing",
        ]

    def test_numbered_and_bulleted_lines(self):
        assert split_tag_response("1. alpha\n2) beta\n- gamma\n* #delta") == [
            "alpha",
            "beta",
            "gamma",
            "delta",
        ]

    def test_empty_entries_dropped(self):
        assert split_tag_response(", ,\n\n") == []


class TestOpenAIProvider:
    """Tests for OpenAIProvider requests and error mapping."""

    def test_requires_api_key(self):
        with pytest.raises(ConfigurationError):
            OpenAIProvider("", "gpt-4o-mini")

    @pytest.mark.asyncio
    @respx.mock
    async def test_request_tags_success(self):
        route = respx.post(OPENAI_URL).mock(
            return_value=Response(200, json=make_chat_response("python, testing"))
        )

        async with OpenAIProvider("sk-test", "gpt-4o-mini") as provider:
            tags = await provider.request_tags("z" * (MAX_INPUT_CHARS + 500), "Give tags")

        assert tags == ["python", "testing"]
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = json.loads(request.content)
        assert body["model"] == "gpt-4o-mini"
        assert body["temperature"] == 0.3
        assert body["messages"][0]["role"] == "system"
        user_message = body["messages"][1]["content"]
        assert user_message.startswith("Give tags\n\nText: ")
        assert user_message.count("z") == MAX_INPUT_CHARS

    @pytest.mark.asyncio
    @respx.mock
    async def test_rate_limit_is_retriable(self):
        respx.post(OPENAI_URL).mock(return_value=Response(429, json={"error": {"message": "slow down"}}))

        async with OpenAIProvider("sk-test", "gpt-4o-mini") as provider:
            with pytest.raises(ProviderError) as excinfo:
                await provider.request_tags("text", "prompt")

        assert excinfo.value.kind == "rate_limit"
        assert excinfo.value.retriable
        assert excinfo.value.status_code == 429

    @pytest.mark.asyncio
    @respx.mock
    async def test_auth_failure_uses_backend_message(self):
        respx.post(OPENAI_URL).mock(
            return_value=Response(401, json={"error": {"message": "Incorrect API key"}})
        )

        async with OpenAIProvider("sk-bad", "gpt-4o-mini") as provider:
            with pytest.raises(ProviderError) as excinfo:
                await provider.request_tags("text", "prompt")

        assert excinfo.value.kind == "auth"
        assert not excinfo.value.retriable
        assert "Incorrect API key" in str(excinfo.value)

    @pytest.mark.asyncio
    @respx.mock
    async def test_server_error_without_json(self):
        respx.post(OPENAI_URL).mock(return_value=Response(502, text="bad gateway"))

        async with OpenAIProvider("sk-test", "gpt-4o-mini") as provider:
            with pytest.raises(ProviderError) as excinfo:
                await provider.request_tags("text", "prompt")

        assert excinfo.value.kind == "transport"
        assert str(excinfo.value) == "openai error (502)"

    @pytest.mark.asyncio
    @respx.mock
    async def test_connection_error(self):
        respx.post(OPENAI_URL).mock(side_effect=httpx.ConnectError("refused"))

        async with OpenAIProvider("sk-test", "gpt-4o-mini") as provider:
            with pytest.raises(ProviderError) as excinfo:
                await provider.request_tags("text", "prompt")

        assert excinfo.value.kind == "transport"
        assert excinfo.value.status_code is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_body(self):
        respx.post(OPENAI_URL).mock(return_value=Response(200, json={"choices": []}))

        async with OpenAIProvider("sk-test", "gpt-4o-mini") as provider:
            with pytest.raises(ProviderError) as excinfo:
                await provider.request_tags("text", "prompt")

        assert excinfo.value.kind == "response"


class TestOtherProviders:
    """Tests for Mistral, Ollama and Gemini request shapes."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_mistral_uses_its_endpoint(self):
        route = respx.post(MISTRAL_URL).mock(return_value=Response(200, json=make_chat_response("a, b")))

        async with MistralProvider("key", "mistral-small-latest") as provider:
            assert await provider.request_tags("text", "prompt") == ["a", "b"]

        assert route.called
        assert provider.name == "mistral"

    @pytest.mark.asyncio
    @respx.mock
    async def test_ollama_generate(self):
        route = respx.post("http://ollama.local:11434/api/generate").mock(
            return_value=Response(200, json={"response": "alpha, beta", "done": True})
        )

        async with OllamaProvider("http://ollama.local:11434/", "llama2") as provider:
            assert await provider.request_tags("text", "prompt") == ["alpha", "beta"]

        body = json.loads(route.calls.last.request.content)
        assert body["stream"] is False
        assert body["model"] == "llama2"
        assert body["prompt"].startswith("prompt\n\nText: text")

    def test_ollama_requires_host(self):
        with pytest.raises(ConfigurationError):
            OllamaProvider("", "llama2")

    @pytest.mark.asyncio
    @respx.mock
    async def test_gemini_generate_content(self):
        route = respx.post(f"{GEMINI_URL}/gemini-1.5-flash:generateContent").mock(
            return_value=Response(
                200,
                json={"candidates": [{"content": {"parts": [{"text": "alpha, "}, {"text": "beta"}]}}]},
            )
        )

        async with GeminiProvider("g-key", "gemini-1.5-flash") as provider:
            assert await provider.request_tags("text", "prompt") == ["alpha", "beta"]

        request = route.calls.last.request
        assert request.headers["x-goog-api-key"] == "g-key"
        body = json.loads(request.content)
        assert body["contents"][0]["parts"][0]["text"].startswith("prompt")


class TestProviderFactory:
    """Tests for provider selection from settings."""

    @pytest.mark.parametrize(
        ("settings", "expected"),
        [
            (TaggerSettings(ai_provider="openai", openai_api_key="k"), OpenAIProvider),
            (TaggerSettings(ai_provider="mistral", mistral_api_key="k"), MistralProvider),
            (TaggerSettings(ai_provider="gemini", gemini_api_key="k"), GeminiProvider),
            (TaggerSettings(ai_provider="ollama"), OllamaProvider),
        ],
    )
    def test_create_provider(self, settings, expected):
        provider = create_provider(settings, client=httpx.AsyncClient())
        assert isinstance(provider, expected)
        assert isinstance(provider, TagProvider)
        assert is_provider_configured(settings)

    def test_missing_key_is_not_configured(self):
        settings = TaggerSettings(ai_provider="openai", openai_api_key="")
        assert not is_provider_configured(settings)
        with pytest.raises(ConfigurationError):
            create_provider(settings)

    def test_unknown_provider(self):
        settings = TaggerSettings(ai_provider="anthropic")
        assert not is_provider_configured(settings)
        with pytest.raises(ConfigurationError):
            create_provider(settings)
