"""Tests for regclear.providers: completions, retry policy, provider selection."""

import json
from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import openai
import pytest
from tenacity import wait_none

from regclear.config import Settings
from regclear.errors import ProviderError
from regclear.providers import (
    AnthropicProvider,
    LLMMessage,
    LLMProvider,
    LLMRequest,
    OllamaProvider,
    OpenAIProvider,
    create_provider,
    get_default_provider,
    list_providers,
)


@pytest.fixture(autouse=True)
def no_backoff(monkeypatch):
    monkeypatch.setattr(LLMProvider, "retry_wait", wait_none())


@pytest.fixture
def request_():
    return LLMRequest(
        system_prompt="system",
        messages=[LLMMessage(role="user", content="fill this")],
        max_tokens=100,
        temperature=0.1,
    )


def make_settings(**overrides):
    return Settings(_env_file=None, **overrides)


def http_response(status, url):
    return httpx.Response(status, request=httpx.Request("POST", url))


def anthropic_message(text="Drafted"):
    return MagicMock(
        content=[MagicMock(type="text", text=text)],
        model="claude-test",
        usage=MagicMock(input_tokens=5, output_tokens=7),
    )


def anthropic_error(error_cls, status):
    return error_cls(
        f"status {status}",
        response=http_response(status, "https://api.anthropic.com/v1/messages"),
        body=None,
    )


@pytest.fixture
def anthropic_client():
    client = MagicMock()
    client.messages.create = AsyncMock(return_value=anthropic_message())
    return client


@pytest.fixture
def anthropic_provider(anthropic_client):
    return AnthropicProvider(make_settings(anthropic_api_key="sk-test"), client=anthropic_client)


class TestAnthropicProvider:

    async def test_complete(self, anthropic_provider, anthropic_client, request_):
        response = await anthropic_provider.complete(request_)

        assert response.content == "Drafted"
        assert response.model == "claude-test"
        assert response.usage.output_tokens == 7
        kwargs = anthropic_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "system"
        assert kwargs["messages"] == [{"role": "user", "content": "fill this"}]
        assert kwargs["max_tokens"] == 100

    async def test_rate_limit_retried(self, anthropic_provider, anthropic_client, request_):
        anthropic_client.messages.create.side_effect = [
            anthropic_error(anthropic.RateLimitError, 429),
            anthropic_message("Second try"),
        ]
        response = await anthropic_provider.complete(request_)
        assert response.content == "Second try"
        assert anthropic_client.messages.create.call_count == 2

    async def test_bad_request_not_retried(self, anthropic_provider, anthropic_client, request_):
        anthropic_client.messages.create.side_effect = anthropic_error(anthropic.BadRequestError, 400)
        with pytest.raises(ProviderError) as exc_info:
            await anthropic_provider.complete(request_)
        assert exc_info.value.status == 400
        assert anthropic_client.messages.create.call_count == 1

    async def test_server_errors_exhaust_retries(self, anthropic_provider, anthropic_client, request_):
        anthropic_client.messages.create.side_effect = anthropic_error(
            anthropic.InternalServerError, 500
        )
        with pytest.raises(ProviderError) as exc_info:
            await anthropic_provider.complete(request_)
        assert exc_info.value.status == 500
        assert anthropic_client.messages.create.call_count == 3

    def test_client_requires_key(self):
        provider = AnthropicProvider(make_settings())
        with pytest.raises(ProviderError, match="ANTHROPIC_API_KEY"):
            provider.client

    def test_model_from_settings(self):
        provider = AnthropicProvider(make_settings(anthropic_model="claude-other"))
        assert provider.model == "claude-other"


class TestOpenAIProvider:

    @pytest.fixture
    def openai_client(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=MagicMock(
            choices=[MagicMock(message=MagicMock(content="From OpenAI"))],
            model="gpt-test",
            usage=MagicMock(prompt_tokens=3, completion_tokens=4),
        ))
        return client

    async def test_complete(self, openai_client, request_):
        provider = OpenAIProvider(make_settings(openai_api_key="sk-test"), client=openai_client)
        response = await provider.complete(request_)

        assert response.content == "From OpenAI"
        assert response.usage.input_tokens == 3
        messages = openai_client.chat.completions.create.call_args.kwargs["messages"]
        assert messages[0] == {"role": "system", "content": "system"}
        assert messages[1] == {"role": "user", "content": "fill this"}

    async def test_auth_error_not_retried(self, openai_client, request_):
        openai_client.chat.completions.create.side_effect = openai.AuthenticationError(
            "bad key",
            response=http_response(401, "https://api.openai.com/v1/chat/completions"),
            body=None,
        )
        provider = OpenAIProvider(make_settings(openai_api_key="sk-test"), client=openai_client)
        with pytest.raises(ProviderError) as exc_info:
            await provider.complete(request_)
        assert exc_info.value.status == 401
        assert exc_info.value.provider == "openai"
        assert openai_client.chat.completions.create.call_count == 1


class TestOllamaProvider:

    def make_provider(self, handler):
        settings = make_settings(ollama_base_url="http://ollama.test")
        client = httpx.AsyncClient(
            base_url=settings.resolved_ollama_url,
            transport=httpx.MockTransport(handler),
        )
        return OllamaProvider(settings, client=client)

    async def test_complete(self, request_):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={
                "model": "llama3.2",
                "message": {"role": "assistant", "content": "Local draft"},
                "prompt_eval_count": 11,
                "eval_count": 22,
            })

        provider = self.make_provider(handler)
        response = await provider.complete(request_)
        await provider.aclose()

        assert response.content == "Local draft"
        assert response.usage.output_tokens == 22
        assert seen["path"] == "/api/chat"
        assert seen["payload"]["stream"] is False
        assert seen["payload"]["options"] == {"temperature": 0.1, "num_predict": 100}
        assert seen["payload"]["messages"][0] == {"role": "system", "content": "system"}

    async def test_unavailable_model_not_retried(self, request_):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, text="model not found")

        provider = self.make_provider(handler)
        with pytest.raises(ProviderError, match="model not found") as exc_info:
            await provider.complete(request_)
        await provider.aclose()

        assert exc_info.value.status == 404
        assert len(calls) == 1

    async def test_overloaded_retried(self, request_):
        responses = iter([
            httpx.Response(503, text="busy"),
            httpx.Response(200, json={"message": {"content": "ok"}}),
        ])
        provider = self.make_provider(lambda request: next(responses))
        response = await provider.complete(request_)
        await provider.aclose()

        assert response.content == "ok"
        assert response.model == "llama3.2"


class TestProviderSelection:

    def test_create_unknown(self):
        with pytest.raises(ProviderError, match='Unknown provider "bard"'):
            create_provider("bard", make_settings())

    def test_create_known(self):
        assert isinstance(create_provider("openai", make_settings()), OpenAIProvider)

    def test_none_configured(self):
        with pytest.raises(ProviderError, match="No LLM provider configured"):
            get_default_provider(make_settings())

    def test_first_configured_wins(self):
        settings = make_settings(openai_api_key="sk-o", ollama_base_url="http://localhost:11434")
        assert isinstance(get_default_provider(settings), OpenAIProvider)

        settings = make_settings(anthropic_api_key="sk-a", openai_api_key="sk-o")
        assert isinstance(get_default_provider(settings), AnthropicProvider)

    def test_explicit_default(self):
        settings = make_settings(anthropic_api_key="sk-a", default_provider="ollama")
        assert isinstance(get_default_provider(settings), OllamaProvider)

    def test_list_providers(self):
        infos = list_providers(make_settings(openai_api_key="sk-o"))
        assert [(i.id, i.configured) for i in infos] == [
            ("anthropic", False),
            ("openai", True),
            ("ollama", False),
        ]


class TestProviderError:

    @pytest.mark.parametrize("status,retryable", [
        (429, True), (500, True), (503, True), (400, False), (401, False), (None, False),
    ])
    def test_retryable(self, status, retryable):
        assert ProviderError("x", "msg", status=status).retryable is retryable

    def test_message_prefixed(self):
        assert ProviderError("openai", "boom").message == "[openai] boom"
