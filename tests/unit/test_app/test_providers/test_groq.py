"""
test_groq.py - Groq Chat Provider 테스트

업스트림 계약 검증 (httpx.MockTransport):
- POST endpoint + Bearer 인증 + {"model", "messages", "temperature"}
- choices[0].message.content → assistant 메시지 (trim)
- non-2xx → ProviderHttpError
- 빈 completion / JSON 아님 → EmptyCompletionError
- API 키 누락 → MissingCredentialError (네트워크 호출 없음)
"""

import pytest

from chatbridge.app.providers.groq import MAX_LOGGED_BODY, GroqChatProvider
from chatbridge.domain.errors import (
    EmptyCompletionError,
    MissingCredentialError,
    ProviderHttpError,
)
from chatbridge.domain.schemas import Message

ENDPOINT = "https://api.groq.test/openai/v1/chat/completions"

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider(upstream) -> GroqChatProvider:
    """MockTransport 연결된 provider."""
    return GroqChatProvider(
        api_key="gsk-test",
        endpoint=ENDPOINT,
        transport=upstream.transport,
    )


@pytest.fixture
def conversation() -> list[Message]:
    return [
        Message(role="system", content="Use this knowledge:\n"),
        Message(role="user", content="hello"),
    ]


# =============================================================================
# 초기화 테스트
# =============================================================================


class TestGroqChatProviderInit:
    """GroqChatProvider 초기화 테스트."""

    def test_init_with_defaults(self):
        provider = GroqChatProvider(api_key="k")

        assert provider.model == "llama3-8b-8192"
        assert provider.temperature == 0.7
        assert provider.endpoint == "https://api.groq.com/openai/v1/chat/completions"
        assert provider.timeout is None

    def test_init_uses_env_api_key(self, monkeypatch):
        """환경변수에서 API 키 로드."""
        monkeypatch.setenv("GROQ_API_KEY", "env-key")

        assert GroqChatProvider().api_key == "env-key"

    def test_missing_key_fails_fast(self, monkeypatch):
        """API 키 없음 → MissingCredentialError."""
        monkeypatch.delenv("GROQ_API_KEY", raising=False)

        with pytest.raises(MissingCredentialError) as exc_info:
            GroqChatProvider()

        assert exc_info.value.context["api_key_env"] == "GROQ_API_KEY"

    def test_empty_key_is_missing(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "")

        with pytest.raises(MissingCredentialError):
            GroqChatProvider()

    def test_custom_key_env(self, monkeypatch):
        monkeypatch.setenv("MY_GROQ_KEY", "custom")

        assert GroqChatProvider(api_key_env="MY_GROQ_KEY").api_key == "custom"

    def test_from_config(self, monkeypatch, test_config):
        monkeypatch.setenv("GROQ_API_KEY", "cfg-key")
        test_config["ai"]["chat"]["timeout"] = 12.5

        provider = GroqChatProvider.from_config(test_config)

        assert provider.endpoint == ENDPOINT
        assert provider.model == "llama3-8b-8192"
        assert provider.timeout == 12.5
        assert provider.api_key == "cfg-key"

    def test_from_empty_config(self, monkeypatch):
        monkeypatch.setenv("GROQ_API_KEY", "k")

        provider = GroqChatProvider.from_config({})

        assert provider.model == "llama3-8b-8192"


# =============================================================================
# 요청 형식 테스트
# =============================================================================


class TestRequest:
    """업스트림 요청 형식."""

    def test_build_payload(self, provider, conversation):
        payload = provider.build_payload(conversation)

        assert payload == {
            "model": "llama3-8b-8192",
            "messages": [
                {"role": "system", "content": "Use this knowledge:\n"},
                {"role": "user", "content": "hello"},
            ],
            "temperature": 0.7,
        }

    def test_function_message_keeps_name(self, provider):
        payload = provider.build_payload(
            [Message(role="function", name="getWeather", content="sunny")]
        )

        assert payload["messages"] == [
            {"role": "function", "content": "sunny", "name": "getWeather"}
        ]

    @pytest.mark.asyncio
    async def test_posts_with_bearer_auth(self, provider, upstream, conversation):
        await provider.complete(conversation)

        request = upstream.requests[0]
        assert request.method == "POST"
        assert str(request.url) == ENDPOINT
        assert request.headers["Authorization"] == "Bearer gsk-test"
        assert request.headers["Content-Type"] == "application/json"
        assert upstream.last_payload()["messages"][1] == {"role": "user", "content": "hello"}


# =============================================================================
# 응답 처리 테스트
# =============================================================================


class TestComplete:
    """complete 메서드 테스트."""

    @pytest.mark.asyncio
    async def test_returns_assistant_message(self, provider, upstream, conversation):
        upstream.reply("  Hi there \n")

        reply = await provider.complete(conversation)

        assert reply == Message(role="assistant", content="Hi there")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 401, 429, 500, 503])
    async def test_non_2xx_raises_http_error(self, provider, upstream, conversation, status):
        upstream.respond_with(status_code=status, text_body="upstream failure")

        with pytest.raises(ProviderHttpError) as exc_info:
            await provider.complete(conversation)

        assert exc_info.value.upstream_status == status
        assert exc_info.value.body == "upstream failure"

    @pytest.mark.asyncio
    async def test_error_body_truncated(self, provider, upstream, conversation):
        upstream.respond_with(status_code=500, text_body="x" * (MAX_LOGGED_BODY + 100))

        with pytest.raises(ProviderHttpError) as exc_info:
            await provider.complete(conversation)

        assert len(exc_info.value.body) == MAX_LOGGED_BODY

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": None}}]},
            {"choices": [{"message": {"content": "   "}}]},
            {"choices": [{"message": {"content": 42}}]},
            ["not", "an", "object"],
        ],
    )
    async def test_empty_completion(self, provider, upstream, conversation, body):
        upstream.respond_with(json_body=body)

        with pytest.raises(EmptyCompletionError):
            await provider.complete(conversation)

    @pytest.mark.asyncio
    async def test_non_json_body(self, provider, upstream, conversation):
        upstream.respond_with(status_code=200, text_body="<html>gateway</html>")

        with pytest.raises(EmptyCompletionError):
            await provider.complete(conversation)
