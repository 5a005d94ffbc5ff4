"""
Groq Chat Provider (OpenAI 호환 chat completions).

업스트림 계약:
- POST {endpoint}
- Authorization: Bearer <API 키>
- body: {"model": ..., "messages": [...], "temperature": 0.7}
- 응답: choices[0].message.content

규칙:
- API 키 없으면 생성 시점에 실패 (네트워크 호출 없음)
- non-2xx → ProviderHttpError (상위에서 soft reply로 변환)
- completion 비어 있음 / JSON 아님 → EmptyCompletionError
- 재시도 없음
"""

import logging
import os
from typing import Any

import httpx

from chatbridge.domain.constants import (
    DEFAULT_API_KEY_ENV,
    DEFAULT_CHAT_ENDPOINT,
    DEFAULT_CHAT_MODEL,
    DEFAULT_TEMPERATURE,
)
from chatbridge.domain.errors import (
    EmptyCompletionError,
    MissingCredentialError,
    ProviderHttpError,
)
from chatbridge.domain.schemas import Message

from .base import LLMProvider

logger = logging.getLogger(__name__)

# 로그에 남길 업스트림 본문 최대 길이
MAX_LOGGED_BODY = 2000


class GroqChatProvider(LLMProvider):
    """
    Groq API Provider.

    Usage:
        provider = GroqChatProvider.from_config(config)
        reply = await provider.complete(conversation)
    """

    def __init__(
        self,
        model: str = DEFAULT_CHAT_MODEL,
        api_key: str | None = None,
        endpoint: str = DEFAULT_CHAT_ENDPOINT,
        temperature: float = DEFAULT_TEMPERATURE,
        timeout: float | None = None,
        api_key_env: str = DEFAULT_API_KEY_ENV,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Args:
            model: 모델 ID
            api_key: API 키 (None이면 환경변수 api_key_env)
            endpoint: chat completions URL
            temperature: 샘플링 온도
            timeout: 요청 타임아웃 초 (None이면 무제한)
            api_key_env: API 키 환경변수 이름
            transport: httpx transport (테스트에서 MockTransport 주입)

        Raises:
            MissingCredentialError: API 키가 없을 때 (fail-fast)
        """
        self.model = model
        self.api_key = api_key or os.environ.get(api_key_env)

        if not self.api_key:
            raise MissingCredentialError(
                f"{api_key_env} environment variable is not set",
                api_key_env=api_key_env,
            )

        self.endpoint = endpoint
        self.temperature = temperature
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "GroqChatProvider":
        """config의 ai.chat 섹션으로 생성."""
        chat_config = config.get("ai", {}).get("chat", {}) or {}
        return cls(
            model=chat_config.get("model", DEFAULT_CHAT_MODEL),
            endpoint=chat_config.get("endpoint", DEFAULT_CHAT_ENDPOINT),
            temperature=chat_config.get("temperature", DEFAULT_TEMPERATURE),
            timeout=chat_config.get("timeout"),
            api_key_env=chat_config.get("api_key_env", DEFAULT_API_KEY_ENV),
            transport=transport,
        )

    def build_payload(self, conversation: list[Message]) -> dict[str, Any]:
        """업스트림 요청 본문."""
        return {
            "model": self.model,
            "messages": [message.to_dict() for message in conversation],
            "temperature": self.temperature,
        }

    async def complete(self, conversation: list[Message]) -> Message:
        """대화 완성."""
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                self.endpoint,
                json=self.build_payload(conversation),
                headers=headers,
            )

        if not response.is_success:
            body = response.text[:MAX_LOGGED_BODY]
            logger.error(f"Groq API error: HTTP {response.status_code}: {body}")
            raise ProviderHttpError(response.status_code, body, model=self.model)

        reply_text = self._parse_completion(response)
        return Message(role="assistant", content=reply_text.strip())

    def _parse_completion(self, response: httpx.Response) -> str:
        """
        choices[0].message.content 추출.

        Raises:
            EmptyCompletionError: JSON 아님, 경로 없음, 빈 문자열
        """
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Groq returned non-JSON body: {response.text[:MAX_LOGGED_BODY]}")
            raise EmptyCompletionError("completion body is not JSON", model=self.model) from e

        content: Any = None
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            content = None

        if not isinstance(content, str) or not content.strip():
            logger.error(f"No reply content: {str(data)[:MAX_LOGGED_BODY]}")
            raise EmptyCompletionError("completion content is empty", model=self.model)

        return content
