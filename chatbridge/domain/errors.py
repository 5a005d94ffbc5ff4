"""
Error definitions for the chat pipeline.

규칙:
- 로컬 복구는 OCRError만 (providers.base) → 빈 텍스트로 대체
- 그 외 에러는 요청 종료 → ReplyEnvelope(error=...)로 정규화
- 재시도 없음
- 클라이언트에는 HTTP status + 짧은 문자열만 노출
"""

from typing import Any

from chatbridge.domain.constants import (
    INTERNAL_ERROR_MESSAGE,
    INVALID_CONVERSATION_MESSAGE,
    MISSING_CREDENTIAL_MESSAGE,
    UNSUPPORTED_ATTACHMENT_MESSAGE,
)


class ChatError(Exception):
    """
    파이프라인 중단 에러의 기반 클래스.

    Attributes:
        code: 에러 코드 (ErrorCodes 값)
        message: 로그용 상세 메시지
        context: 로그 컨텍스트 (filename, status_code 등)

    Usage:
        raise UnsupportedAttachmentTypeError(
            "image 타입이 아닌 첨부", media_type="application/pdf"
        )
    """

    code: str = "CHAT_ERROR"
    status_code: int = 500
    client_message: str = INTERNAL_ERROR_MESSAGE

    def __init__(self, message: str = "", **context: Any) -> None:
        self.message = message or self.client_message
        self.context = context
        super().__init__(f"[{self.code}] {self.message}")

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            "message": self.message,
            **self.context,
        }


class InvalidConversationError(ChatError):
    """messages 필드가 JSON 배열이 아니거나 Message 형식 위반."""

    code = "INVALID_CONVERSATION"
    status_code = 400
    client_message = INVALID_CONVERSATION_MESSAGE


class UnsupportedAttachmentTypeError(ChatError):
    """첨부 파일의 media type이 image/* 가 아님. OCR/Provider 호출 전에 거절."""

    code = "UNSUPPORTED_ATTACHMENT_TYPE"
    status_code = 400
    client_message = UNSUPPORTED_ATTACHMENT_MESSAGE


class MissingCredentialError(ChatError):
    """Provider API 키 누락. 네트워크 호출 없이 즉시 실패."""

    code = "MISSING_CREDENTIAL"
    status_code = 500
    client_message = MISSING_CREDENTIAL_MESSAGE


class ProviderHttpError(ChatError):
    """
    Provider가 non-2xx 응답.

    파이프라인에서 soft reply(200 + assistant 안내 메시지)로 변환된다.
    """

    code = "PROVIDER_HTTP_ERROR"
    status_code = 200

    def __init__(self, status_code: int, body: str = "", **context: Any) -> None:
        self.upstream_status = status_code
        self.body = body
        super().__init__(
            f"upstream returned HTTP {status_code}",
            upstream_status=status_code,
            **context,
        )


class EmptyCompletionError(ChatError):
    """Provider 응답에 completion 텍스트가 없음 (2xx지만 비어 있음)."""

    code = "EMPTY_COMPLETION"
    status_code = 500


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Request ===
    INVALID_CONVERSATION = InvalidConversationError.code
    UNSUPPORTED_ATTACHMENT_TYPE = UnsupportedAttachmentTypeError.code

    # === Provider ===
    MISSING_CREDENTIAL = MissingCredentialError.code
    PROVIDER_HTTP_ERROR = ProviderHttpError.code
    EMPTY_COMPLETION = EmptyCompletionError.code

    # === OCR (non-fatal) ===
    OCR_FAILED = "OCR_FAILED"
    OCR_ENGINE_MISSING = "OCR_ENGINE_MISSING"
    OCR_UNREADABLE_IMAGE = "OCR_UNREADABLE_IMAGE"
    OCR_IO_ERROR = "OCR_IO_ERROR"

    # === Boundary ===
    UNHANDLED = "UNHANDLED"
