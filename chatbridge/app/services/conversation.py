"""
Conversation Assembler: 히스토리 + 첨부 텍스트 + 컨텍스트 → provider용 대화.

최종 순서:
    [system(컨텍스트)] + 히스토리 + [첨부 메시지 (첨부가 있을 때)]

입력 리스트는 변경하지 않는다 (항상 새 리스트 반환).
"""

import json
from typing import Any

from chatbridge.domain.constants import (
    ATTACHMENT_TEXT_PREFIX,
    CONTEXT_PREFIX,
    NO_TEXT_PLACEHOLDER,
)
from chatbridge.domain.errors import (
    InvalidConversationError,
    UnsupportedAttachmentTypeError,
)
from chatbridge.domain.schemas import Attachment, Message

# =============================================================================
# Request Parsing / Validation
# =============================================================================


def parse_conversation(raw: str | None) -> list[Message]:
    """
    messages 폼 필드(JSON 배열) → Message 리스트.

    Raises:
        InvalidConversationError: 필드 누락, JSON 아님, 배열 아님, 메시지 형식 위반
    """
    if raw is None:
        raise InvalidConversationError("messages field is required")

    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidConversationError(f"messages is not valid JSON: {e.msg}") from e

    if not isinstance(data, list):
        raise InvalidConversationError("messages must be a JSON array")

    return [Message.from_dict(item, index=i) for i, item in enumerate(data)]


def validate_attachment(attachment: Attachment) -> None:
    """
    첨부 media type 검증. OCR/provider 호출 전에 실행.

    Raises:
        UnsupportedAttachmentTypeError: image/* 가 아님
    """
    if not attachment.is_image:
        raise UnsupportedAttachmentTypeError(
            f"unsupported attachment type: {attachment.media_type or '(none)'}",
            media_type=attachment.media_type,
            attachment_name=attachment.filename,
        )


# =============================================================================
# Assembly
# =============================================================================


def last_utterance(messages: list[Message]) -> str:
    """마지막 메시지 내용 (대화가 비어 있으면 "")."""
    return messages[-1].content if messages else ""


def attachment_message(attachment_text: str) -> Message:
    """첨부 텍스트 → user 메시지 (텍스트 없으면 고정 안내 문구)."""
    if attachment_text:
        return Message(role="user", content=f"{ATTACHMENT_TEXT_PREFIX}{attachment_text}")
    return Message(role="user", content=NO_TEXT_PLACEHOLDER)


def context_message(context: str) -> Message:
    """검색 컨텍스트 → system 메시지 (빈 컨텍스트도 메시지는 생성)."""
    return Message(role="system", content=f"{CONTEXT_PREFIX}{context}")


def append_attachment(
    history: list[Message],
    attachment_text: str | None,
) -> list[Message]:
    """
    히스토리 뒤에 첨부 메시지 추가.

    Args:
        history: 요청 히스토리
        attachment_text: None이면 첨부 없음, ""이면 텍스트 없는 첨부
    """
    if attachment_text is None:
        return list(history)
    return [*history, attachment_message(attachment_text)]


def assemble(
    history: list[Message],
    attachment_text: str | None,
    context: str,
) -> list[Message]:
    """
    provider에 보낼 최종 대화.

    Args:
        history: 요청 히스토리 (오래된 것부터)
        attachment_text: 첨부 OCR 텍스트 (None이면 첨부 없음)
        context: 검색된 컨텍스트 (빈 문자열 가능)

    Returns:
        [system] + history + [첨부 메시지]
    """
    return [context_message(context), *append_attachment(history, attachment_text)]
