"""
Data schemas for the chat pipeline.

규칙:
- 모든 엔티티는 요청 단위로 생성/폐기 (서버 세션 상태 없음)
- Conversation = list[Message], 오래된 것부터 (순서 의미 있음)
- ReplyEnvelope: reply / error 중 정확히 하나
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from chatbridge.domain.constants import MESSAGE_ROLES
from chatbridge.domain.errors import InvalidConversationError

# =============================================================================
# Message
# =============================================================================

@dataclass(frozen=True)
class Message:
    """
    대화 메시지.

    name은 function role 메시지에서만 직렬화된다.
    """
    role: str
    content: str
    name: str | None = None

    @classmethod
    def from_dict(cls, data: Any, index: int | None = None) -> "Message":
        """
        클라이언트 payload → Message.

        Raises:
            InvalidConversationError: dict 아님, role 미지원, content 비문자열
        """
        if not isinstance(data, dict):
            raise InvalidConversationError("message must be an object", index=index)

        role = data.get("role")
        if role not in MESSAGE_ROLES:
            raise InvalidConversationError(
                f"unsupported role: {role!r}", index=index
            )

        content = data.get("content", "")
        if content is None:
            content = ""
        if not isinstance(content, str):
            raise InvalidConversationError("content must be a string", index=index)

        name = data.get("name") if role == "function" else None
        if name is not None and not isinstance(name, str):
            raise InvalidConversationError("name must be a string", index=index)

        return cls(role=role, content=content, name=name)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.role == "function" and self.name is not None:
            result["name"] = self.name
        return result


# =============================================================================
# Attachment
# =============================================================================

@dataclass(frozen=True)
class Attachment:
    """업로드 파일. OCR 호출 동안만 유효."""
    data: bytes
    media_type: str
    filename: str

    @property
    def is_image(self) -> bool:
        return self.media_type.strip().lower().startswith("image/")

    @property
    def suffix(self) -> str:
        """임시 파일용 확장자 (영숫자만, 최대 8자)."""
        suffix = Path(self.filename).suffix.lower()
        if 1 < len(suffix) <= 9 and suffix[1:].isalnum():
            return suffix
        return ""


# =============================================================================
# Reply Envelope
# =============================================================================

@dataclass(frozen=True)
class ReplyEnvelope:
    """
    클라이언트 응답 본문.

    {"reply": Message} 또는 {"error": str} - 둘 중 정확히 하나.
    """
    reply: Message | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if (self.reply is None) == (self.error is None):
            raise ValueError("ReplyEnvelope requires exactly one of reply or error")

    @classmethod
    def of_reply(cls, reply: Message) -> "ReplyEnvelope":
        return cls(reply=reply)

    @classmethod
    def of_error(cls, error: str) -> "ReplyEnvelope":
        return cls(error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.reply is not None:
            return {"reply": self.reply.to_dict()}
        return {"error": self.error}


# =============================================================================
# Turn Log Schemas
# =============================================================================

class TurnStage(str, Enum):
    """
    요청 1건(턴)의 상태.

    Received → (ToolReplied)
             → (Extracting → Extracted | ExtractionFailed)
             → ContextRetrieved → ProviderCalled
             → Completed | ProviderError | ConfigError
    검증 실패는 Rejected, 예상 못한 예외는 Failed.
    """
    RECEIVED = "received"
    TOOL_REPLIED = "tool_replied"
    EXTRACTING = "extracting"
    EXTRACTED = "extracted"
    EXTRACTION_FAILED = "extraction_failed"
    CONTEXT_RETRIEVED = "context_retrieved"
    PROVIDER_CALLED = "provider_called"
    COMPLETED = "completed"
    PROVIDER_ERROR = "provider_error"
    CONFIG_ERROR = "config_error"
    REJECTED = "rejected"
    FAILED = "failed"


TERMINAL_STAGES = frozenset({
    TurnStage.TOOL_REPLIED,
    TurnStage.COMPLETED,
    TurnStage.PROVIDER_ERROR,
    TurnStage.CONFIG_ERROR,
    TurnStage.REJECTED,
    TurnStage.FAILED,
})


@dataclass
class StageEvent:
    """상태 전이 이벤트."""
    stage: TurnStage
    at: str
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"stage": self.stage.value, "at": self.at, **self.context}


@dataclass
class TurnLog:
    """
    턴 로그.

    파일로 저장하지 않고 logging 레코드로만 남긴다.
    """
    turn_id: str
    started_at: str
    events: list[StageEvent] = field(default_factory=list)
    finished_at: str | None = None
    result: str = "pending"  # pending | success | failed
    error_code: str | None = None

    @property
    def stages(self) -> list[TurnStage]:
        return [event.stage for event in self.events]

    @property
    def final_stage(self) -> TurnStage | None:
        return self.events[-1].stage if self.events else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "turn_id": self.turn_id,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "result": self.result,
            "error_code": self.error_code,
            "events": [event.to_dict() for event in self.events],
        }


@dataclass
class ChatTurnResult:
    """파이프라인 결과: 응답 본문 + HTTP status + 턴 로그."""
    envelope: ReplyEnvelope
    status_code: int
    turn_log: TurnLog
