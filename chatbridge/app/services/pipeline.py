"""
Chat Pipeline: 요청 1건(턴) 처리.

상태 흐름:
    Received
      → 요청 검증 (messages 파싱, 첨부 media type) ── 실패 → Rejected (400)
      → 첨부 있음? → Extracting → Extracted | ExtractionFailed (계속 진행)
      → Tool 매칭 (마지막 발화 = 첨부 메시지 또는 히스토리 마지막) ── 매칭 → ToolReplied (200, provider 호출 없음)
      → ContextRetrieved
      → ProviderCalled
      → Completed (200) | ProviderError (200, soft reply) | ConfigError (500)
    예상 못한 예외 → Failed (500)

handle()은 예외를 던지지 않는다. 항상 ChatTurnResult 반환.
"""

import logging
from typing import Any

from chatbridge.app.providers.base import LLMProvider
from chatbridge.app.providers.groq import GroqChatProvider
from chatbridge.app.services.conversation import (
    append_attachment,
    assemble,
    last_utterance,
    parse_conversation,
    validate_attachment,
)
from chatbridge.app.services.ocr import OCRService
from chatbridge.app.services.retrieval import ContextRetriever
from chatbridge.app.services.tools import ToolDispatcher
from chatbridge.core.clock import SystemClock
from chatbridge.core.logging import complete_turn_log, create_turn_log, emit_stage
from chatbridge.domain.constants import (
    DEFAULT_TIMEZONE,
    INTERNAL_ERROR_MESSAGE,
    PROVIDER_ERROR_REPLY,
)
from chatbridge.domain.errors import (
    ChatError,
    ErrorCodes,
    InvalidConversationError,
    MissingCredentialError,
    ProviderHttpError,
    UnsupportedAttachmentTypeError,
)
from chatbridge.domain.schemas import (
    Attachment,
    ChatTurnResult,
    Message,
    ReplyEnvelope,
    TurnLog,
    TurnStage,
)

logger = logging.getLogger(__name__)


class ChatPipeline:
    """
    채팅 파이프라인.

    구성 요소는 시작 시 1회 생성되고 요청 간에는 읽기 전용.
    LLM provider는 주입되지 않으면 요청마다 config + 환경변수로 생성한다
    (API 키 누락을 네트워크 호출 전에 감지).

    Usage:
        pipeline = ChatPipeline(config)
        result = await pipeline.handle(messages_json, attachment)
        result.envelope.to_dict(), result.status_code
    """

    def __init__(
        self,
        config: dict[str, Any],
        provider: LLMProvider | None = None,
        ocr_service: OCRService | None = None,
        dispatcher: ToolDispatcher | None = None,
        retriever: ContextRetriever | None = None,
    ):
        """
        Args:
            config: 설정 (ai.chat, ai.ocr, tools)
            provider: LLM Provider (None이면 요청마다 GroqChatProvider.from_config)
            ocr_service: OCR 서비스 (None이면 config 기반 생성)
            dispatcher: Tool Dispatcher (None이면 tools.timezone 시계로 생성)
            retriever: Context Retriever (None이면 기본 문서 목록)
        """
        self.config = config
        self._provider = provider
        self.ocr_service = ocr_service if ocr_service is not None else OCRService(config)

        if dispatcher is None:
            tools_config = config.get("tools", {}) or {}
            clock = SystemClock(tools_config.get("timezone", DEFAULT_TIMEZONE))
            dispatcher = ToolDispatcher(clock=clock)
        self.dispatcher = dispatcher
        self.retriever = retriever if retriever is not None else ContextRetriever()

    def get_provider(self) -> LLMProvider:
        """
        LLM Provider.

        Raises:
            MissingCredentialError: API 키 없음
        """
        if self._provider is not None:
            return self._provider
        return GroqChatProvider.from_config(self.config)

    # =========================================================================
    # Entry Point
    # =========================================================================

    async def handle(
        self,
        messages_raw: str | None,
        attachment: Attachment | None = None,
    ) -> ChatTurnResult:
        """
        턴 처리 (외곽 경계 - 모든 예외를 응답으로 정규화).

        Args:
            messages_raw: messages 폼 필드 원문 (JSON 배열)
            attachment: 첨부 파일 (없으면 None)

        Returns:
            ChatTurnResult (envelope + status_code + turn_log)
        """
        turn_log = create_turn_log()

        try:
            return await self._run(turn_log, messages_raw, attachment)

        except (InvalidConversationError, UnsupportedAttachmentTypeError) as e:
            complete_turn_log(turn_log, TurnStage.REJECTED, error_code=e.code, **e.context)
            return self._error(turn_log, e.client_message, e.status_code)

        except MissingCredentialError as e:
            logger.error(
                f"Provider credential missing: {e.message}",
                extra={"chat_error": e.to_dict()},
            )
            complete_turn_log(turn_log, TurnStage.CONFIG_ERROR, error_code=e.code, **e.context)
            return self._error(turn_log, e.client_message, e.status_code)

        except ChatError as e:
            logger.error(f"Chat turn failed: {e}", extra={"chat_error": e.to_dict()})
            complete_turn_log(turn_log, TurnStage.FAILED, error_code=e.code, **e.context)
            return self._error(turn_log, e.client_message, e.status_code)

        except Exception as e:
            logger.error(f"Server Error: {e}", exc_info=True)
            complete_turn_log(turn_log, TurnStage.FAILED, error_code=ErrorCodes.UNHANDLED)
            return self._error(turn_log, INTERNAL_ERROR_MESSAGE, 500)

    # =========================================================================
    # Stages
    # =========================================================================

    async def _run(
        self,
        turn_log: TurnLog,
        messages_raw: str | None,
        attachment: Attachment | None,
    ) -> ChatTurnResult:
        history = parse_conversation(messages_raw)
        if attachment is not None:
            validate_attachment(attachment)

        # 첨부 OCR (실패해도 계속)
        attachment_text: str | None = None
        if attachment is not None:
            attachment_text = await self._extract(turn_log, attachment)

        # 마지막 발화: 첨부가 있으면 첨부 메시지
        utterance = last_utterance(append_attachment(history, attachment_text))

        # Tool 매칭 → provider 호출 없이 종료
        tool_reply = self.dispatcher.dispatch(utterance)
        if tool_reply is not None:
            complete_turn_log(turn_log, TurnStage.TOOL_REPLIED, tool=tool_reply.name)
            return self._reply(turn_log, tool_reply)

        context = self.retriever.retrieve(utterance)
        emit_stage(
            turn_log,
            TurnStage.CONTEXT_RETRIEVED,
            matched_documents=len(context.splitlines()),
        )

        conversation = assemble(history, attachment_text, context)

        provider = self.get_provider()
        emit_stage(
            turn_log,
            TurnStage.PROVIDER_CALLED,
            model=getattr(provider, "model", None),
            message_count=len(conversation),
        )

        try:
            reply = await provider.complete(conversation)
        except ProviderHttpError as e:
            complete_turn_log(
                turn_log,
                TurnStage.PROVIDER_ERROR,
                error_code=e.code,
                upstream_status=e.upstream_status,
            )
            return self._reply(
                turn_log, Message(role="assistant", content=PROVIDER_ERROR_REPLY)
            )

        complete_turn_log(turn_log, TurnStage.COMPLETED)
        return self._reply(turn_log, reply)

    async def _extract(self, turn_log: TurnLog, attachment: Attachment) -> str:
        """첨부 OCR. 실패 시 ""."""
        emit_stage(
            turn_log,
            TurnStage.EXTRACTING,
            attachment_name=attachment.filename,
            media_type=attachment.media_type,
            size=len(attachment.data),
        )

        result = await self.ocr_service.extract_result(attachment)
        if not result.success:
            emit_stage(
                turn_log,
                TurnStage.EXTRACTION_FAILED,
                error_code=result.error_code,
                engine=result.engine,
            )
            return ""

        text = result.text or ""
        emit_stage(
            turn_log,
            TurnStage.EXTRACTED,
            engine=result.engine,
            chars=len(text),
            model_used=result.model_used,
            fallback_triggered=result.fallback_triggered,
        )
        return text

    # =========================================================================
    # Result Builders
    # =========================================================================

    @staticmethod
    def _reply(turn_log: TurnLog, reply: Message) -> ChatTurnResult:
        return ChatTurnResult(
            envelope=ReplyEnvelope.of_reply(reply),
            status_code=200,
            turn_log=turn_log,
        )

    @staticmethod
    def _error(turn_log: TurnLog, error: str, status_code: int) -> ChatTurnResult:
        return ChatTurnResult(
            envelope=ReplyEnvelope.of_error(error),
            status_code=status_code,
            turn_log=turn_log,
        )
