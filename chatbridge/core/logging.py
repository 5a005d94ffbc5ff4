"""
Turn logging: 상태 전이 이벤트를 구조화 로그로 기록.

규칙:
- 턴(요청 1건)마다 turn_id 발급
- 상태 전이마다 StageEvent 추가 + logging 레코드 1건
- 로그 레코드 extra 키: turn_id, stage, turn_context
- 종료 시 요약 레코드 1건 (extra: turn_id, turn_summary = TurnLog.to_dict())
  (LogRecord 예약 속성과 충돌 방지를 위해 컨텍스트는 turn_context 아래로)
- 파일 저장 없음 (프로세스 상태 없음)
"""

import logging
from datetime import UTC, datetime
from typing import Any

from chatbridge.core.ids import generate_turn_id
from chatbridge.domain.schemas import (
    TERMINAL_STAGES,
    StageEvent,
    TurnLog,
    TurnStage,
)

logger = logging.getLogger("chatbridge.turn")

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# 실패 쪽 종료 상태는 warning 레벨
_WARNING_STAGES = frozenset({
    TurnStage.EXTRACTION_FAILED,
    TurnStage.PROVIDER_ERROR,
    TurnStage.CONFIG_ERROR,
    TurnStage.REJECTED,
    TurnStage.FAILED,
})


# =============================================================================
# Setup
# =============================================================================


def configure_logging(config: dict[str, Any]) -> None:
    """
    config의 logging 섹션으로 루트 로거 설정.

    logging:
      level: INFO
      format: "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    """
    log_config = config.get("logging", {}) or {}
    level_name = str(log_config.get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format=log_config.get("format", DEFAULT_LOG_FORMAT),
    )


# =============================================================================
# Turn Log Management
# =============================================================================


def create_turn_log() -> TurnLog:
    """
    새 TurnLog 생성 (RECEIVED 이벤트 포함).

    Returns:
        초기화된 TurnLog
    """
    now = datetime.now(UTC).isoformat()
    turn_log = TurnLog(turn_id=generate_turn_id(), started_at=now)
    emit_stage(turn_log, TurnStage.RECEIVED)
    return turn_log


def emit_stage(turn_log: TurnLog, stage: TurnStage, **context: Any) -> None:
    """
    상태 전이 기록.

    Args:
        turn_log: TurnLog 인스턴스
        stage: 새 상태
        **context: 로그 컨텍스트 (filename, error_code, upstream_status 등)
    """
    now = datetime.now(UTC).isoformat()
    turn_log.events.append(StageEvent(stage=stage, at=now, context=context))

    level = logging.WARNING if stage in _WARNING_STAGES else logging.INFO
    logger.log(
        level,
        f"turn {turn_log.turn_id} -> {stage.value}",
        extra={
            "turn_id": turn_log.turn_id,
            "stage": stage.value,
            "turn_context": context,
        },
    )


def complete_turn_log(
    turn_log: TurnLog,
    stage: TurnStage,
    error_code: str | None = None,
    **context: Any,
) -> None:
    """
    종료 상태 기록 + TurnLog 완료 처리.

    Args:
        turn_log: TurnLog 인스턴스
        stage: 종료 상태 (TERMINAL_STAGES 중 하나)
        error_code: 에러 코드 (실패 시)
        **context: 로그 컨텍스트

    Raises:
        ValueError: 종료 상태가 아닌 stage
    """
    if stage not in TERMINAL_STAGES:
        raise ValueError(f"not a terminal stage: {stage.value}")

    if error_code is not None:
        context["error_code"] = error_code
    emit_stage(turn_log, stage, **context)

    turn_log.finished_at = datetime.now(UTC).isoformat()
    turn_log.error_code = error_code
    turn_log.result = (
        "success"
        if stage in (TurnStage.TOOL_REPLIED, TurnStage.COMPLETED)
        else "failed"
    )
    logger.info(
        f"turn {turn_log.turn_id} finished: {turn_log.result}",
        extra={"turn_id": turn_log.turn_id, "turn_summary": turn_log.to_dict()},
    )
