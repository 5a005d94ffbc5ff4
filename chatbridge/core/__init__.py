"""
Core layer: 요청 범위 유틸리티.

역할:
- turn_id 발급, 턴 로그
- 시계 추상화 (시간 도구용)
- 요청 범위 임시 파일
"""

from .clock import Clock, SystemClock
from .ids import generate_turn_id
from .logging import (
    complete_turn_log,
    configure_logging,
    create_turn_log,
    emit_stage,
)
from .tempfiles import scoped_temp_file

__all__ = [
    # clock
    "Clock",
    "SystemClock",
    # ids
    "generate_turn_id",
    # logging
    "configure_logging",
    "create_turn_log",
    "emit_stage",
    "complete_turn_log",
    # tempfiles
    "scoped_temp_file",
]
