"""
Clock abstraction.

시간 도구 응답은 비결정적 → 테스트에서는 고정 시계를 주입한다.
"""

from datetime import datetime, tzinfo
from typing import Protocol
from zoneinfo import ZoneInfo

from chatbridge.domain.constants import DEFAULT_TIMEZONE


class Clock(Protocol):
    """현재 시각 제공자."""

    def now(self) -> datetime: ...


class SystemClock:
    """
    고정 타임존의 시스템 시계.

    Usage:
        clock = SystemClock("Asia/Kolkata")
        clock.now()  # tz-aware datetime
    """

    def __init__(self, timezone: str | tzinfo = DEFAULT_TIMEZONE):
        self.tz = ZoneInfo(timezone) if isinstance(timezone, str) else timezone

    def now(self) -> datetime:
        return datetime.now(self.tz)
