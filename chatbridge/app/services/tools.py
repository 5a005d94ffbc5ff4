"""
Tool Dispatcher: 키워드 트리거 → 로컬 응답 (provider 호출 생략).

- 대소문자 무시 부분 문자열 매칭
- 트리거는 고정 우선순위 순서로 검사, 첫 매칭만 사용 ("time" > "weather")
- time: 주입된 시계 기준 현재 시각/날짜
- weather: 고정 문구 (실제 조회 아님)
"""

from collections.abc import Callable
from dataclasses import dataclass

from chatbridge.core.clock import Clock, SystemClock
from chatbridge.domain.constants import (
    TOOL_CURRENT_TIME,
    TOOL_WEATHER,
    WEATHER_REPLY,
)
from chatbridge.domain.schemas import Message


@dataclass(frozen=True)
class ToolTrigger:
    """키워드 트리거."""
    keyword: str
    name: str
    respond: Callable[[], str]


class ToolDispatcher:
    """
    Tool Dispatcher.

    Usage:
        dispatcher = ToolDispatcher(clock=SystemClock("Asia/Kolkata"))
        reply = dispatcher.dispatch("what time is it")  # Message | None
    """

    def __init__(self, clock: Clock | None = None):
        self.clock = clock if clock is not None else SystemClock()
        self.triggers: tuple[ToolTrigger, ...] = (
            ToolTrigger("time", TOOL_CURRENT_TIME, self.current_time_text),
            ToolTrigger("weather", TOOL_WEATHER, lambda: WEATHER_REPLY),
        )

    def current_time_text(self) -> str:
        now = self.clock.now()
        return (
            f"🕒 The current time is {now:%I:%M:%S %p} "
            f"on {now:%A, %B %d, %Y} ({now:%Z})."
        )

    def match(self, last_utterance: str) -> ToolTrigger | None:
        """첫 번째로 매칭되는 트리거."""
        lowered = (last_utterance or "").lower()
        for trigger in self.triggers:
            if trigger.keyword in lowered:
                return trigger
        return None

    def dispatch(self, last_utterance: str) -> Message | None:
        """
        마지막 발화 검사.

        Returns:
            role=function Message (매칭 시) 또는 None
        """
        trigger = self.match(last_utterance)
        if trigger is None:
            return None

        return Message(role="function", name=trigger.name, content=trigger.respond())
