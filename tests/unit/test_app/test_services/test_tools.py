"""
test_tools.py - Tool Dispatcher 테스트

- 대소문자 무시 부분 문자열 매칭
- "time" 우선 (둘 다 포함 시)
- function 메시지 (name = 도구 이름)
"""

import pytest

from chatbridge.app.services.tools import ToolDispatcher
from chatbridge.domain.constants import WEATHER_REPLY


@pytest.fixture
def dispatcher(fixed_clock) -> ToolDispatcher:
    return ToolDispatcher(clock=fixed_clock)


class TestMatch:
    """키워드 매칭."""

    @pytest.mark.parametrize(
        "text",
        ["what time is it", "TIME please", "Sometimes I wonder", "timezone?"],
    )
    def test_time_keyword(self, dispatcher, text):
        """부분 문자열 매칭 (단어 경계 없음)."""
        assert dispatcher.match(text).name == "getCurrentTime"

    @pytest.mark.parametrize("text", ["weather today?", "How's the WEATHER"])
    def test_weather_keyword(self, dispatcher, text):
        assert dispatcher.match(text).name == "getWeather"

    def test_time_wins_over_weather(self, dispatcher):
        assert dispatcher.match("weather at this time").name == "getCurrentTime"

    @pytest.mark.parametrize("text", ["hello", "", "tim e"])
    def test_no_match(self, dispatcher, text):
        assert dispatcher.match(text) is None


class TestDispatch:
    """dispatch → function 메시지."""

    def test_time_reply(self, dispatcher):
        reply = dispatcher.dispatch("what time is it")

        assert reply.role == "function"
        assert reply.name == "getCurrentTime"
        assert reply.content == (
            "🕒 The current time is 03:04:05 PM on Sunday, October 18, 2026 (IST)."
        )

    def test_weather_reply(self, dispatcher):
        reply = dispatcher.dispatch("Weather?")

        assert reply.role == "function"
        assert reply.name == "getWeather"
        assert reply.content == WEATHER_REPLY

    def test_none_when_no_keyword(self, dispatcher):
        assert dispatcher.dispatch("tell me a joke") is None

    def test_default_clock(self):
        """시계 미지정 시 시스템 시계."""
        reply = ToolDispatcher().dispatch("time")

        assert reply.content.startswith("🕒 The current time is ")
