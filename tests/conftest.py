"""
Pytest fixtures for the chat pipeline tests.

구성:
- 설정 fixture (default.yaml, 테스트용 config)
- 고정 시계 (시간 도구 응답 결정화)
- 업스트림 Groq mock (httpx.MockTransport + 요청 기록)
- OCR 엔진 fake
"""

import json
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

import httpx
import pytest
import yaml

from chatbridge.app.providers.base import OCRError, OCRProvider, OCRResult

# =============================================================================
# Path / Config Fixtures
# =============================================================================

@pytest.fixture
def project_root() -> Path:
    """프로젝트 루트 경로."""
    return Path(__file__).parent.parent


@pytest.fixture
def default_config_path(project_root: Path) -> Path:
    """default.yaml 경로."""
    return project_root / "default.yaml"


@pytest.fixture
def default_config(default_config_path: Path) -> dict:
    """기본 설정 로드."""
    with open(default_config_path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@pytest.fixture
def test_config() -> dict:
    """테스트용 설정."""
    return {
        "ai": {
            "chat": {
                "endpoint": "https://api.groq.test/openai/v1/chat/completions",
                "model": "llama3-8b-8192",
                "temperature": 0.7,
                "api_key_env": "GROQ_API_KEY",
            },
            "ocr": {"provider": "tesseract", "lang": "eng"},
        },
        "tools": {"timezone": "Asia/Kolkata"},
    }


# =============================================================================
# Clock
# =============================================================================

class FixedClock:
    """고정 시각 시계."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def now(self) -> datetime:
        return self.moment


@pytest.fixture
def fixed_clock() -> FixedClock:
    """2026-10-18 15:04:05 IST."""
    return FixedClock(datetime(2026, 10, 18, 15, 4, 5, tzinfo=ZoneInfo("Asia/Kolkata")))


# =============================================================================
# Upstream (Groq) Mock
# =============================================================================

class Upstream:
    """
    Groq chat completions mock.

    - respond_with(): 다음 응답 설정 (status, json 또는 text)
    - requests: 받은 요청 목록 (호출 여부 검증용)
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.json_body: Any = {"choices": [{"message": {"content": "Hi there"}}]}
        self.text_body: str | None = None

    def respond_with(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text_body: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.json_body = json_body
        self.text_body = text_body

    def reply(self, content: str) -> None:
        self.respond_with(json_body={"choices": [{"message": {"content": content}}]})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text_body is not None:
            return httpx.Response(self.status_code, text=self.text_body)
        return httpx.Response(self.status_code, json=self.json_body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def called(self) -> bool:
        return bool(self.requests)

    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def upstream() -> Upstream:
    """기본 응답: 200 {"choices": [{"message": {"content": "Hi there"}}]}."""
    return Upstream()


# =============================================================================
# OCR Fakes
# =============================================================================

class FakeOCRProvider(OCRProvider):
    """
    OCR 엔진 fake.

    - text: 반환할 텍스트
    - error: 설정 시 OCRError 발생
    - seen_paths: 호출 시점의 임시 파일 경로 (삭제 검증용)
    """

    engine = "fake"

    def __init__(self, text: str = "", error: OCRError | None = None):
        self.text = text
        self.error = error
        self.seen_paths: list[Path] = []
        self.seen_bytes: list[bytes] = []

    async def extract_text(self, file_path: Path, media_type: str) -> OCRResult:
        self.seen_paths.append(file_path)
        self.seen_bytes.append(file_path.read_bytes())
        if self.error is not None:
            raise self.error
        return OCRResult(success=True, text=self.text, engine=self.engine)


@pytest.fixture
def make_ocr_provider() -> Callable[..., FakeOCRProvider]:
    """FakeOCRProvider factory."""
    return FakeOCRProvider
