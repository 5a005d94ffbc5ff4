"""
AI Provider 추상 인터페이스.

- OCRProvider: 이미지 → 텍스트 (엔진 교체 가능: tesseract, gemini)
- LLMProvider: 대화 → assistant 메시지

OCR 실패는 OCRError로만 표현한다 (상위에서 빈 텍스트로 흡수).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from chatbridge.domain.schemas import Message

# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class OCRResult:
    """
    OCR 결과.

    - engine: 사용된 엔진 (tesseract, gemini)
    - model_used / fallback_triggered: 모델 기반 엔진에서만 (EXTRACTED 로그 컨텍스트로 기록)
    """
    success: bool
    text: str | None = None

    engine: str | None = None
    model_used: str | None = None
    fallback_triggered: bool = False

    error_message: str | None = None
    error_code: str | None = None


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


class OCRError(ProviderError):
    """OCR 관련 에러. 파이프라인을 중단시키지 않음."""
    pass


# =============================================================================
# Abstract Providers
# =============================================================================

class LLMProvider(ABC):
    """
    LLM Provider 추상 인터페이스.

    역할: 조립된 대화 전체 → assistant 메시지 1개
    """

    model: str

    @abstractmethod
    async def complete(self, conversation: list[Message]) -> Message:
        """
        대화 완성.

        Args:
            conversation: system 컨텍스트 + 히스토리 + 첨부 메시지 (순서 유지)

        Returns:
            role=assistant Message

        Raises:
            ProviderHttpError: non-2xx 응답
            EmptyCompletionError: completion 텍스트 없음
        """
        ...


class OCRProvider(ABC):
    """
    OCR Provider 추상 인터페이스.

    역할: 이미지 파일 → 텍스트 추출
    """

    engine: str

    @abstractmethod
    async def extract_text(
        self,
        file_path: Path,
        media_type: str,
    ) -> OCRResult:
        """
        파일에서 텍스트 추출.

        Args:
            file_path: 요청 범위 임시 파일 경로
            media_type: 선언된 MIME 타입 (image/*)

        Returns:
            OCRResult (success=True)

        Raises:
            OCRError: 엔진 미설치, 이미지 해석 실패, 인식 실패 등 모든 내부 실패
        """
        ...
