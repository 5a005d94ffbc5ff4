"""
Google Gemini OCR Provider (대체 엔진, ai.ocr.provider: gemini).

Fallback 예외 정책:
- FALLBACK_ERRORS: NotFound, ServiceUnavailable, ResourceExhausted → fallback 모델로 1회
- REJECT_IMMEDIATELY: InvalidArgument, PermissionDenied, Unauthenticated → 즉시 OCRError

어떤 경우든 OCRError로 끝나며, 상위(OCRService)에서 빈 텍스트로 흡수된다.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import Any

from google.api_core.exceptions import (
    InvalidArgument,
    NotFound,
    PermissionDenied,
    ResourceExhausted,
    ServiceUnavailable,
    Unauthenticated,
)

from chatbridge.domain.errors import ErrorCodes

from .base import OCRError, OCRProvider, OCRResult

logger = logging.getLogger(__name__)

# Fallback 타는 예외
FALLBACK_ERRORS: tuple[type[Exception], ...] = (
    NotFound,            # 모델명 오류/미지원
    ServiceUnavailable,  # 5xx
    ResourceExhausted,   # 429 쿼터/레이트리밋
)

# 즉시 reject하는 예외
REJECT_IMMEDIATELY: tuple[type[Exception], ...] = (
    InvalidArgument,   # 입력 오류
    PermissionDenied,  # 권한 오류
    Unauthenticated,   # API 키 오류
)

OCR_PROMPT = (
    "Extract all text from this image. "
    "Return only the extracted text without any explanation."
)


class GeminiOCRProvider(OCRProvider):
    """
    Gemini OCR Provider.

    Usage:
        provider = GeminiOCRProvider(
            model="gemini-2.5-flash",
            fallback="gemini-2.0-flash",
        )
        result = await provider.extract_text(path, "image/jpeg")
    """

    engine = "gemini"

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        fallback: str | None = "gemini-2.0-flash",
        api_key: str | None = None,
    ):
        """
        Args:
            model: 기본 모델 ID (config에서 주입)
            fallback: Fallback 모델 (None이면 재시도 없이 실패)
            api_key: API 키 (None이면 환경변수 GOOGLE_API_KEY)
        """
        self.model = model
        self.fallback = fallback
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        self._client: Any = None

    def _get_client(self) -> Any:
        """Gemini 클라이언트 (lazy init)."""
        if self._client is None:
            if not self.api_key:
                raise OCRError(
                    ErrorCodes.OCR_ENGINE_MISSING,
                    "GOOGLE_API_KEY is not set",
                    engine=self.engine,
                )
            import google.generativeai as genai

            genai.configure(api_key=self.api_key)
            self._client = genai
        return self._client

    async def extract_text(
        self,
        file_path: Path,
        media_type: str,
    ) -> OCRResult:
        """이미지에서 텍스트 추출 (fallback 정책 적용)."""
        try:
            file_bytes = file_path.read_bytes()
        except OSError as e:
            raise OCRError(
                ErrorCodes.OCR_IO_ERROR,
                f"failed to read image: {e}",
                engine=self.engine,
            ) from e

        # 1차 시도: 기본 모델
        try:
            result = await self._call_api(self.model, file_bytes, media_type)
            result.model_used = self.model
            return result

        except FALLBACK_ERRORS as e:
            logger.warning(
                f"Primary model ({self.model}) failed with fallback error: {e}. "
                f"Attempting fallback..."
            )
            if self.fallback is None:
                raise OCRError(
                    ErrorCodes.OCR_FAILED,
                    f"{self.model} unavailable and no fallback configured: {e}",
                    engine=self.engine,
                    model=self.model,
                ) from e

            try:
                result = await self._call_api(self.fallback, file_bytes, media_type)
            except Exception as fallback_error:
                logger.error(f"Fallback model also failed: {fallback_error}")
                raise OCRError(
                    ErrorCodes.OCR_FAILED,
                    f"primary and fallback models failed: {fallback_error}",
                    engine=self.engine,
                    primary_model=self.model,
                    fallback_model=self.fallback,
                ) from fallback_error

            result.model_used = self.fallback
            result.fallback_triggered = True
            logger.info(f"Fallback model {self.fallback} succeeded")
            return result

        except REJECT_IMMEDIATELY as e:
            raise OCRError(
                ErrorCodes.OCR_FAILED,
                f"Gemini rejected the request: {e}",
                engine=self.engine,
                model=self.model,
            ) from e

        except OCRError:
            raise

        except Exception as e:
            raise OCRError(
                ErrorCodes.OCR_FAILED,
                f"Gemini OCR failed: {e}",
                engine=self.engine,
                model=self.model,
            ) from e

    async def _call_api(
        self,
        model: str,
        file_bytes: bytes,
        media_type: str,
    ) -> OCRResult:
        """실제 Gemini API 호출 (SDK가 동기 → worker thread)."""
        genai = self._get_client()
        model_instance = genai.GenerativeModel(model)
        image_part = {
            "mime_type": media_type.lower(),
            "data": file_bytes,
        }

        response = await asyncio.to_thread(
            model_instance.generate_content, [OCR_PROMPT, image_part]
        )
        text = response.text if response.text else ""

        return OCRResult(
            success=True,
            text=text.strip(),
            engine=self.engine,
        )
