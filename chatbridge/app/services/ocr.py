"""
OCR Service: 이미지 첨부 → 텍스트 추출.

- 첨부 바이트를 요청 범위 임시 파일에 쓰고 엔진 호출
- 실패는 절대 전파하지 않음 → 빈 텍스트
- 단, 원인은 로그로 구분:
  - 인식 성공 + 텍스트 없음 → info "no text detected"
  - 엔진/IO 실패 → warning + error_code
"""

import logging
from typing import Any

from chatbridge.app.providers.base import OCRError, OCRProvider, OCRResult
from chatbridge.core.tempfiles import scoped_temp_file
from chatbridge.domain.errors import ErrorCodes
from chatbridge.domain.schemas import Attachment

logger = logging.getLogger(__name__)


def build_ocr_provider(config: dict[str, Any]) -> OCRProvider:
    """
    config의 ai.ocr 섹션으로 OCR 엔진 생성.

    ai:
      ocr:
        provider: tesseract   # tesseract | gemini
        lang: eng
        model: gemini-2.5-flash
        fallback: gemini-2.0-flash
    """
    ocr_config = config.get("ai", {}).get("ocr", {}) or {}
    engine = ocr_config.get("provider", "tesseract")

    if engine == "gemini":
        from chatbridge.app.providers.gemini import GeminiOCRProvider

        return GeminiOCRProvider(
            model=ocr_config.get("model", "gemini-2.5-flash"),
            fallback=ocr_config.get("fallback", "gemini-2.0-flash"),
        )

    if engine != "tesseract":
        raise ValueError(f"unknown OCR provider: {engine!r}")

    from chatbridge.app.providers.tesseract import TesseractOCRProvider

    return TesseractOCRProvider(
        lang=ocr_config.get("lang", "eng"),
        tesseract_cmd=ocr_config.get("tesseract_cmd"),
    )


class OCRService:
    """
    OCR 서비스.

    이미지 첨부에서 텍스트 추출 (실패 시 빈 텍스트).
    """

    def __init__(
        self,
        config: dict,
        provider: OCRProvider | None = None,
    ):
        """
        Args:
            config: 설정 (ai.ocr 포함)
            provider: OCR Provider (None이면 config 기반 생성)
        """
        self.config = config
        self.provider = provider if provider is not None else build_ocr_provider(config)

    async def extract_result(self, attachment: Attachment) -> OCRResult:
        """
        첨부에서 텍스트 추출 (예외 없음).

        Returns:
            OCRResult - 실패 시 success=False + error_code
        """
        engine = getattr(self.provider, "engine", None)
        try:
            with scoped_temp_file(attachment.data, suffix=attachment.suffix) as path:
                result = await self.provider.extract_text(path, attachment.media_type)
        except OCRError as e:
            logger.warning(
                f"OCR failed [{e.code}] for {attachment.filename!r} "
                f"({attachment.media_type}): {e.message}",
                exc_info=True,
                extra={"error_code": e.code, "engine": engine},
            )
            return OCRResult(
                success=False,
                engine=engine,
                error_code=e.code,
                error_message=e.message,
            )
        except OSError as e:
            # 임시 파일 생성/쓰기 실패
            logger.warning(
                f"OCR temp file error for {attachment.filename!r}: {e}",
                exc_info=True,
                extra={"error_code": ErrorCodes.OCR_IO_ERROR, "engine": engine},
            )
            return OCRResult(
                success=False,
                engine=engine,
                error_code=ErrorCodes.OCR_IO_ERROR,
                error_message=str(e),
            )

        result.text = (result.text or "").strip()
        if not result.text:
            logger.info(f"OCR completed but no text detected in {attachment.filename!r}")
        return result

    async def extract(self, attachment: Attachment) -> str:
        """
        첨부에서 텍스트 추출.

        Returns:
            앞뒤 공백 제거된 텍스트 (실패/텍스트 없음 → "")
        """
        result = await self.extract_result(attachment)
        return (result.text or "") if result.success else ""
