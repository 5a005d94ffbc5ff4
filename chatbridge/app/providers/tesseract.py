"""
Tesseract OCR Provider (서버 내 OCR).

pytesseract + Pillow. 인식은 CPU 작업이므로 worker thread에서 실행한다.

예외 매핑:
- TesseractNotFoundError → OCR_ENGINE_MISSING
- UnidentifiedImageError → OCR_UNREADABLE_IMAGE
- OSError → OCR_IO_ERROR
- 그 외 → OCR_FAILED
"""

import asyncio
import logging
from pathlib import Path

import pytesseract
from PIL import Image, UnidentifiedImageError

from chatbridge.domain.errors import ErrorCodes

from .base import OCRError, OCRProvider, OCRResult

logger = logging.getLogger(__name__)


class TesseractOCRProvider(OCRProvider):
    """
    Tesseract OCR Provider.

    Usage:
        provider = TesseractOCRProvider(lang="eng")
        result = await provider.extract_text(Path("/tmp/x.png"), "image/png")
    """

    engine = "tesseract"

    def __init__(
        self,
        lang: str = "eng",
        tesseract_cmd: str | None = None,
    ):
        """
        Args:
            lang: 인식 언어 (tesseract 언어 코드, 예: "eng", "eng+kor")
            tesseract_cmd: tesseract 실행 파일 경로 (None이면 PATH 탐색)
        """
        self.lang = lang
        self.tesseract_cmd = tesseract_cmd
        # 시작 시 1회 설정 (요청 중에는 읽기 전용)
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    async def extract_text(
        self,
        file_path: Path,
        media_type: str,
    ) -> OCRResult:
        """이미지 파일에서 텍스트 추출."""
        try:
            text = await asyncio.to_thread(self._recognize, file_path)
        except pytesseract.TesseractNotFoundError as e:
            raise OCRError(
                ErrorCodes.OCR_ENGINE_MISSING,
                "tesseract binary not found. Install tesseract-ocr.",
                engine=self.engine,
            ) from e
        except UnidentifiedImageError as e:
            raise OCRError(
                ErrorCodes.OCR_UNREADABLE_IMAGE,
                f"cannot identify image file ({media_type})",
                engine=self.engine,
            ) from e
        except OSError as e:
            raise OCRError(
                ErrorCodes.OCR_IO_ERROR,
                f"failed to read image: {e}",
                engine=self.engine,
            ) from e
        except Exception as e:
            raise OCRError(
                ErrorCodes.OCR_FAILED,
                f"tesseract recognition failed: {e}",
                engine=self.engine,
            ) from e

        logger.debug(f"tesseract extracted {len(text.strip())} chars from {file_path.name}")
        return OCRResult(
            success=True,
            text=text.strip(),
            engine=self.engine,
        )

    def _recognize(self, file_path: Path) -> str:
        """실제 tesseract 호출 (blocking)."""
        with Image.open(file_path) as image:
            text: str = pytesseract.image_to_string(image, lang=self.lang)
        return text
