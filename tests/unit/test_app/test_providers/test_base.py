"""
test_base.py - Provider 기본 클래스 테스트

검증:
- OCRResult: 기본값
- ProviderError / OCRError 컨텍스트
- 추상 클래스 직접 생성 불가
"""

import pytest

from chatbridge.app.providers.base import (
    LLMProvider,
    OCRError,
    OCRProvider,
    OCRResult,
    ProviderError,
)

# =============================================================================
# OCRResult 테스트
# =============================================================================


class TestOCRResult:
    """OCRResult 데이터클래스 테스트."""

    def test_basic_creation(self):
        """기본 생성."""
        result = OCRResult(success=True, text="Hello World", engine="tesseract")

        assert result.success is True
        assert result.text == "Hello World"
        assert result.engine == "tesseract"

    def test_fallback_not_triggered_by_default(self):
        assert OCRResult(success=True).fallback_triggered is False

    def test_failure_fields(self):
        result = OCRResult(success=False, engine="tesseract", error_code="OCR_FAILED", error_message="boom")

        assert result.text is None
        assert result.model_used is None
        assert result.error_code == "OCR_FAILED"


# =============================================================================
# Exceptions 테스트
# =============================================================================


class TestProviderExceptions:
    """Provider 예외 테스트."""

    def test_provider_error_fields(self):
        error = ProviderError("OCR_FAILED", "boom", engine="tesseract")

        assert error.code == "OCR_FAILED"
        assert error.message == "boom"
        assert error.context == {"engine": "tesseract"}
        assert str(error) == "[OCR_FAILED] boom"

    def test_ocr_error_is_provider_error(self):
        assert issubclass(OCRError, ProviderError)


# =============================================================================
# Abstract 클래스 테스트
# =============================================================================


class TestAbstractProviders:
    """추상 Provider 테스트."""

    def test_ocr_provider_is_abstract(self):
        with pytest.raises(TypeError):
            OCRProvider()

    def test_llm_provider_is_abstract(self):
        with pytest.raises(TypeError):
            LLMProvider()
