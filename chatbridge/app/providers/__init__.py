"""
AI Provider Abstraction.

- LLM: GroqChatProvider (OpenAI 호환 chat completions)
- OCR: TesseractOCRProvider (기본, 서버 내), GeminiOCRProvider (대체)
"""

from .base import LLMProvider, OCRError, OCRProvider, OCRResult, ProviderError
from .gemini import GeminiOCRProvider
from .groq import GroqChatProvider
from .tesseract import TesseractOCRProvider

__all__ = [
    "LLMProvider",
    "OCRProvider",
    "OCRResult",
    "ProviderError",
    "OCRError",
    "GroqChatProvider",
    "GeminiOCRProvider",
    "TesseractOCRProvider",
]
