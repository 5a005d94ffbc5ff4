"""
Application Services.

역할:
- ocr: 이미지 첨부 → 텍스트 (실패 시 빈 텍스트)
- tools: 키워드 트리거 로컬 응답
- retrieval: 고정 문서 키워드 매칭
- conversation: 요청 파싱/검증 + 대화 조립
- pipeline: 턴 상태 흐름 + 응답 정규화
"""

from .ocr import OCRService
from .pipeline import ChatPipeline
from .retrieval import ContextRetriever
from .tools import ToolDispatcher

__all__ = [
    "OCRService",
    "ToolDispatcher",
    "ContextRetriever",
    "ChatPipeline",
]
