"""
Context Retriever: 마지막 발화 ↔ 고정 문서 제목 키워드 매칭.

매칭 규칙 (둘 중 하나면 매칭):
1. 소문자 발화가 소문자 제목의 부분 문자열
2. 소문자 제목의 공백 토큰 중 하나가 소문자 발화의 부분 문자열

점수/순위 없음. 결과는 문서 목록 순서대로 줄바꿈 연결 (빈 문자열 가능).
"""

from collections.abc import Sequence

from chatbridge.domain.constants import KNOWLEDGE_DOCUMENTS


def title_matches(utterance: str, title: str) -> bool:
    lowered_utterance = utterance.lower()
    lowered_title = title.lower()

    if lowered_utterance in lowered_title:
        return True
    return any(token in lowered_utterance for token in lowered_title.split())


def retrieve_relevant_documents(
    utterance: str,
    documents: Sequence[str] = KNOWLEDGE_DOCUMENTS,
) -> str:
    """발화에 매칭되는 문서 제목들 (줄바꿈 연결)."""
    return "\n".join(title for title in documents if title_matches(utterance or "", title))


class ContextRetriever:
    """고정 문서 목록에 대한 retriever (읽기 전용)."""

    def __init__(self, documents: Sequence[str] = KNOWLEDGE_DOCUMENTS):
        self.documents = tuple(documents)

    def retrieve(self, last_utterance: str) -> str:
        return retrieve_relevant_documents(last_utterance, self.documents)
