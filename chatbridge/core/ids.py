"""
ID 생성: turn_id

- 요청(턴) 1건마다 새로 발급
- 로그 상관관계 추적용 (저장하지 않음)
"""

import uuid
from datetime import UTC, datetime


def generate_turn_id() -> str:
    """
    Turn ID 생성.

    고유성 보장: UUID v4
    포맷: TURN-{timestamp}-{uuid[:8]}

    Returns:
        turn_id 문자열
    """
    now = datetime.now(UTC)
    timestamp = now.strftime("%Y%m%d%H%M%S")
    unique = uuid.uuid4().hex[:8]

    return f"TURN-{timestamp}-{unique}"
