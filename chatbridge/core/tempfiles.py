"""
요청 범위 임시 파일.

- OCR 입력용: OCR 시작 전에 생성, 성공/실패와 무관하게 삭제
- mkstemp 핸들 → 동일 시점/동일 파일명 요청끼리 충돌 없음
"""

import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

TEMP_PREFIX = "chatbridge-"


@contextmanager
def scoped_temp_file(
    data: bytes,
    suffix: str = "",
    directory: Path | None = None,
) -> Iterator[Path]:
    """
    바이트를 고유한 임시 파일에 쓰고 경로를 빌려준다.

    Args:
        data: 파일 내용
        suffix: 확장자 (예: ".png") - 엔진이 포맷 추론에 사용
        directory: 생성 위치 (None이면 시스템 임시 디렉터리)

    Yields:
        임시 파일 경로 (블록 종료 시 삭제됨)
    """
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix, dir=directory)
    path = Path(name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        yield path
    finally:
        path.unlink(missing_ok=True)
