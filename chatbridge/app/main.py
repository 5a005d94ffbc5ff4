"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn chatbridge.app.main:app --reload
- 프로덕션: uv run uvicorn chatbridge.app.main:app
"""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import yaml
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from chatbridge.app.routes import chat
from chatbridge.app.services.pipeline import ChatPipeline
from chatbridge.core.logging import configure_logging
from chatbridge.domain.constants import (
    INTERNAL_ERROR_MESSAGE,
    INVALID_CONVERSATION_MESSAGE,
    SCHEMA_VERSION,
    SCHEMA_VERSION_HEADER,
)

logger = logging.getLogger(__name__)

CONFIG_ENV = "CHATBRIDGE_CONFIG"

# =============================================================================
# Configuration
# =============================================================================


def load_config(config_path: Path | None = None) -> dict:
    """
    설정 파일 로드.

    우선순위: 인자 > CHATBRIDGE_CONFIG 환경변수 > 프로젝트 루트 default.yaml
    파일이 없으면 {} (코드 기본값 사용).
    """
    if config_path is None:
        env_path = os.environ.get(CONFIG_ENV)
        if env_path:
            config_path = Path(env_path)
        else:
            config_path = Path(__file__).parent.parent.parent / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data: dict[Any, Any] | None = yaml.safe_load(f)
        return data or {}


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 설정 로드, 로깅 설정, 파이프라인 생성 (이후 읽기 전용)
    """
    # Startup
    app.state.config = load_config()
    configure_logging(app.state.config)
    app.state.pipeline = ChatPipeline(app.state.config)
    logger.info("chatbridge started")

    yield


# =============================================================================
# App Instance
# =============================================================================

app = FastAPI(
    title="chatbridge",
    description="Web chat → LLM gateway with image OCR and keyword tools",
    version="0.1.0",
    lifespan=lifespan,
)


# =============================================================================
# Error Handlers
# =============================================================================
# API 응답 본문은 항상 {"reply": ...} 또는 {"error": ...}


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """폼 형식 오류 (예: file 필드에 문자열) → 400."""
    logger.warning(f"Request validation failed on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        content={"error": INVALID_CONVERSATION_MESSAGE},
        status_code=400,
        headers={SCHEMA_VERSION_HEADER: SCHEMA_VERSION},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """파이프라인 바깥의 예상 못한 오류 → 500."""
    logger.error(f"Server Error on {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        content={"error": INTERNAL_ERROR_MESSAGE},
        status_code=500,
        headers={SCHEMA_VERSION_HEADER: SCHEMA_VERSION},
    )


# =============================================================================
# Routes
# =============================================================================

# 페이지 라우트 (HTML)
app.include_router(chat.router, prefix="", tags=["Chat"])

# API 라우트
app.include_router(chat.api_router, prefix="/api/chat", tags=["Chat API"])


# =============================================================================
# Root Endpoints
# =============================================================================


@app.get("/")
async def root() -> RedirectResponse:
    """홈 → 채팅 화면."""
    return RedirectResponse(url="/chat")


@app.get("/health")
async def health() -> dict[str, str]:
    """헬스 체크."""
    return {"status": "ok"}


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "chatbridge.app.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
