"""
Chat Routes.

- GET /chat → 채팅 화면 (Jinja2)
- POST /api/chat → 턴 1건 처리 (multipart: messages, file)

응답 본문은 항상 {"reply": Message} 또는 {"error": str} 중 하나.
서버는 대화 상태를 보관하지 않는다 (히스토리는 매 요청 payload에 포함).
"""

from pathlib import Path

from fastapi import APIRouter, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from chatbridge.app.services.pipeline import ChatPipeline
from chatbridge.domain.constants import (
    ATTACHMENT_FIELD,
    MESSAGES_FIELD,
    SCHEMA_VERSION,
    SCHEMA_VERSION_HEADER,
)
from chatbridge.domain.schemas import Attachment, ChatTurnResult

# Jinja2 템플릿 설정
_templates_dir = Path(__file__).parent.parent / "templates"
jinja_templates = Jinja2Templates(directory=_templates_dir)

# Routers
router = APIRouter()  # HTML pages
api_router = APIRouter()  # API endpoints

GREETING = "👋 Hi! I’m your AI assistant. How can I help you today?"


def get_pipeline(request: Request) -> ChatPipeline:
    """
    앱 단위 파이프라인 (lifespan에서 생성).

    lifespan 없이 구성된 앱(테스트 등)은 첫 요청에서 생성 후 재사용.
    """
    pipeline: ChatPipeline | None = getattr(request.app.state, "pipeline", None)
    if pipeline is None:
        config = getattr(request.app.state, "config", {}) or {}
        pipeline = ChatPipeline(config)
        request.app.state.pipeline = pipeline
    return pipeline


async def read_attachment(upload: UploadFile | None) -> Attachment | None:
    """
    UploadFile → Attachment.

    파일 선택 없이 전송된 빈 파트(파일명 없음 + 0 bytes)는 첨부 없음으로 취급.
    """
    if upload is None:
        return None

    data = await upload.read()
    filename = upload.filename or ""
    if not filename and not data:
        return None

    return Attachment(
        data=data,
        media_type=upload.content_type or "",
        filename=filename or "upload",
    )


def build_response(result: ChatTurnResult) -> JSONResponse:
    """ChatTurnResult → JSONResponse (스키마 버전 헤더 포함)."""
    return JSONResponse(
        content=result.envelope.to_dict(),
        status_code=result.status_code,
        headers={
            SCHEMA_VERSION_HEADER: SCHEMA_VERSION,
            "X-Turn-Id": result.turn_log.turn_id,
        },
    )


# =============================================================================
# Page Routes
# =============================================================================


@router.get("/chat", response_class=HTMLResponse)
async def chat_page(request: Request) -> HTMLResponse:
    """
    채팅 화면.

    대화는 브라우저 메모리에만 유지, 턴마다 POST /api/chat 1회.
    """
    return jinja_templates.TemplateResponse(
        request,
        "chat.html",
        {
            "greeting": GREETING,
            "api_url": "/api/chat",
        },
    )


# =============================================================================
# API Routes
# =============================================================================


@api_router.post("")
async def post_chat(
    request: Request,
    messages: str | None = Form(None, alias=MESSAGES_FIELD),
    file: UploadFile | None = File(None, alias=ATTACHMENT_FIELD),
) -> JSONResponse:
    """
    턴 처리.

    Form:
        messages: JSON 배열 (Message 목록, 필수)
        file: 첨부 이미지 (선택)

    Returns:
        200 {"reply": ...} - 모델 응답 / 도구 응답 / provider 오류 안내
        400 {"error": ...} - messages 형식 오류, 이미지가 아닌 첨부
        500 {"error": ...} - API 키 누락, 빈 completion, 예상 못한 오류
    """
    pipeline = get_pipeline(request)
    attachment = await read_attachment(file)

    result = await pipeline.handle(messages, attachment)
    return build_response(result)
