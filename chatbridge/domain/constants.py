"""
Domain Constants: 채팅 파이프라인 전역 상수.

요청 스키마, 프롬프트 문구, 지식 문서 목록 등
프로세스 전체에서 읽기 전용으로 공유되는 값들.
"""

# =============================================================================
# Request / Response Schema (요청/응답 스키마)
# =============================================================================
# 단일 계약: POST /api/chat (multipart)
# - messages: JSON 배열 (필수)
# - file: 첨부 파일 (선택)

SCHEMA_VERSION = "1"
SCHEMA_VERSION_HEADER = "X-Chat-Schema-Version"

MESSAGES_FIELD = "messages"
ATTACHMENT_FIELD = "file"

MESSAGE_ROLES = frozenset({"user", "assistant", "system", "function"})

# =============================================================================
# Prompt Text (대화 조립 문구)
# =============================================================================

CONTEXT_PREFIX = "Use this knowledge:\n"
ATTACHMENT_TEXT_PREFIX = "Text from image: "
NO_TEXT_PLACEHOLDER = "Image uploaded but no text was detected."

# =============================================================================
# Knowledge Documents (컨텍스트 검색 대상)
# =============================================================================
# 순서 = 출력 순서

KNOWLEDGE_DOCUMENTS: tuple[str, ...] = (
    "How to use the chatbot",
    "Groq API Guide",
    "Common image use cases",
    "Helpful doc about multimodal AI",
)

# =============================================================================
# Tools (로컬 응답 도구)
# =============================================================================

TOOL_CURRENT_TIME = "getCurrentTime"
TOOL_WEATHER = "getWeather"

DEFAULT_TIMEZONE = "Asia/Kolkata"
WEATHER_REPLY = "🌤️ The weather in Hyderabad is 32°C, mostly sunny with light winds."

# =============================================================================
# Provider Defaults (Groq, OpenAI 호환 API)
# =============================================================================

DEFAULT_CHAT_ENDPOINT = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_CHAT_MODEL = "llama3-8b-8192"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_API_KEY_ENV = "GROQ_API_KEY"

# =============================================================================
# Client-facing Messages (사용자 노출 문구)
# =============================================================================
# 항상 짧은 단일 문자열 - 내부 에러 상세는 로그에만

PROVIDER_ERROR_REPLY = "Groq API error. Try again later."
INTERNAL_ERROR_MESSAGE = "Internal Server Error"
MISSING_CREDENTIAL_MESSAGE = "GROQ API key missing"
UNSUPPORTED_ATTACHMENT_MESSAGE = "Only image attachments are supported."
INVALID_CONVERSATION_MESSAGE = "Invalid messages payload."
