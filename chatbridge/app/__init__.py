"""
App layer: 웹 서버 (FastAPI).

역할:
- 채팅 화면, 턴 API
- OCR/LLM 호출 (providers), 파이프라인 (services)
- 서버 측 세션 상태 없음

주의: 폴더 구분
- chatbridge/app/templates/ → Jinja2 HTML
"""
