"""chatbridge: 웹 채팅 → LLM 게이트웨이 (이미지 OCR, 키워드 도구, 컨텍스트 주입)."""

__version__ = "0.1.0"
