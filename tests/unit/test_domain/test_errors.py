"""
test_errors.py - 에러 계층 테스트
"""

from chatbridge.domain.constants import (
    INTERNAL_ERROR_MESSAGE,
    MISSING_CREDENTIAL_MESSAGE,
    UNSUPPORTED_ATTACHMENT_MESSAGE,
)
from chatbridge.domain.errors import (
    ChatError,
    EmptyCompletionError,
    ErrorCodes,
    InvalidConversationError,
    MissingCredentialError,
    ProviderHttpError,
    UnsupportedAttachmentTypeError,
)


class TestChatError:
    """ChatError 기본 동작."""

    def test_message_defaults_to_client_message(self):
        error = MissingCredentialError()

        assert error.message == MISSING_CREDENTIAL_MESSAGE
        assert str(error) == f"[MISSING_CREDENTIAL] {MISSING_CREDENTIAL_MESSAGE}"

    def test_to_dict_includes_context(self):
        error = UnsupportedAttachmentTypeError(
            "pdf", media_type="application/pdf", attachment_name="a.pdf"
        )

        assert error.to_dict() == {
            "code": "UNSUPPORTED_ATTACHMENT_TYPE",
            "message": "pdf",
            "media_type": "application/pdf",
            "attachment_name": "a.pdf",
        }

    def test_status_codes(self):
        """HTTP status 매핑."""
        assert InvalidConversationError.status_code == 400
        assert UnsupportedAttachmentTypeError.status_code == 400
        assert MissingCredentialError.status_code == 500
        assert EmptyCompletionError.status_code == 500

    def test_client_messages(self):
        assert UnsupportedAttachmentTypeError().client_message == UNSUPPORTED_ATTACHMENT_MESSAGE
        assert EmptyCompletionError().client_message == INTERNAL_ERROR_MESSAGE

    def test_all_are_chat_errors(self):
        for cls in (
            InvalidConversationError,
            UnsupportedAttachmentTypeError,
            MissingCredentialError,
            EmptyCompletionError,
        ):
            assert issubclass(cls, ChatError)


class TestProviderHttpError:
    """ProviderHttpError 테스트."""

    def test_keeps_upstream_status_and_body(self):
        error = ProviderHttpError(503, "upstream down", model="llama3-8b-8192")

        assert error.upstream_status == 503
        assert error.body == "upstream down"
        assert error.context == {"upstream_status": 503, "model": "llama3-8b-8192"}
        assert error.code == ErrorCodes.PROVIDER_HTTP_ERROR
