"""Domain layer: errors, schemas and constants."""

from .errors import (
    ChatError,
    EmptyCompletionError,
    InvalidConversationError,
    MissingCredentialError,
    ProviderHttpError,
    UnsupportedAttachmentTypeError,
)
from .schemas import (
    Attachment,
    ChatTurnResult,
    Message,
    ReplyEnvelope,
    TurnLog,
    TurnStage,
)

__all__ = [
    "ChatError",
    "InvalidConversationError",
    "UnsupportedAttachmentTypeError",
    "MissingCredentialError",
    "ProviderHttpError",
    "EmptyCompletionError",
    "Attachment",
    "Message",
    "ReplyEnvelope",
    "TurnLog",
    "TurnStage",
    "ChatTurnResult",
]
