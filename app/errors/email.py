from enum import StrEnum
from logging import getLogger
from typing import Any

from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.configs import file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class TransportErrorKind(StrEnum):
    """What went wrong talking to the SMTP server."""

    AUTH = "auth"
    ENVELOPE = "envelope"
    CONNECTION = "connection"
    PROTOCOL = "protocol"


class DispatchReason(StrEnum):
    """User-facing failure category reported for a dispatch."""

    AUTH = "auth"
    ENVELOPE = "envelope"
    GENERIC = "generic"


TRANSPORT_REASONS: dict[TransportErrorKind, DispatchReason] = {
    TransportErrorKind.AUTH: DispatchReason.AUTH,
    TransportErrorKind.ENVELOPE: DispatchReason.ENVELOPE,
    TransportErrorKind.CONNECTION: DispatchReason.GENERIC,
    TransportErrorKind.PROTOCOL: DispatchReason.GENERIC,
}

DISPATCH_MESSAGES: dict[DispatchReason, str] = {
    DispatchReason.AUTH: "Email service authentication failed",
    DispatchReason.ENVELOPE: "Email could not be addressed (sender or recipient rejected)",
    DispatchReason.GENERIC: "Failed to send message",
}


def dispatch_reason(kind: TransportErrorKind) -> DispatchReason:
    """Map a transport failure kind onto the category reported to the client."""
    return TRANSPORT_REASONS.get(kind, DispatchReason.GENERIC)


class EmailServiceError(BaseAppError):
    """Base class for all email service related errors."""

    def __init__(self, detail: str = "Email service error", details: str | None = None) -> None:
        super().__init__(
            detail=detail,
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        )
        self.details = details

    def to_content(self, *, expose_details: bool = False) -> dict[str, Any]:
        content: dict[str, Any] = {"success": False, "error": self.detail}
        if expose_details and self.details:
            content["details"] = self.details
        return content


class MailTransportError(EmailServiceError):
    """Raised by the mail sender; ``details`` holds the raw server text."""

    def __init__(self, kind: TransportErrorKind, details: str | None = None) -> None:
        super().__init__(DISPATCH_MESSAGES[dispatch_reason(kind)], details)
        self.kind = kind


class DispatchError(EmailServiceError):
    """Raised by the submission handler when the one send attempt fails."""

    def __init__(self, reason: DispatchReason, details: str | None = None) -> None:
        super().__init__(DISPATCH_MESSAGES[reason], details)
        self.reason = reason

    @classmethod
    def from_transport(cls, exc: MailTransportError) -> "DispatchError":
        return cls(dispatch_reason(exc.kind), exc.details)


# Create the exception handler using the helper
email_client_exception_handler = create_exception_handler(logger)
