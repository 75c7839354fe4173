from app.errors.base import BaseAppError, create_exception_handler, create_unhandled_exception_handler
from app.errors.email import (
    DISPATCH_MESSAGES,
    TRANSPORT_REASONS,
    DispatchError,
    DispatchReason,
    EmailServiceError,
    MailTransportError,
    TransportErrorKind,
    dispatch_reason,
    email_client_exception_handler,
)
from app.errors.submission import (
    InvalidEmailError,
    MalformedBodyError,
    MessageTooLongError,
    MissingFieldError,
    PayloadTooLargeError,
    PhoneTooLongError,
    SubmissionError,
    submission_exception_handler,
)
from app.errors.validation import validation_exception_handler

__all__ = [
    "DISPATCH_MESSAGES",
    "TRANSPORT_REASONS",
    "BaseAppError",
    "DispatchError",
    "DispatchReason",
    "EmailServiceError",
    "InvalidEmailError",
    "MailTransportError",
    "MalformedBodyError",
    "MessageTooLongError",
    "MissingFieldError",
    "PayloadTooLargeError",
    "PhoneTooLongError",
    "SubmissionError",
    "TransportErrorKind",
    "create_exception_handler",
    "create_unhandled_exception_handler",
    "dispatch_reason",
    "email_client_exception_handler",
    "submission_exception_handler",
    "validation_exception_handler",
]
