"""Client input errors raised before a submission is dispatched."""

from logging import getLogger

from starlette.status import HTTP_400_BAD_REQUEST, HTTP_413_CONTENT_TOO_LARGE

from app.configs import MAX_MESSAGE_LENGTH, MAX_PHONE_LENGTH, file_logger
from app.errors.base import BaseAppError, create_exception_handler

logger = file_logger(getLogger(__name__))


class SubmissionError(BaseAppError):
    """Base class for rejected submissions. Always terminal for the request."""

    def __init__(self, detail: str = "Invalid submission") -> None:
        super().__init__(detail=detail, status_code=HTTP_400_BAD_REQUEST)


class MissingFieldError(SubmissionError):
    """Raised when a required field is absent or empty."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Missing required field: {field}")
        self.field = field


class InvalidEmailError(SubmissionError):
    def __init__(self, detail: str = "Invalid email format") -> None:
        super().__init__(detail)


class MessageTooLongError(SubmissionError):
    def __init__(self, detail: str = f"Message exceeds {MAX_MESSAGE_LENGTH} characters") -> None:
        super().__init__(detail)


class PhoneTooLongError(SubmissionError):
    def __init__(self, detail: str = f"Phone exceeds {MAX_PHONE_LENGTH} characters") -> None:
        super().__init__(detail)


class MalformedBodyError(SubmissionError):
    """Raised when the request body is not a usable JSON object."""

    def __init__(self, detail: str = "Invalid request body") -> None:
        super().__init__(detail)


class PayloadTooLargeError(BaseAppError):
    """Raised when the request body exceeds the configured size cap."""

    def __init__(self, detail: str = "Request body too large") -> None:
        super().__init__(detail=detail, status_code=HTTP_413_CONTENT_TOO_LARGE)


submission_exception_handler = create_exception_handler(logger)
