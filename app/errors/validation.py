"""Request body parsing error handling for FastAPI."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse

from app.configs import file_logger
from app.errors.submission import MalformedBodyError
from app.utils.helpers import host

logger = file_logger(getLogger(__name__))


def body_error(exc: RequestValidationError) -> MalformedBodyError:
    """
    Reduce FastAPI's validation error list to a single client-facing error.

    Args:
        exc: The RequestValidationError raised while parsing the body.

    Returns:
        MalformedBodyError describing the first problem found.
    """
    errors = exc.errors()
    if any(error.get("type") == "json_invalid" for error in errors):
        return MalformedBodyError("Invalid JSON")

    for error in errors:
        loc = [str(part) for part in error.get("loc", ())[1:]]  # Skip 'body'
        if error.get("type") == "missing" and not loc:
            return MalformedBodyError("Request body must be a JSON object")
        if loc:
            return MalformedBodyError(f"Invalid value for field: {'.'.join(loc)}")

    return MalformedBodyError()


async def validation_exception_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle body parsing errors with the same shape as other client errors.

    Args:
        request: The incoming request.
        exc: The RequestValidationError exception.

    Returns:
        ORJSONResponse with a single ``error`` message.
    """
    error = body_error(cast(RequestValidationError, exc))

    logger.warning(
        f"Malformed body for ip: {host(request)} at endpoint {request.url.path}: {error.detail}",
    )

    return ORJSONResponse(status_code=error.status_code, content=error.to_content())
