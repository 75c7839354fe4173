from collections.abc import Awaitable, Callable
from logging import Logger
from traceback import format_exception
from typing import Any

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from app.configs import DEFAULT_ERROR_MESSAGE, settings
from app.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail

    def to_content(self, *, expose_details: bool = False) -> dict[str, Any]:  # noqa: ARG002
        """Return the JSON body sent to the client for this error."""
        return {"error": self.detail}


def create_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        # Default values
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        content: dict[str, Any] = {"error": DEFAULT_ERROR_MESSAGE}

        if isinstance(exc, BaseAppError):
            status_code = exc.status_code
            content = exc.to_content(expose_details=settings.is_development)

        logger.warning(f"{content['error']} for ip: {host(request)} for endpoint {request.url.path}")

        return ORJSONResponse(content=content, status_code=status_code)

    return handler


def create_unhandled_exception_handler(
    logger: Logger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create the last-resort handler for exceptions nothing else caught.

    Stack detail is only included in the body in development.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        logger.error(
            f"Server error on {request.method} {request.url.path} from ip: {host(request)}",
            exc_info=exc,
        )
        content: dict[str, Any] = {"error": DEFAULT_ERROR_MESSAGE}
        if settings.is_development:
            content["details"] = "".join(format_exception(exc))
        return ORJSONResponse(content=content, status_code=HTTP_500_INTERNAL_SERVER_ERROR)

    return handler
