# app/managers/rate_limiter.py

"""Rate limiter configuration using slowapi."""

from logging import getLogger
from typing import cast

from fastapi import Request
from fastapi.responses import ORJSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.status import HTTP_429_TOO_MANY_REQUESTS

from app.configs import LimiterConfig, file_logger
from app.schemas import RateLimitResponse
from app.utils.helpers import host

logger = file_logger(getLogger(__name__))


def get_identifier(request: Request) -> str:
    """
    Get unique identifier for rate limiting.

    Args:
        request: FastAPI request object.

    Returns:
        Client IP based identifier string.
    """
    return f"ip:{get_remote_address(request)}"


limiter = Limiter(**LimiterConfig().model_dump(), key_func=get_identifier)


async def close_limiter() -> None:
    """
    Close and cleanup limiter resources.

    This should be called during application shutdown.
    """
    # SlowAPI's Limiter manages its own storage lifecycle
    logger.info("✓ Rate limiter shutdown complete")


def _retry_after(headers: dict[str, str]) -> int | None:
    value = headers.get("retry-after")
    return int(value) if value and value.isdigit() else None


async def rate_limit_exceeded_handler(
    request: Request,
    exc: Exception,
) -> ORJSONResponse:
    """
    Handle rate limit exceeded exceptions.

    Args:
        request: FastAPI request object.
        exc: RateLimitExceeded exception.

    Returns:
        JSON response with a retry hint.
    """
    http_exc = cast(RateLimitExceeded, exc)
    response = _rate_limit_exceeded_handler(request, http_exc)
    headers = {k.lower(): v for k, v in response.headers.items()}
    retry_after = _retry_after(headers)

    logger.warning(
        f"Rate limit {http_exc.detail} exceeded for ip: {host(request)} at {request.url.path}",
    )

    body = RateLimitResponse(retryAfter=retry_after)
    forwarded = {k: v for k, v in headers.items() if k.startswith("x-ratelimit") or k == "retry-after"}
    return ORJSONResponse(
        status_code=HTTP_429_TOO_MANY_REQUESTS,
        content=body.model_dump(by_alias=True),
        headers=forwarded,
    )
