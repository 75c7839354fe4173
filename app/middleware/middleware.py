# app/middleware/middleware.py
"""
Middleware components for the contact relay application.

This module contains middleware for security headers, request logging,
request body size limits and CORS handling. It also contains the lifespan
event handler that owns the pooled mail sender.
"""

from asyncio import CancelledError, Task, create_task, get_running_loop
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress
from logging import basicConfig, getLogger
from time import perf_counter

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from pythonjsonlogger.json import JsonFormatter
from rich.logging import RichHandler
from rich.traceback import install
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from app.clients.email_client import SmtpMailSender
from app.configs import file_logger, settings
from app.errors import PayloadTooLargeError
from app.managers.rate_limiter import close_limiter
from app.utils.helpers import get_summary, host

# --- Logging Configuration ---
basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(message)s",
    datefmt="%X",
    handlers=[RichHandler(rich_tracebacks=True)],
)
logger = getLogger("rich")
file_logger(logger)
for handler in logger.handlers:
    handler.setFormatter(JsonFormatter())

install()

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def _log_verification(task: Task) -> None:
    if task.cancelled():
        return
    if exc := task.exception():
        logger.error("SMTP verification stopped", exc_info=exc)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Create the shared mail sender on startup and release it on shutdown."""
    # Startup
    logger.info(f"Starting {app.title}...")

    verify_task: Task | None = None
    try:
        mail_sender = SmtpMailSender.from_settings(settings)
        app.state.mail_sender = mail_sender

        if settings.MAIL_VERIFY_ON_STARTUP:
            verify_task = create_task(
                mail_sender.verify_until_ready(settings.MAIL_VERIFY_RETRY_DELAY),
            )
            verify_task.add_done_callback(_log_verification)

        logger.info(f"Environment: {settings.ENVIRONMENT}")
        logger.info(f"Allowed origins: {settings.allowed_origins}")
        logger.info(f"SMTP server: {settings.MAIL_SERVER}:{settings.MAIL_PORT}")

    except Exception:
        logger.exception("Failed to initialize services")
        raise

    yield

    # Shutdown
    logger.info(f"Shutting down {app.title}...")

    try:
        if verify_task is not None and not verify_task.done():
            verify_task.cancel()
            with suppress(CancelledError):
                await verify_task
        await get_running_loop().run_in_executor(None, mail_sender.close)
        await close_limiter()
        logger.info("Services cleaned up successfully")

    except Exception:
        logger.exception("Error during service cleanup")


def configure_cors(app: FastAPI) -> None:
    """Allow cross-origin submissions only from the configured origins."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["POST"],
        allow_headers=["Content-Type"],
    )


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Log request summary and timing information."""

        start_time = perf_counter()
        summary = get_summary(request)

        route_info = summary or f"{request.method} {request.url.path}"
        logger.info(f"Request: {route_info}, from ip: {host(request)}")

        origin = request.headers.get("origin")
        if origin and origin not in settings.allowed_origins:
            logger.warning(f"Blocked by CORS: {origin}")

        response = await call_next(request)
        duration = perf_counter() - start_time

        logger.info(
            f"Response: {response.status_code} for {request.method} {request.url.path} "
            f"in {duration:.2f}s",
        )

        return response


def content_security_policy() -> str:
    connect_src = " ".join(["'self'", *settings.allowed_origins])
    directives = {
        "default-src": "'self'",
        "script-src": "'self'",
        "style-src": "'self' 'unsafe-inline' https://fonts.googleapis.com",
        "font-src": "'self' https://fonts.gstatic.com",
        "img-src": "'self' data:",
        "connect-src": connect_src,
    }
    return "; ".join(f"{name} {value}" for name, value in directives.items())


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)
        self.csp = content_security_policy()

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        """Add security headers to all responses."""

        response = await call_next(request)
        response.headers["Content-Security-Policy"] = self.csp
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "0"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "no-referrer"
        return response


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_bytes`` before routing.

    A declared ``Content-Length`` over the limit is refused without reading
    the body. Otherwise the body is pulled chunk by chunk, and reading stops
    with a 413 as soon as the running total passes the limit. An accepted
    body is replayed to the application unchanged.
    """

    def __init__(self, app: ASGIApp, max_bytes: int = settings.MAX_BODY_BYTES) -> None:
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] not in _BODY_METHODS:
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.max_bytes:
            await self._reject(scope, receive, send, int(declared))
            return

        buffered: list[Message] = []
        size = 0
        more_body = True
        while more_body:
            message = await receive()
            buffered.append(message)
            if message["type"] != "http.request":
                break
            size += len(message.get("body", b""))
            if size > self.max_bytes:
                await self._reject(scope, receive, send, size)
                return
            more_body = message.get("more_body", False)

        async def replay() -> Message:
            return buffered.pop(0) if buffered else await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        error = PayloadTooLargeError()
        client = scope.get("client")
        ip = client[0] if client else "unknown"
        logger.warning(f"{error.detail} (at least {size} bytes) for ip: {ip} at {scope['path']}")
        response = ORJSONResponse(status_code=error.status_code, content=error.to_content())
        await response(scope, receive, send)
