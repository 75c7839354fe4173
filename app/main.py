# app/main.py

"""Contact Relay - forwards contact form submissions by email."""

from logging import getLogger

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from psutil import Process
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from app.configs import file_logger, settings
from app.errors import (
    BaseAppError,
    EmailServiceError,
    create_unhandled_exception_handler,
    email_client_exception_handler,
    submission_exception_handler,
    validation_exception_handler,
)
from app.managers import limiter, rate_limit_exceeded_handler
from app.middleware import (
    BodySizeLimitMiddleware,
    LoggingMiddleware,
    SecurityHeadersMiddleware,
    configure_cors,
    lifespan,
)
from app.routes import contact_router
from app.schemas import HealthResponse
from app.utils.helpers import uptime_seconds, utc_timestamp

logger = file_logger(getLogger(__name__))

app = FastAPI(
    title=settings.APP_NAME,
    description="Relays contact form submissions to a mailbox over SMTP",
    version=settings.VERSION,
    lifespan=lifespan,
    docs_url="/docs" if settings.is_development else None,
    redoc_url=None,
)

app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.MAX_BODY_BYTES)
app.add_middleware(LoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
configure_cors(app)

routes = [contact_router]

_ = [app.include_router(router) for router in routes]

errors = [
    (RateLimitExceeded, rate_limit_exceeded_handler),
    (EmailServiceError, email_client_exception_handler),
    (BaseAppError, submission_exception_handler),
    (RequestValidationError, validation_exception_handler),
    (Exception, create_unhandled_exception_handler(logger)),
]

_ = [app.add_exception_handler(exc_type, handler) for exc_type, handler in errors]

app.state.limiter = limiter
limiter: Limiter = app.state.limiter


@app.get(
    "/health",
    tags=["🩺 Health"],
    summary="Health check endpoint",
    response_model=HealthResponse,
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "timestamp": "2025-01-01T12:00:00.000000+00:00",
                        "uptime": 42.5,
                        "memory": {"rss": 52428800, "vms": 104857600},
                        "env": "production",
                    },
                },
            },
        },
    },
    operation_id="health_check",
)
@limiter.exempt
async def health_check(request: Request) -> ORJSONResponse:
    """
    Liveness check with process information.

    Parameters
    ----------
    request : Request
        Current request context.

    Returns
    -------
    ORJSONResponse
        Status, timestamp, uptime, memory usage and environment.

    Examples
    --------
    Request
        GET /health
    Response
        200 OK
        {"status": "healthy", "timestamp": "...", "uptime": 42.5, "memory": {...}, "env": "production"}
    """
    memory = Process().memory_info()
    health = HealthResponse(
        status="healthy",
        timestamp=utc_timestamp(),
        uptime=uptime_seconds(),
        memory={"rss": memory.rss, "vms": memory.vms},
        env=settings.ENVIRONMENT,
    )
    return ORJSONResponse(health.model_dump())


if __name__ == "__main__":
    from uvicorn import run

    run(app, host=settings.HOST, port=settings.PORT, log_level="info", server_header=False)
