from app.managers.rate_limiter import close_limiter, get_identifier, limiter, rate_limit_exceeded_handler

__all__ = [
    "close_limiter",
    "get_identifier",
    "limiter",
    "rate_limit_exceeded_handler",
]
