from app.decorators.with_retry import RETRIABLE_EXCEPTIONS, retry_until_success

__all__ = [
    "RETRIABLE_EXCEPTIONS",
    "retry_until_success",
]
