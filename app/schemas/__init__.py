from app.schemas.email import (
    ContactSubmission,
    DispatchFailureResponse,
    ErrorResponse,
    HealthResponse,
    RateLimitResponse,
    SubmissionAck,
)

__all__ = [
    "ContactSubmission",
    "DispatchFailureResponse",
    "ErrorResponse",
    "HealthResponse",
    "RateLimitResponse",
    "SubmissionAck",
]
