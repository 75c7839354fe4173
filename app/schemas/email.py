from pydantic import BaseModel, ConfigDict, Field

from app.configs import SEND_SUCCESS_MESSAGE


class ContactSubmission(BaseModel):
    """
    Incoming contact-form body.

    Every field is optional at the parsing layer so that presence, format and
    length rules are enforced by the submission handler, one at a time.
    """

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    name: str | None = Field(default=None, description="The sender's name", examples=["Jane Doe"])
    email: str | None = Field(
        default=None,
        description="Address replies should go to",
        examples=["jane@example.com"],
    )
    subject: str | None = Field(
        default=None,
        description="Subject of the message",
        examples=["General Inquiry"],
    )
    phone: str | None = Field(default=None, description="Optional phone number", examples=["+1 555 0100"])
    message: str | None = Field(
        default=None,
        description="Body of the message",
        examples=["Hi, I'd like to talk about a project."],
    )

    def string_fields(self) -> dict[str, str]:
        """Return the fields that carry a string value."""
        return {k: v for k, v in self.model_dump().items() if isinstance(v, str)}


class SubmissionAck(BaseModel):
    """Response returned once the message was handed to the mail server."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True)
    message: str = Field(default=SEND_SUCCESS_MESSAGE)
    message_id: str | None = Field(default=None, alias="messageId")


class ErrorResponse(BaseModel):
    """Body of 4xx responses."""

    error: str


class DispatchFailureResponse(BaseModel):
    """Body of a 500 response after a failed send."""

    success: bool = False
    error: str
    details: str | None = None


class RateLimitResponse(BaseModel):
    error: str = "Too many requests"
    retry_after: int | None = Field(default=None, alias="retryAfter")


class HealthResponse(BaseModel):
    """Liveness payload."""

    status: str = Field(description="Overall health status")
    timestamp: str = Field(description="Current time, ISO-8601 UTC")
    uptime: float = Field(description="Seconds since process start")
    memory: dict[str, int] = Field(description="Process memory usage in bytes")
    env: str = Field(description="Configured environment")
