# app/routes/contact.py
"""
Contact Routes.

Endpoint that relays contact-form submissions to the configured mailbox.

Rate Limiting
-------------
The submission endpoint is rate limited per client IP and answers `429`
with a retry hint once the limit is reached.
"""

from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.responses import ORJSONResponse

from app.clients.protocols import MailSender
from app.configs import file_logger, settings
from app.managers import limiter
from app.schemas import (
    ContactSubmission,
    DispatchFailureResponse,
    ErrorResponse,
    RateLimitResponse,
    SubmissionAck,
)
from app.services import ContactSubmissionHandler

logger = file_logger(getLogger(__name__))

router = APIRouter(tags=["✉️ Contact"])


def get_mail_sender(request: Request) -> MailSender:
    """Return the mail sender created at startup."""
    return request.app.state.mail_sender


def get_contact_handler(
    mail_sender: Annotated[MailSender, Depends(get_mail_sender)],
) -> ContactSubmissionHandler:
    return ContactSubmissionHandler(
        mail_sender,
        recipient=settings.recipient,
        sender_address=settings.MAIL_USER,
        sender_name=settings.MAIL_FROM_NAME,
    )


HandlerDep = Annotated[ContactSubmissionHandler, Depends(get_contact_handler)]


# --- Routes ---
@router.post(
    "/send",
    response_model=SubmissionAck,
    summary="Send a contact form submission",
    response_class=ORJSONResponse,
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "success": True,
                        "message": "Message sent successfully",
                        "messageId": "<170000000000.1.1@example.com>",
                    },
                },
            },
        },
        400: {"model": ErrorResponse, "description": "Invalid submission or malformed body"},
        413: {"model": ErrorResponse, "description": "Request body too large"},
        429: {"model": RateLimitResponse, "description": "Rate limit exceeded"},
        500: {"model": DispatchFailureResponse, "description": "Email could not be sent"},
    },
    operation_id="contact_send",
)
@limiter.limit(settings.SEND_RATE_LIMIT)
async def send(
    request: Request,
    response: Response,
    submission: Annotated[
        ContactSubmission,
        Body(
            examples=[
                {
                    "name": "Jane Doe",
                    "email": "jane@example.com",
                    "subject": "Project inquiry",
                    "phone": "+1 555 0100",
                    "message": "Hi,\nI'd like to talk about a project.",
                },
            ],
        ),
    ],
    handler: HandlerDep,
) -> ORJSONResponse:
    """
    Relay one contact form submission by email.

    Parameters
    ----------
    request : Request
        Current request context.
    response : Response
        Current response context.
    submission : ContactSubmission
        Submitted form fields.
    handler : ContactSubmissionHandler
        Submission pipeline bound to the shared mail sender.

    Returns
    -------
    ORJSONResponse
        Acknowledgement with the provider message id.

    Notes
    -----
    Validation and dispatch failures are raised and rendered by the
    application's exception handlers.

    Examples
    --------
    Request
        POST /send
        Body: {"name": "Jane Doe", "email": "jane@example.com", "message": "..."}
    Response
        200 OK
        {"success": true, "message": "Message sent successfully", "messageId": "<...>"}
    """
    ack = await handler.handle(submission)
    return ORJSONResponse(content=ack.model_dump(by_alias=True))
