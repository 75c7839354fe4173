"""
Contact submission pipeline.

Validate one contact-form submission on its raw values, then escape it into a
single outbound email and dispatch that once. The handler keeps no state
between calls; the only shared resource is the mail sender it is given.
"""

from email.utils import formataddr
from logging import getLogger
from re import compile as re_compile

from app.clients.protocols import MailSender, OutboundEmail
from app.configs import (
    DEFAULT_SUBJECT,
    MAX_MESSAGE_LENGTH,
    MAX_PHONE_LENGTH,
    MAX_SUBJECT_LENGTH,
    SEND_SUCCESS_MESSAGE,
    SUBJECT_PREFIX,
    file_logger,
)
from app.errors import (
    DispatchError,
    InvalidEmailError,
    MailTransportError,
    MessageTooLongError,
    MissingFieldError,
    PhoneTooLongError,
)
from app.schemas import ContactSubmission, SubmissionAck
from app.services.email_template_builder import EmailTemplateBuilder
from app.utils.helpers import escape_markup

logger = file_logger(getLogger(__name__))

EMAIL_PATTERN = re_compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REQUIRED_FIELDS = ("name", "email", "message")


def sanitize(submission: ContactSubmission) -> ContactSubmission:
    """Return a copy with ``<`` and ``>`` escaped in every string field."""
    return submission.model_copy(
        update={k: escape_markup(v) for k, v in submission.string_fields().items()},
    )


def validate(submission: ContactSubmission) -> None:
    """
    Check presence, format and length rules in order on the raw values.

    Raises:
        SubmissionError: The first rule that fails. Later rules are not evaluated.
    """
    for field in REQUIRED_FIELDS:
        if not getattr(submission, field):
            raise MissingFieldError(field)

    email = submission.email or ""
    if not email.isascii() or not EMAIL_PATTERN.match(email):
        raise InvalidEmailError

    if len(submission.message or "") > MAX_MESSAGE_LENGTH:
        raise MessageTooLongError

    if submission.phone and len(submission.phone) > MAX_PHONE_LENGTH:
        raise PhoneTooLongError


class ContactSubmissionHandler:
    """Turns a validated submission into exactly one send attempt."""

    def __init__(
        self,
        mail_sender: MailSender,
        *,
        recipient: str,
        sender_address: str,
        sender_name: str,
        templates: EmailTemplateBuilder | None = None,
    ) -> None:
        self.mail_sender = mail_sender
        self.recipient = recipient
        self.sender = formataddr((sender_name, sender_address))
        self.templates = templates or EmailTemplateBuilder()

    def compose(self, submission: ContactSubmission) -> OutboundEmail:
        """
        Build the outbound email from a validated submission.

        The subject is cut to length before markup is escaped so that an
        escaped entity is never split.
        """
        subject = (submission.subject or DEFAULT_SUBJECT)[:MAX_SUBJECT_LENGTH]
        clean = sanitize(submission.model_copy(update={"subject": subject}))
        fields = {
            "name": clean.name or "",
            "email": clean.email or "",
            "subject": clean.subject or "",
            "message": clean.message or "",
            "phone": clean.phone,
        }
        return OutboundEmail(
            sender=self.sender,
            reply_to=fields["email"],
            to=self.recipient,
            subject=f"{SUBJECT_PREFIX}{fields['subject']}",
            text=self.templates.build_text(**fields),
            html=self.templates.build_html(**fields),
            headers=self.templates.mailer_headers(),
        )

    async def handle(self, submission: ContactSubmission) -> SubmissionAck:
        """
        Run the whole pipeline for one submission.

        Args:
            submission: Parsed request body.

        Returns:
            SubmissionAck carrying the provider message id.

        Raises:
            SubmissionError: If the submission fails validation.
            DispatchError: If the mail sender rejects the message.
        """
        validate(submission)

        email = self.compose(submission)
        try:
            receipt = await self.mail_sender.send_email(email)
        except MailTransportError as exc:
            error = DispatchError.from_transport(exc)
            logger.warning(f"Dispatch failed ({error.reason}): {error.detail}")
            raise error from exc

        logger.info(f"Submission dispatched, message id {receipt.message_id}")
        return SubmissionAck(success=True, message=SEND_SUCCESS_MESSAGE, message_id=receipt.message_id)
