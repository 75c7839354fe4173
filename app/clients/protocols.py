"""Protocol definitions for mail sender implementations."""

from collections.abc import Awaitable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class OutboundEmail:
    """A fully composed message, ready to hand to the transport."""

    sender: str
    reply_to: str
    to: str
    subject: str
    text: str
    html: str
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SendReceipt:
    """What the transport reports back after accepting a message."""

    message_id: str
    accepted: tuple[str, ...] = ()


@runtime_checkable
class MailSender(Protocol):
    """
    Protocol for mail sender implementations.

    ``send_email`` raises ``MailTransportError`` on failure.
    """

    def send_email(self, email: OutboundEmail) -> Awaitable[SendReceipt]:
        """Send one message."""
        ...

    def verify(self) -> Awaitable[None]:
        """Check that the transport is reachable and accepts our credentials."""
        ...

    def close(self) -> None:
        """Release pooled connections."""
        ...
