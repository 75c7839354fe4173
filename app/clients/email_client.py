"""SMTP mail sender with a bounded, thread-safe connection pool."""

from asyncio import get_running_loop
from collections.abc import Iterator
from contextlib import contextmanager
from email.message import EmailMessage
from email.utils import formatdate, make_msgid, parseaddr
from logging import getLogger
from re import compile as re_compile
from smtplib import (
    SMTP,
    SMTP_SSL,
    SMTPAuthenticationError,
    SMTPConnectError,
    SMTPException,
    SMTPNotSupportedError,
    SMTPRecipientsRefused,
    SMTPResponseException,
    SMTPSenderRefused,
    SMTPServerDisconnected,
)
from ssl import create_default_context
from threading import BoundedSemaphore, Lock

from app.clients.protocols import OutboundEmail, SendReceipt
from app.configs import Settings, file_logger, settings
from app.decorators import retry_until_success
from app.errors import MailTransportError, TransportErrorKind

logger = file_logger(getLogger(__name__))

# Regex pattern for header injection prevention
_HEADER_INJECTION_PATTERN = re_compile(r"[\r\n]")


def classify_smtp_error(exc: BaseException) -> TransportErrorKind:
    """
    Decide which transport failure kind an smtplib or socket error represents.

    Args:
        exc: Exception raised while talking to the SMTP server.

    Returns:
        The matching TransportErrorKind.
    """
    if isinstance(exc, (SMTPAuthenticationError, SMTPNotSupportedError)):
        return TransportErrorKind.AUTH
    if isinstance(exc, (SMTPSenderRefused, SMTPRecipientsRefused, ValueError)):
        return TransportErrorKind.ENVELOPE
    if isinstance(exc, (SMTPConnectError, SMTPServerDisconnected, OSError)):
        return TransportErrorKind.CONNECTION
    return TransportErrorKind.PROTOCOL


def describe_smtp_error(exc: BaseException) -> str:
    """Render the server's reply (or the exception text) for logs and dev responses."""
    if isinstance(exc, SMTPResponseException):
        error = exc.smtp_error
        text = error.decode(errors="replace") if isinstance(error, bytes) else str(error)
        return f"{exc.smtp_code} {text}"
    if isinstance(exc, SMTPRecipientsRefused):
        return "; ".join(
            f"{rcpt}: {code} {msg.decode(errors='replace')}"
            for rcpt, (code, msg) in exc.recipients.items()
        )
    return str(exc) or type(exc).__name__


class _PooledConnection:
    __slots__ = ("sent", "smtp")

    def __init__(self, smtp: SMTP) -> None:
        self.smtp = smtp
        self.sent = 0


class SmtpConnectionPool:
    """
    A small pool of authenticated SMTP connections.

    At most ``max_connections`` connections are checked out at once; further
    callers block until one is released. A connection is closed after
    ``max_messages`` sends or after any error raised while it was in use.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str = "",
        password: str = "",
        use_ssl: bool = False,
        starttls: bool = True,
        timeout: float = 20.0,
        max_connections: int = 5,
        max_messages: int = 100,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self._password = password
        self.use_ssl = use_ssl
        self.starttls = starttls
        self.timeout = timeout
        self.max_connections = max_connections
        self.max_messages = max_messages

        self._slots = BoundedSemaphore(max_connections)
        # Lock guards the idle list and the closed flag
        self._lock = Lock()
        self._idle: list[_PooledConnection] = []
        self._closed = False

    @property
    def idle_connections(self) -> int:
        with self._lock:
            return len(self._idle)

    def _open(self) -> SMTP:
        context = create_default_context()
        if self.use_ssl:
            smtp: SMTP = SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        else:
            smtp = SMTP(self.host, self.port, timeout=self.timeout)
        try:
            if not self.use_ssl and self.starttls:
                smtp.ehlo()
                smtp.starttls(context=context)
                smtp.ehlo()
            if self.username and self._password:
                smtp.login(self.username, self._password)
        except BaseException:
            smtp.close()
            raise
        logger.debug(f"Opened SMTP connection to {self.host}:{self.port}")
        return smtp

    @staticmethod
    def _is_alive(conn: _PooledConnection) -> bool:
        try:
            code, _ = conn.smtp.noop()
        except (SMTPException, OSError):
            return False
        return code == 250

    def _checkout(self) -> _PooledConnection:
        while True:
            with self._lock:
                if self._closed:
                    mssg = "SMTP connection pool is closed"
                    raise SMTPServerDisconnected(mssg)
                conn = self._idle.pop() if self._idle else None
            if conn is None:
                return _PooledConnection(self._open())
            if self._is_alive(conn):
                return conn
            self._discard(conn)

    def _checkin(self, conn: _PooledConnection) -> None:
        with self._lock:
            if not self._closed and conn.sent < self.max_messages:
                self._idle.append(conn)
                return
        self._quit(conn)

    @staticmethod
    def _discard(conn: _PooledConnection) -> None:
        conn.smtp.close()

    @staticmethod
    def _quit(conn: _PooledConnection) -> None:
        try:
            conn.smtp.quit()
        except (SMTPException, OSError):
            logger.debug("SMTP QUIT failed, closing socket")
            conn.smtp.close()

    @contextmanager
    def connection(self) -> Iterator[SMTP]:
        """Check out a connection for one operation, returning it afterwards."""
        self._slots.acquire()
        try:
            conn = self._checkout()
            try:
                yield conn.smtp
            except BaseException:
                self._discard(conn)
                raise
            conn.sent += 1
            self._checkin(conn)
        finally:
            self._slots.release()

    def close(self) -> None:
        """Close every idle connection and refuse further checkouts."""
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            self._quit(conn)


class SmtpMailSender:
    """
    Sends composed messages through a pooled SMTP transport.

    Created once at startup and shared by every request.
    """

    def __init__(self, pool: SmtpConnectionPool) -> None:
        self._pool = pool

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "SmtpMailSender":
        pool = SmtpConnectionPool(
            host=config.MAIL_SERVER,
            port=config.MAIL_PORT,
            username=config.MAIL_USER,
            password=config.MAIL_PASS.get_secret_value(),
            use_ssl=config.MAIL_SSL_TLS,
            starttls=config.MAIL_STARTTLS,
            timeout=config.MAIL_TIMEOUT,
            max_connections=config.MAIL_POOL_MAX_CONNECTIONS,
            max_messages=config.MAIL_POOL_MAX_MESSAGES,
        )
        return cls(pool)

    @property
    def pool(self) -> SmtpConnectionPool:
        return self._pool

    def _validate_email(self, email: str) -> str:
        """
        Validate an address header value.

        Raises:
            ValueError: If the address is invalid, not ASCII, or contains injection
                characters. The message never includes the address itself.
        """
        if _HEADER_INJECTION_PATTERN.search(email):
            mssg = "Email contains invalid characters (potential header injection)"
            raise ValueError(mssg)

        _, addr = parseaddr(email)
        if not addr or "@" not in addr:
            mssg = "Invalid email address"
            raise ValueError(mssg)

        # Encoded words are not allowed inside an address
        if not addr.isascii():
            mssg = "Email address must be ASCII"
            raise ValueError(mssg)

        return email

    def _sanitize_header(self, value: str) -> str:
        """Strip newlines so a value cannot start a new header."""
        return _HEADER_INJECTION_PATTERN.sub("", value)

    def _build_message(self, email: OutboundEmail) -> EmailMessage:
        """
        Create a multipart (text + HTML) MIME message.

        Raises:
            ValueError: If any address is invalid.
        """
        sender = self._validate_email(email.sender)
        domain = parseaddr(sender)[1].rpartition("@")[2] or None

        message = EmailMessage()
        message["From"] = sender
        message["To"] = self._validate_email(email.to)
        message["Reply-To"] = self._validate_email(email.reply_to)
        message["Subject"] = self._sanitize_header(email.subject)
        message["Date"] = formatdate(localtime=True)
        message["Message-ID"] = make_msgid(domain=domain)
        for name, value in email.headers.items():
            message[name] = self._sanitize_header(value)

        message.set_content(email.text)
        message.add_alternative(email.html, subtype="html")
        return message

    def send_sync(self, email: OutboundEmail) -> SendReceipt:
        """
        Blocking method to send an email.

        Should not be called directly within an async route.

        Raises:
            MailTransportError: On any addressing or transport failure.
        """
        try:
            message = self._build_message(email)
            with self._pool.connection() as smtp:
                refused = smtp.send_message(message)
        except (SMTPException, OSError, ValueError) as error:
            kind = classify_smtp_error(error)
            details = describe_smtp_error(error)
            logger.exception(f"SMTP send failed ({kind}): {details}")
            raise MailTransportError(kind, details) from error

        message_id = str(message["Message-ID"])
        accepted = tuple(addr for addr in [parseaddr(email.to)[1]] if addr not in refused)
        logger.info(f"Email sent. ID: {message_id}")
        return SendReceipt(message_id=message_id, accepted=accepted)

    async def send_email(self, email: OutboundEmail) -> SendReceipt:
        """
        Asynchronous wrapper to send email without blocking the Event Loop.

        Uses the loop's default ThreadPoolExecutor.
        """
        loop = get_running_loop()
        return await loop.run_in_executor(None, self.send_sync, email)

    def verify_sync(self) -> None:
        """Open (or reuse) a connection and issue NOOP."""
        try:
            with self._pool.connection() as smtp:
                code, reply = smtp.noop()
                if code != 250:
                    raise SMTPResponseException(code, reply)
        except (SMTPException, OSError) as error:
            raise MailTransportError(classify_smtp_error(error), describe_smtp_error(error)) from error

    async def verify(self) -> None:
        loop = get_running_loop()
        await loop.run_in_executor(None, self.verify_sync)

    async def verify_until_ready(self, delay: float) -> None:
        """Keep verifying the transport every ``delay`` seconds until it succeeds."""

        @retry_until_success(delay=delay)
        async def _verify() -> None:
            await self.verify()

        await _verify()
        logger.info("SMTP connection verified")

    def close(self) -> None:
        self._pool.close()
