"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the contact relay service.
"""

from logging import Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Literal

from pydantic import SecretStr
from pydantic_settings.main import BaseSettings, SettingsConfigDict
from pythonjsonlogger.json import JsonFormatter

ENV_FILE = Path(__file__).parent.parent.parent / ".env"
LOG_DIR = Path("logs")

# --- Constants ---
MAX_MESSAGE_LENGTH = 1000
MAX_PHONE_LENGTH = 20
MAX_SUBJECT_LENGTH = 100
DEFAULT_SUBJECT = "General Inquiry"
SUBJECT_PREFIX = "New Message: "

# Response constants
DEFAULT_ERROR_MESSAGE = "Internal server error"
SEND_SUCCESS_MESSAGE = "Message sent successfully"


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Contact Relay"
    VERSION: str = "1.0.0"

    # Environment
    ENVIRONMENT: Literal["development", "production", "test"] = "production"
    LOG_TO_FILE: bool = True
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"  # noqa: S104
    PORT: int = 5500

    # Email Configuration
    MAIL_USER: str
    MAIL_PASS: SecretStr
    MAIL_TO: str | None = None
    MAIL_FROM_NAME: str = "Portfolio Contact"
    MAIL_SERVER: str = "smtp.gmail.com"
    MAIL_PORT: int = 587
    MAIL_STARTTLS: bool = True
    MAIL_SSL_TLS: bool = False
    MAIL_TIMEOUT: float = 20.0  # seconds

    # Transport pool
    MAIL_POOL_MAX_CONNECTIONS: int = 5
    MAIL_POOL_MAX_MESSAGES: int = 100
    MAIL_VERIFY_ON_STARTUP: bool = True
    MAIL_VERIFY_RETRY_DELAY: float = 5.0  # seconds

    # HTTP boundary
    ALLOWED_ORIGINS: str
    MAX_BODY_BYTES: int = 10 * 1024
    SEND_RATE_LIMIT: str = "30/15minutes"

    @property
    def allowed_origins(self) -> list[str]:
        """Return the configured CORS origins as a list."""
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def recipient(self) -> str:
        """Return the address submissions are delivered to."""
        return self.MAIL_TO or self.MAIL_USER

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"


settings = Settings()


class LimiterConfig(BaseSettings):
    """Keyword arguments for the slowapi ``Limiter``."""

    model_config = SettingsConfigDict(env_prefix="LIMITER_", case_sensitive=False)

    storage_uri: str = "memory://"
    strategy: str = "fixed-window"
    headers_enabled: bool = True
    key_prefix: str = "contact-relay"
    enabled: bool = True


def file_logger(logger: Logger) -> Logger:
    """
    Attach a rotating JSON file handler to ``logger`` when file logging is on.

    Args:
        logger: Logger returned by ``logging.getLogger``.

    Returns:
        The same logger, for chaining at module import.
    """
    if not settings.LOG_TO_FILE:
        return logger

    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LOG_DIR / "app.log",
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
    return logger
