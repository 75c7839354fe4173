# tests/conftest.py
"""Root pytest configuration and shared fixtures."""

import os

# Settings are read when the app is imported, so the environment must be
# complete before any app module is loaded.
os.environ["MAIL_USER"] = "relay@example.com"
os.environ["MAIL_PASS"] = "app-password"
os.environ["MAIL_TO"] = "owner@example.com"
os.environ["ALLOWED_ORIGINS"] = "https://example.com, https://www.example.com"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"
os.environ["MAIL_VERIFY_ON_STARTUP"] = "false"

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app import app
from app.clients.email_client import SmtpMailSender
from app.clients.protocols import SendReceipt
from app.managers import limiter
from app.routes import get_mail_sender

MESSAGE_ID = "<170000000000.1.1@example.com>"


@pytest.fixture
def mock_mail_sender() -> MagicMock:
    sender = MagicMock(spec=SmtpMailSender)
    sender.send_email = AsyncMock(
        return_value=SendReceipt(message_id=MESSAGE_ID, accepted=("owner@example.com",)),
    )
    return sender


@pytest.fixture
def client(mock_mail_sender: MagicMock) -> Generator[TestClient]:
    # Disable rate limiting for tests
    limiter.enabled = False
    app.dependency_overrides[get_mail_sender] = lambda: mock_mail_sender
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    # Re-enable rate limiter after test
    limiter.enabled = True
