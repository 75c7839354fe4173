# tests/routes/test_contact.py
"""Tests for the /send endpoint."""

from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from app import app
from app.configs import settings
from app.errors import MailTransportError, TransportErrorKind
from app.routes import get_mail_sender

VALID: dict[str, Any] = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "subject": "Hello",
    "message": "Hi there",
}


def submission(**overrides: Any) -> dict[str, Any]:
    body = dict(VALID)
    body.update(overrides)
    return body


class TestSendSuccess:
    """Accepted submissions."""

    def test_returns_ack_with_message_id(self, client: TestClient, mock_mail_sender: MagicMock) -> None:
        response = client.post("/send", json=VALID)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Message sent successfully",
            "messageId": mock_mail_sender.send_email.return_value.message_id,
        }
        mock_mail_sender.send_email.assert_awaited_once()

    def test_outbound_email(self, client: TestClient, mock_mail_sender: MagicMock) -> None:
        client.post("/send", json=submission(phone="+1 555 0100"))

        email = mock_mail_sender.send_email.await_args.args[0]
        assert email.to == "owner@example.com"
        assert email.reply_to == "jane@example.com"
        assert email.sender == "Portfolio Contact <relay@example.com>"
        assert email.subject == "New Message: Hello"
        assert "Phone: +1 555 0100" in email.text

    def test_subject_is_optional(self, client: TestClient, mock_mail_sender: MagicMock) -> None:
        response = client.post("/send", json=submission(subject=None))

        assert response.status_code == 200
        email = mock_mail_sender.send_email.await_args.args[0]
        assert email.subject == "New Message: General Inquiry"

    def test_unknown_fields_ignored(self, client: TestClient) -> None:
        response = client.post("/send", json=submission(website="http://spam.example"))
        assert response.status_code == 200

    def test_markup_escaped(self, client: TestClient, mock_mail_sender: MagicMock) -> None:
        client.post("/send", json=submission(name="<b>Jane</b>"))

        email = mock_mail_sender.send_email.await_args.args[0]
        assert "&lt;b&gt;Jane&lt;/b&gt;" in email.html
        assert "<b>Jane</b>" not in email.html


class TestSendRejected:
    """Submissions rejected before dispatch."""

    @pytest.mark.parametrize(
        ("overrides", "error"),
        [
            ({"name": None}, "Missing required field: name"),
            ({"email": ""}, "Missing required field: email"),
            ({"message": "   "}, "Missing required field: message"),
            ({"email": "not-an-email"}, "Invalid email format"),
            ({"message": "x" * 1001}, "Message exceeds 1000 characters"),
            ({"phone": "1" * 21}, "Phone exceeds 20 characters"),
            ({"name": 123}, "Invalid value for field: name"),
        ],
    )
    def test_invalid_submission(
        self,
        client: TestClient,
        mock_mail_sender: MagicMock,
        overrides: dict[str, Any],
        error: str,
    ) -> None:
        response = client.post("/send", json=submission(**overrides))

        assert response.status_code == 400
        assert response.json() == {"error": error}
        mock_mail_sender.send_email.assert_not_called()

    def test_malformed_json(self, client: TestClient, mock_mail_sender: MagicMock) -> None:
        response = client.post(
            "/send",
            content=b'{"name": "Jane"',
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid JSON"}
        mock_mail_sender.send_email.assert_not_called()

    def test_body_not_an_object(self, client: TestClient) -> None:
        response = client.post("/send", json=["Jane", "jane@example.com"])

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_empty_body(self, client: TestClient) -> None:
        response = client.post("/send", headers={"Content-Type": "application/json"})

        assert response.status_code == 400
        assert response.json() == {"error": "Request body must be a JSON object"}

    def test_oversized_body(self, client: TestClient, mock_mail_sender: MagicMock) -> None:
        response = client.post("/send", json=submission(message="x" * 11 * 1024))

        assert response.status_code == 413
        assert response.json() == {"error": "Request body too large"}
        mock_mail_sender.send_email.assert_not_called()

    def test_get_not_allowed(self, client: TestClient) -> None:
        assert client.get("/send").status_code == 405


class TestSendDispatchFailure:
    """Failures reported by the mail transport."""

    @pytest.mark.parametrize(
        ("kind", "error"),
        [
            (TransportErrorKind.AUTH, "Email service authentication failed"),
            (TransportErrorKind.ENVELOPE, "Email could not be addressed (sender or recipient rejected)"),
            (TransportErrorKind.CONNECTION, "Failed to send message"),
            (TransportErrorKind.PROTOCOL, "Failed to send message"),
        ],
    )
    def test_reason_reported_without_details(
        self,
        client: TestClient,
        mock_mail_sender: MagicMock,
        kind: TransportErrorKind,
        error: str,
    ) -> None:
        mock_mail_sender.send_email.side_effect = MailTransportError(kind, "535 5.7.8 rejected")

        response = client.post("/send", json=VALID)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": error}
        mock_mail_sender.send_email.assert_awaited_once()

    def test_details_exposed_in_development(
        self,
        client: TestClient,
        mock_mail_sender: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(settings, "ENVIRONMENT", "development")
        mock_mail_sender.send_email.side_effect = MailTransportError(
            TransportErrorKind.AUTH,
            "535 5.7.8 Username and Password not accepted",
        )

        response = client.post("/send", json=VALID)

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "Email service authentication failed",
            "details": "535 5.7.8 Username and Password not accepted",
        }


@pytest.fixture
def server_error_client(mock_mail_sender: MagicMock) -> Generator[TestClient]:
    app.dependency_overrides[get_mail_sender] = lambda: mock_mail_sender
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def test_unexpected_error_returns_generic_500(
    server_error_client: TestClient,
    mock_mail_sender: MagicMock,
) -> None:
    mock_mail_sender.send_email.side_effect = RuntimeError("pool exploded")

    response = server_error_client.post("/send", json=VALID)

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
