"""Tests for app/services/email_template_builder.py."""

import pytest

from app.services import EmailTemplateBuilder

FIELDS = {
    "name": "Jane",
    "email": "jane@example.com",
    "subject": "Hello",
    "message": "Line one\nLine two",
}


@pytest.fixture
def builder() -> EmailTemplateBuilder:
    return EmailTemplateBuilder()


def test_text_layout(builder: EmailTemplateBuilder) -> None:
    assert builder.build_text(**FIELDS, phone="555") == (
        "Name: Jane\nEmail: jane@example.com\nPhone: 555\nSubject: Hello\n\nLine one\nLine two"
    )


def test_html_contains_fields(builder: EmailTemplateBuilder) -> None:
    html = builder.build_html(**FIELDS, phone="555")

    assert "New Contact Form Submission" in html
    assert '<a href="mailto:jane@example.com">jane@example.com</a>' in html
    assert "<strong>Phone:</strong> 555" in html
    assert "<strong>Subject:</strong> Hello" in html
    assert "<p>Line one<br>Line two</p>" in html


def test_mailer_headers(builder: EmailTemplateBuilder) -> None:
    assert builder.mailer_headers() == {"X-Priority": "1", "X-Mailer": "Contact Relay"}
