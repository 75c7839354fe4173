"""Plain-text and HTML bodies for contact-form notification emails."""

from app.configs import settings


class EmailTemplateBuilder:
    """
    Builder for the notification email sent for each submission.

    Values are interpolated as given; callers escape markup beforehand.
    """

    EMAIL_STYLES: dict[str, str] = {
        "font_stack": "Arial, sans-serif",
        "max_width_container": "600px",
        "color_heading": "#333333",
        "color_subheading": "#444444",
    }

    def _get_base_template(self) -> str:
        return """
<div style="font-family: {font_stack}; max-width: {max_width_container};">
  <h2 style="color: {color_heading};">{title}</h2>
  {rows}
  <h3 style="color: {color_subheading};">Message:</h3>
  <p>{message}</p>
</div>
"""

    def _row(self, label: str, value: str) -> str:
        return f"<p><strong>{label}:</strong> {value}</p>"

    def build_text(
        self,
        *,
        name: str,
        email: str,
        subject: str,
        message: str,
        phone: str | None = None,
    ) -> str:
        """Plain-text body listing every field."""
        return (
            f"Name: {name}\n"
            f"Email: {email}\n"
            f"Phone: {phone or 'N/A'}\n"
            f"Subject: {subject}\n\n"
            f"{message}"
        )

    def build_html(
        self,
        *,
        name: str,
        email: str,
        subject: str,
        message: str,
        phone: str | None = None,
    ) -> str:
        """
        HTML body listing every field.

        The phone row is left out when no phone was given, and newlines in the
        message become ``<br>`` tags.
        """
        rows = [
            self._row("Name", name),
            self._row("Email", f'<a href="mailto:{email}">{email}</a>'),
        ]
        if phone:
            rows.append(self._row("Phone", phone))
        rows.append(self._row("Subject", subject))

        message_html = message.replace("\r\n", "\n").replace("\n", "<br>")

        return self._get_base_template().format(
            title="New Contact Form Submission",
            rows="\n  ".join(rows),
            message=message_html,
            **self.EMAIL_STYLES,
        )

    def mailer_headers(self) -> dict[str, str]:
        return {"X-Priority": "1", "X-Mailer": settings.APP_NAME}
