from app.services.contact import ContactSubmissionHandler, sanitize, validate
from app.services.email_template_builder import EmailTemplateBuilder

__all__ = ["ContactSubmissionHandler", "EmailTemplateBuilder", "sanitize", "validate"]
