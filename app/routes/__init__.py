from app.routes.contact import get_contact_handler, get_mail_sender
from app.routes.contact import router as contact_router

__all__ = [
    "contact_router",
    "get_contact_handler",
    "get_mail_sender",
]
