"""Business logic services."""

from sespress.services.dispatcher import MailDispatcher, get_mail_dispatcher
from sespress.services.templates import FileTemplateResolver, PlaceholderTemplateRenderer
from sespress.services.transport import EmailTransport, SesTransport

__all__ = [
    "MailDispatcher",
    "get_mail_dispatcher",
    "FileTemplateResolver",
    "PlaceholderTemplateRenderer",
    "EmailTransport",
    "SesTransport",
]
