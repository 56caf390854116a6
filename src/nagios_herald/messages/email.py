"""Email message sender: text and HTML alternatives plus attachments."""

from __future__ import annotations

import logging
import mimetypes
from email.message import EmailMessage
from pathlib import Path

from nagios_herald.messages.base import MessageSender
from nagios_herald.messages.models import Message

logger = logging.getLogger(__name__)


class EmailSender(MessageSender):
    """Sends multipart email with an HTML alternative and file attachments."""

    name = "email"

    def build_mail(self, message: Message) -> EmailMessage:
        """Build a multipart message with the HTML body and attachments."""
        mail = super().build_mail(message)
        if message.html:
            mail.add_alternative(f"<html><body>{message.html}</body></html>", subtype="html")

        for attachment in message.attachments:
            path = Path(attachment)
            mime_type, _ = mimetypes.guess_type(path.name)
            maintype, subtype = (mime_type or "application/octet-stream").split("/", 1)
            mail.add_attachment(
                path.read_bytes(),
                maintype=maintype,
                subtype=subtype,
                filename=path.name,
            )
            logger.debug(f"Attached {path}")
        return mail

    def format_body(self, message: Message) -> str:
        body = message.text
        if message.attachments:
            body += "\nAttachments:\n" + "\n".join(f"  {path}" for path in message.attachments)
        return body
