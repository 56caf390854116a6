"""Base message sender: console output in dry-run mode, SMTP otherwise."""

from __future__ import annotations

import logging
import smtplib
import sys
from collections.abc import Callable
from email.message import EmailMessage
from typing import TextIO

from nagios_herald.messages.models import DeliveryStatus, Message

logger = logging.getLogger(__name__)

DIVIDER = "------------------"
DEFAULT_SMTP_HOST = "localhost"
DEFAULT_SMTP_PORT = 25
DEFAULT_SMTP_TIMEOUT = 10.0

SmtpFactory = Callable[..., smtplib.SMTP]


class MessageSender:
    """Sends messages over SMTP, or prints them when dry-running.

    Subclasses decide how a Message becomes a MIME message (``build_mail``)
    and how it is printed (``format_body``). SMTP errors propagate to the
    caller unchanged.
    """

    name = "base"

    def __init__(
        self,
        *,
        smtp_host: str = DEFAULT_SMTP_HOST,
        smtp_port: int = DEFAULT_SMTP_PORT,
        timeout: float = DEFAULT_SMTP_TIMEOUT,
        dry_run: bool = False,
        stream: TextIO | None = None,
        smtp_factory: SmtpFactory = smtplib.SMTP,
    ) -> None:
        """Initialize the sender.

        Args:
            smtp_host: SMTP relay host.
            smtp_port: SMTP relay port.
            timeout: SMTP connection timeout in seconds.
            dry_run: Print messages instead of sending them.
            stream: Where dry-run output goes (defaults to stdout).
            smtp_factory: Callable creating the SMTP connection.
        """
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.timeout = timeout
        self.dry_run = dry_run
        self.stream = stream
        self.smtp_factory = smtp_factory

    def build_mail(self, message: Message) -> EmailMessage:
        """Build the MIME message to send."""
        mail = EmailMessage()
        if message.reply_to:
            mail["From"] = message.reply_to
            mail["Reply-To"] = message.reply_to
        mail["To"] = ", ".join(message.recipients)
        mail["Subject"] = message.subject
        mail.set_content(message.text)
        return mail

    def format_body(self, message: Message) -> str:
        return message.text

    def print(self, message: Message) -> None:
        """Write the subject and body to the console."""
        stream = self.stream or sys.stdout
        print(DIVIDER, file=stream)
        print(f"Subject : {message.subject}", file=stream)
        print(DIVIDER, file=stream)
        print(self.format_body(message), file=stream)

    def send(self, message: Message) -> DeliveryStatus:
        """Send a message, or print it in dry-run mode.

        Args:
            message: Message to deliver.

        Returns:
            PRINTED in dry-run mode, DELIVERED otherwise.

        Raises:
            smtplib.SMTPException: If the relay rejects the message.
            OSError: If the relay cannot be reached.
        """
        if self.dry_run:
            self.print(message)
            return DeliveryStatus.PRINTED

        mail = self.build_mail(message)
        with self.smtp_factory(self.smtp_host, self.smtp_port, timeout=self.timeout) as smtp:
            smtp.send_message(mail)

        logger.info(
            f"{self.name} message '{message.subject}' sent to {', '.join(message.recipients)}"
        )
        return DeliveryStatus.DELIVERED
