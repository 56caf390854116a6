"""Message layer - delivery of formatted notifications."""

from nagios_herald.messages.base import MessageSender
from nagios_herald.messages.email import EmailSender
from nagios_herald.messages.models import DeliveryStatus, Message, parse_recipients
from nagios_herald.messages.pager import PagerSender

# Message type -> sender class
MESSAGE_SENDERS: dict[str, type[MessageSender]] = {
    "email": EmailSender,
    "pager": PagerSender,
}

__all__ = [
    "MESSAGE_SENDERS",
    "DeliveryStatus",
    "EmailSender",
    "Message",
    "MessageSender",
    "PagerSender",
    "parse_recipients",
]
