"""Data models for the messages module."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class DeliveryStatus(str, Enum):
    """Outcome of sending a message."""

    DELIVERED = "delivered"
    PRINTED = "printed"


@dataclass(frozen=True)
class Message:
    """A notification ready for delivery.

    Attributes:
        recipients: Destination addresses.
        subject: Subject line.
        text: Plain-text body.
        html: HTML body (ignored by text-only senders).
        attachments: Paths of files to attach.
        reply_to: Sender / reply-to address.
    """

    recipients: tuple[str, ...]
    subject: str
    text: str
    html: str = ""
    attachments: tuple[str, ...] = ()
    reply_to: str | None = None


def parse_recipients(value: str | None) -> tuple[str, ...]:
    """Split a comma-separated recipient list, dropping blanks."""
    if not value:
        return ()
    return tuple(item.strip() for item in value.split(",") if item.strip())
