"""Data models for the formatters module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StateType(str, Enum):
    """Whether an alert concerns a host or a service."""

    HOST = "HOST"
    SERVICE = "SERVICE"


class NotificationType(str, Enum):
    """Nagios notification types a formatter can render."""

    PROBLEM = "PROBLEM"
    RECOVERY = "RECOVERY"
    ACKNOWLEDGEMENT = "ACKNOWLEDGEMENT"
    FLAPPINGSTART = "FLAPPINGSTART"
    FLAPPINGSTOP = "FLAPPINGSTOP"


class Section(str, Enum):
    """Identifiers of the content-generating sections."""

    HOST_INFO = "host_info"
    STATE_INFO = "state_info"
    ADDITIONAL_INFO = "additional_info"
    ADDITIONAL_DETAILS = "additional_details"
    NOTES = "notes"
    ACTION_URL = "action_url"
    STATE_DETAIL = "state_detail"
    RECIPIENTS_EMAIL_LINK = "recipients_email_link"
    NOTIFICATION_INFO = "notification_info"
    ACK_INFO = "ack_info"
    ALERT_ACK_URL = "alert_ack_url"
    GANGLIA_GRAPH = "ganglia_graph"


@dataclass(frozen=True)
class ContentFragment:
    """Matching plain-text and HTML output of one section.

    Attributes:
        text: Plain-text content.
        html: HTML content.
        attachments: Paths of files to attach to the message.
    """

    text: str = ""
    html: str = ""
    attachments: tuple[str, ...] = ()

    def __add__(self, other: ContentFragment) -> ContentFragment:
        return ContentFragment(
            text=self.text + other.text,
            html=self.html + other.html,
            attachments=self.attachments + other.attachments,
        )

    def __bool__(self) -> bool:
        return bool(self.text or self.html or self.attachments)


LINE_BREAK = ContentFragment(text="\n", html="<br>")
EMPTY = ContentFragment()


@dataclass(frozen=True)
class SectionCall:
    """A section to run, with the CSS styles of its HTML container."""

    section: Section
    styles: tuple[str, ...] = ()


@dataclass
class ContentBuffer:
    """Accumulated text, HTML and attachments for one notification.

    Appends are never trimmed, deduplicated or reordered.
    """

    text: str = ""
    html: str = ""
    attachments: list[str] = field(default_factory=list)

    def add_text(self, text: str) -> str:
        self.text += text
        return self.text

    def add_html(self, html: str) -> str:
        self.html += html
        return self.html

    def add_attachment(self, path: str) -> list[str]:
        self.attachments.append(path)
        return self.attachments

    def append(self, fragment: ContentFragment) -> None:
        """Append both channels and any attachments of a fragment."""
        self.add_text(fragment.text)
        self.add_html(fragment.html)
        for path in fragment.attachments:
            self.add_attachment(path)
