"""Base formatter: assembles notification content from sections.

A formatter variant pairs a table of section functions with a plan (which
sections run, in which order, for a notification type and message type) and
a subject function. Variants customize content by supplying their own table
entries or plan rather than by subclassing.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING

from nagios_herald.formatters.models import (
    ContentBuffer,
    ContentFragment,
    NotificationType,
    Section,
    SectionCall,
    StateType,
)
from nagios_herald.formatters.sections import DEFAULT_SECTIONS, SectionFn

if TYPE_CHECKING:
    from nagios_herald.environment import NotificationContext
    from nagios_herald.helpers.ganglia_graph import GangliaGraph

logger = logging.getLogger(__name__)

PAGER = "pager"
RECOVERY_STYLE = "color:green"

PlanFn = Callable[[str, str], tuple[SectionCall, ...]]
SubjectFn = Callable[["Formatter"], str]


class ConfigurationError(Exception):
    """Raised for fatal configuration problems; never rendered around."""


class InvalidNotificationTypeError(ConfigurationError):
    """Raised when a notification type has no content plan."""

    def __init__(self, notification_type: str) -> None:
        super().__init__(
            f"Invalid Nagios notification type {notification_type!r}! "
            "Expecting something like PROBLEM or RECOVERY."
        )
        self.notification_type = notification_type


class MissingSectionError(ConfigurationError):
    """Raised when a plan names a section the variant does not provide."""


PROBLEM_SECTIONS = (
    Section.HOST_INFO,
    Section.STATE_INFO,
    Section.ADDITIONAL_INFO,
    Section.ACTION_URL,
    Section.STATE_DETAIL,
    Section.RECIPIENTS_EMAIL_LINK,
    Section.NOTIFICATION_INFO,
    Section.ALERT_ACK_URL,
)

RECOVERY_STYLED_SECTIONS = (
    Section.HOST_INFO,
    Section.STATE_INFO,
    Section.ADDITIONAL_INFO,
    Section.ACTION_URL,
    Section.STATE_DETAIL,
)


def default_plan(notification_type: str, message_type: str) -> tuple[SectionCall, ...]:
    """Return the sections to run for a notification and message type.

    Args:
        notification_type: Nagios notification type (e.g. PROBLEM).
        message_type: Message type being produced (e.g. email, pager).

    Returns:
        Ordered section calls.

    Raises:
        InvalidNotificationTypeError: If the notification type is unknown.
    """
    if notification_type in (NotificationType.PROBLEM, NotificationType.FLAPPINGSTART):
        if message_type == PAGER:
            return (SectionCall(Section.ADDITIONAL_INFO),)
        return tuple(SectionCall(section) for section in PROBLEM_SECTIONS)

    if notification_type in (NotificationType.RECOVERY, NotificationType.FLAPPINGSTOP):
        return tuple(
            SectionCall(section, (RECOVERY_STYLE,)) for section in RECOVERY_STYLED_SECTIONS
        ) + (
            SectionCall(Section.RECIPIENTS_EMAIL_LINK),
            SectionCall(Section.NOTIFICATION_INFO),
        )

    if notification_type == NotificationType.ACKNOWLEDGEMENT:
        return (SectionCall(Section.HOST_INFO), SectionCall(Section.ACK_INFO))

    raise InvalidNotificationTypeError(notification_type)


def default_subject(formatter: Formatter) -> str:
    """Build the subject line for the formatter's message type."""
    ctx = formatter.context
    notification_type = ctx.notification_type
    state = ctx.state_var("STATE")
    is_service = formatter.state_type is StateType.SERVICE

    target = ctx.hostname
    if is_service and ctx.service_desc:
        target += f"/{ctx.service_desc}"

    if formatter.message_type == PAGER:
        label = "SVC" if is_service else "HST"
        return f"{notification_type} {label} {target} {state}"

    label = "Service" if is_service else "Host"
    return f"** {notification_type} {label} {target} is {state} **"


@dataclass(frozen=True)
class FormatterOptions:
    """Settings the sections need beyond the Nagios macros.

    Attributes:
        nagios_url: Base URL of the Nagios web UI, for acknowledge links.
        recipient_domain: Domain appended to bare recipient names.
        graph_fetcher: Ganglia graph helper, or None to disable graphs.
    """

    nagios_url: str = ""
    recipient_domain: str | None = None
    graph_fetcher: GangliaGraph | None = None


@dataclass(frozen=True)
class FormatterVariant:
    """A named formatter: its section table, plan and subject.

    Attributes:
        name: Unique registry name (e.g. "check_disk").
        sections: Section implementations available to the plan.
        plan: Returns the section calls for (notification_type, message_type).
        subject: Builds the subject line.
        description: One-line summary for listings.
    """

    name: str
    sections: Mapping[Section, SectionFn] = field(default_factory=lambda: DEFAULT_SECTIONS)
    plan: PlanFn = default_plan
    subject: SubjectFn = default_subject
    description: str = ""


DEFAULT_FORMATTER = FormatterVariant(
    name="default",
    description="Generic host and service notifications",
)


class Formatter:
    """Builds the subject and text/HTML body of one notification.

    Example:
        ```python
        with Formatter(DEFAULT_FORMATTER, context, "email") as formatter:
            subject = formatter.generate_subject()
            content = formatter.generate_body()
        ```
    """

    def __init__(
        self,
        variant: FormatterVariant,
        context: NotificationContext,
        message_type: str,
        options: FormatterOptions | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            variant: Formatter variant providing sections, plan and subject.
            context: Nagios macros for the notification.
            message_type: Message type being produced (email, pager, ...).
            options: Extra settings used by sections.
        """
        self.variant = variant
        self.context = context
        self.message_type = message_type.lower()
        self.options = options or FormatterOptions()
        self.state_type = StateType(context.state_type)
        self.content = ContentBuffer()
        self._sandbox: Path | None = None

    def __enter__(self) -> Formatter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.clean_sandbox()

    def add_text(self, text: str) -> str:
        return self.content.add_text(text)

    def add_html(self, html: str) -> str:
        return self.content.add_html(html)

    def add_attachment(self, path: str) -> list[str]:
        return self.content.add_attachment(path)

    def render(self, section: Section) -> ContentFragment:
        """Run one section from the variant's table without appending it.

        Raises:
            MissingSectionError: If the variant has no such section.
        """
        try:
            section_fn = self.variant.sections[section]
        except KeyError:
            raise MissingSectionError(
                f"Formatter {self.variant.name!r} has no section {section.value!r}"
            ) from None
        return section_fn(self)

    def generate_section(self, section: Section, *styles: str) -> ContentFragment:
        """Run a section inside a styled HTML container and append it.

        Styles only affect the HTML channel.

        Args:
            section: Section to run.
            *styles: CSS declarations for the container (e.g. "color:green").

        Returns:
            The appended fragment, container included.
        """
        style = ";".join(styles)
        fragment = (
            ContentFragment(html=f"<div style='{style}'>")
            + self.render(section)
            + ContentFragment(html="</div>")
        )
        self.content.append(fragment)
        return fragment

    def generate_content(self, notification_type: str) -> ContentBuffer:
        """Generate the body for a notification type.

        The plan is resolved before any section runs, so an invalid type
        leaves the content untouched.

        Args:
            notification_type: One of the Nagios notification types.

        Returns:
            The accumulated content.

        Raises:
            InvalidNotificationTypeError: If the type is not supported.
        """
        calls = self.variant.plan(notification_type, self.message_type)
        logger.debug(
            f"Generating {notification_type} {self.message_type} content with "
            f"{self.variant.name!r}: {[call.section.value for call in calls]}"
        )
        for call in calls:
            self.generate_section(call.section, *call.styles)
        return self.content

    def generate_subject(self) -> str:
        return self.variant.subject(self)

    def generate_body(self) -> ContentBuffer:
        """Generate the body for the notification type in the context."""
        return self.generate_content(self.context.notification_type)

    @property
    def sandbox(self) -> Path:
        """Scratch directory for attachments, created on first use."""
        if self._sandbox is None:
            self._sandbox = Path(tempfile.mkdtemp(prefix="nagios-herald-"))
            logger.debug(f"Created sandbox {self._sandbox}")
        return self._sandbox

    def clean_sandbox(self) -> None:
        """Remove the scratch directory if this formatter created it."""
        if self._sandbox is None:
            return
        if self._sandbox.is_dir():
            shutil.rmtree(self._sandbox)
            logger.debug(f"Removed sandbox {self._sandbox}")
        self._sandbox = None
