"""Default content sections.

Each section reads Nagios macros through its formatter and returns a
ContentFragment holding matching plain-text and HTML output. A section whose
macros are empty returns nothing for them, but still emits the trailing line
breaks it is responsible for.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING
from urllib.parse import quote

from nagios_herald.formatters.models import (
    EMPTY,
    LINE_BREAK,
    ContentFragment,
    Section,
    StateType,
)

if TYPE_CHECKING:
    from nagios_herald.formatters.base import Formatter

SectionFn = Callable[["Formatter"], ContentFragment]

# Nagios cmd.cgi command types for acknowledging problems
CMD_ACKNOWLEDGE_HOST_PROBLEM = 33
CMD_ACKNOWLEDGE_SVC_PROBLEM = 34

HEALTHY_STATES = ("OK", "UP")


def format_host_info(formatter: Formatter) -> ContentFragment:
    """Format the host (and service) being alerted on."""
    hostname = formatter.context.hostname
    service_desc = formatter.context.service_desc

    fragment = ContentFragment(
        text=f"Host: {hostname} ",
        html=f"<br><b>Host</b>: {hostname} ",
    )
    if service_desc:
        fragment += ContentFragment(
            text=f"Service: {service_desc}\n",
            html=f"<b>Service</b>: {service_desc}<br/>",
        )
    else:
        # A trailing newline is needed without a service description
        fragment += LINE_BREAK
    return fragment + LINE_BREAK


def format_state_info(formatter: Formatter) -> ContentFragment:
    """Format the current state of the host or service."""
    ctx = formatter.context
    state = ctx.state_var("STATE")
    duration = ctx.state_var("DURATION")
    last_state = ctx.last_state_var()
    attempts = ctx.state_var("ATTEMPT")
    max_attempts = ctx.get(f"NAGIOS_MAX{ctx.state_type}ATTEMPTS")

    text = (
        f"State is now: {state} for {duration} (was {last_state}) "
        f"after {attempts} / {max_attempts} checks\n"
    )
    state_html = f"<b>{state}</b>"
    if state not in HEALTHY_STATES:
        state_html = f"<b><font style='color:red'>{state}</font></b>"
    html = (
        f"State is now: {state_html} for <b>{duration}</b> (was {last_state}) "
        f"after <b>{attempts} / {max_attempts}</b> checks<br/>"
    )
    return ContentFragment(text=text, html=html) + LINE_BREAK


def format_notification_info(formatter: Formatter) -> ContentFragment:
    """Format the notification date and number."""
    date = formatter.context.get("NAGIOS_LONGDATETIME")
    number = formatter.context.get("NAGIOS_NOTIFICATIONNUMBER")
    line = f"Notification sent at: {date} (notification number {number})"
    return ContentFragment(text=f"{line}\n\n", html=f"{line}<br><br>")


def format_additional_info(formatter: Formatter) -> ContentFragment:
    """Format the plugin output."""
    ctx = formatter.context
    output = ctx.state_var("OUTPUT")
    if not output:
        return EMPTY
    return ContentFragment(
        text=f"Additional Info: {ctx.unescaped(ctx.state_var_name('OUTPUT'))}\n\n",
        html=f"<b>Additional Info</b>: {output}<br><br>",
    )


def format_additional_details(formatter: Formatter) -> ContentFragment:
    """Format the plugin's long output."""
    ctx = formatter.context
    details = ctx.unescaped(f"NAGIOS_LONG{ctx.state_type}OUTPUT")
    if not details:
        return EMPTY
    return ContentFragment(
        text=f"Additional Details: {details}\n",
        html=f"<b>Additional Details</b>: <pre>{details}</pre><br><br>",
    )


def format_notes(formatter: Formatter) -> ContentFragment:
    """Format the notes and notes URL."""
    ctx = formatter.context
    fragment = EMPTY

    notes = ctx.state_var("NOTES")
    if notes:
        fragment += ContentFragment(
            text=f"Notes: {ctx.unescaped(ctx.state_var_name('NOTES'))}\n\n",
            html=f"<b>Notes</b>: {notes}<br><br>",
        )

    notes_url = ctx.state_var("NOTESURL")
    if notes_url:
        fragment += ContentFragment(
            text=f"Notes URL: {notes_url}\n\n",
            html=f"<b>Notes URL</b>: {notes_url}<br><br>",
        )
    return fragment


def format_action_url(formatter: Formatter) -> ContentFragment:
    """Format the action URL."""
    action_url = formatter.context.state_var("ACTIONURL")
    if not action_url:
        return EMPTY
    return ContentFragment(
        text=f"Action URL: {action_url}\n\n",
        html=f"<b>Action URL</b>: {action_url}<br><br>",
    )


def format_state_detail(formatter: Formatter) -> ContentFragment:
    """Format notes and long output for services."""
    fragment = EMPTY
    if formatter.state_type is StateType.SERVICE:
        fragment += formatter.render(Section.NOTES)
        fragment += formatter.render(Section.ADDITIONAL_DETAILS)
    return fragment + LINE_BREAK


def format_recipients_email_link(formatter: Formatter) -> ContentFragment:
    """Format the notified recipients as a mailto link."""
    recipients = formatter.context.get("NAGIOS_NOTIFICATIONRECIPIENTS")
    if not recipients:
        return EMPTY

    hostname = formatter.context.hostname
    subject = hostname
    if formatter.state_type is StateType.SERVICE:
        subject = f"{hostname} - {formatter.context.service_desc}"

    domain = formatter.options.recipient_domain
    addresses = []
    for name in recipients.split(","):
        name = name.strip()
        if domain and "@" not in name:
            name = f"{name}@{domain}"
        addresses.append(name)
    mail_to = ",".join(addresses)

    return ContentFragment(
        text=f"Sent to {recipients}\n",
        html=f'Sent to <a href="mailto:{mail_to}?subject={subject}">{recipients}</a><br>',
    )


def format_ack_info(formatter: Formatter) -> ContentFragment:
    """Format who acknowledged the alert, and when."""
    ctx = formatter.context
    date = ctx.get("NAGIOS_LONGDATETIME")
    author = ctx.state_var("ACKAUTHOR")
    comment = ctx.state_var("ACKCOMMENT")
    hostname = ctx.hostname

    fragment = ContentFragment(text=f"At {date} {author}", html=f"At {date} {author}")
    if formatter.state_type is StateType.SERVICE:
        what = f"{ctx.service_desc} on {hostname}"
    else:
        what = hostname
    fragment += ContentFragment(
        text=f" acknowledged {what}.\n\n",
        html=f" acknowledged {what}.<br><br>",
    )
    if comment:
        fragment += ContentFragment(text=f"Comment: {comment}", html=f"Comment: {comment}")
    return fragment


def format_alert_ack_url(formatter: Formatter) -> ContentFragment:
    """Format the URL that acknowledges this alert in Nagios."""
    hostname = formatter.context.hostname
    service_desc = formatter.context.service_desc
    base_url = formatter.options.nagios_url.rstrip("/")

    if service_desc:
        url = (
            f"{base_url}/nagios/cgi-bin/cmd.cgi?cmd_typ={CMD_ACKNOWLEDGE_SVC_PROBLEM}"
            f"&host={hostname}&service={service_desc}"
        )
    else:
        url = f"{base_url}/nagios/cgi-bin/cmd.cgi?cmd_typ={CMD_ACKNOWLEDGE_HOST_PROBLEM}&host={hostname}"
    url = quote(url, safe=":/?&=%")
    return ContentFragment(
        text=f"Acknowledge this alert: {url}\n",
        html=f"Acknowledge this alert: {url}<br>",
    )


DEFAULT_SECTIONS: Mapping[Section, SectionFn] = MappingProxyType(
    {
        Section.HOST_INFO: format_host_info,
        Section.STATE_INFO: format_state_info,
        Section.ADDITIONAL_INFO: format_additional_info,
        Section.ADDITIONAL_DETAILS: format_additional_details,
        Section.NOTES: format_notes,
        Section.ACTION_URL: format_action_url,
        Section.STATE_DETAIL: format_state_detail,
        Section.RECIPIENTS_EMAIL_LINK: format_recipients_email_link,
        Section.NOTIFICATION_INFO: format_notification_info,
        Section.ACK_INFO: format_ack_info,
        Section.ALERT_ACK_URL: format_alert_ack_url,
    }
)
