"""Formatter for check_disk alerts.

Highlights partitions that are low on free space and attaches a Ganglia
graph of the host's maximum partition usage.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from nagios_herald.formatters.base import FormatterVariant, default_plan
from nagios_herald.formatters.models import EMPTY, ContentFragment, Section, SectionCall
from nagios_herald.formatters.sections import DEFAULT_SECTIONS

if TYPE_CHECKING:
    from nagios_herald.formatters.base import Formatter

logger = logging.getLogger(__name__)

GRAPH_METRIC = "part_max_used"
GRAPH_RANGE = "1day"

# Free-space percentages at or below which a partition is highlighted
CRITICAL_FREE_PERCENT = 10
WARNING_FREE_PERCENT = 20

# e.g. "/var 1234 MB (8% inode=97%)"
PARTITION_PATTERN = re.compile(r"(?P<mount>\S+) (?P<free>\d+) MB \((?P<pct>\d+)% inode=\d+%\)")


def get_partition_color(free_percent: int) -> str | None:
    """Get the highlight color for a partition's free-space percentage."""
    if free_percent <= CRITICAL_FREE_PERCENT:
        return "red"
    if free_percent <= WARNING_FREE_PERCENT:
        return "orange"
    return None


def highlight_partitions(output: str) -> str:
    """Wrap low-space partition entries of check_disk output in colored markup."""

    def _highlight(match: re.Match[str]) -> str:
        color = get_partition_color(int(match.group("pct")))
        if color is None:
            return match.group(0)
        return f"<font style='color:{color}'><b>{match.group(0)}</b></font>"

    return PARTITION_PATTERN.sub(_highlight, output)


def format_disk_additional_info(formatter: Formatter) -> ContentFragment:
    """Format check_disk output with low partitions highlighted."""
    ctx = formatter.context
    output = ctx.state_var("OUTPUT")
    if not output:
        return EMPTY
    return ContentFragment(
        text=f"Additional Info: {ctx.unescaped(ctx.state_var_name('OUTPUT'))}\n\n",
        html=f"<b>Additional Info</b>: {highlight_partitions(output)}<br><br>",
    )


def format_disk_graph(formatter: Formatter) -> ContentFragment:
    """Attach the Ganglia partition usage graph for the alerting host."""
    fetcher = formatter.options.graph_fetcher
    hostname = formatter.context.hostname
    if fetcher is None or not hostname:
        return EMPTY

    paths = fetcher.get_graphs([hostname], GRAPH_METRIC, str(formatter.sandbox), GRAPH_RANGE)
    if not paths:
        return EMPTY

    logger.info(f"Attaching {len(paths)} Ganglia graph(s) for {hostname}")
    return ContentFragment(
        text=f"Ganglia graph ({GRAPH_METRIC}, {GRAPH_RANGE}) attached.\n\n",
        html=f"<b>Ganglia graph</b> ({GRAPH_METRIC}, {GRAPH_RANGE}) attached.<br><br>",
        attachments=tuple(paths),
    )


def check_disk_plan(notification_type: str, message_type: str) -> tuple[SectionCall, ...]:
    """Default plan with the graph added after the plugin output."""
    calls = default_plan(notification_type, message_type)
    sections = [call.section for call in calls]
    if Section.ALERT_ACK_URL not in sections:
        # Only full PROBLEM content gets the graph
        return calls

    index = sections.index(Section.ADDITIONAL_INFO) + 1
    return calls[:index] + (SectionCall(Section.GANGLIA_GRAPH),) + calls[index:]


CHECK_DISK_FORMATTER = FormatterVariant(
    name="check_disk",
    sections={
        **DEFAULT_SECTIONS,
        Section.ADDITIONAL_INFO: format_disk_additional_info,
        Section.GANGLIA_GRAPH: format_disk_graph,
    },
    plan=check_disk_plan,
    description="check_disk alerts with partition highlighting and usage graphs",
)
