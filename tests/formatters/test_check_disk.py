"""Tests for the check_disk formatter."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from nagios_herald.environment import NotificationContext
from nagios_herald.formatters.base import Formatter, FormatterOptions
from nagios_herald.formatters.check_disk import (
    CHECK_DISK_FORMATTER,
    GRAPH_METRIC,
    GRAPH_RANGE,
    check_disk_plan,
    get_partition_color,
    highlight_partitions,
)
from nagios_herald.formatters.models import Section

DISK_OUTPUT = "DISK CRITICAL - free space: / 700 MB (8% inode=60%); /boot 119 MB (62% inode=99%);"


@pytest.fixture
def disk_context() -> NotificationContext:
    """A CRITICAL check_disk alert."""
    return NotificationContext(
        {
            "NAGIOS_HOSTNAME": "web01.example.com",
            "NAGIOS_SERVICEDESC": "Disk Space",
            "NAGIOS_SERVICESTATE": "CRITICAL",
            "NAGIOS_SERVICEOUTPUT": DISK_OUTPUT,
            "NAGIOS_NOTIFICATIONTYPE": "PROBLEM",
        }
    )


class TestHighlighting:
    """Tests for partition highlighting."""

    @pytest.mark.parametrize(
        ("free_percent", "expected"),
        [(5, "red"), (10, "red"), (15, "orange"), (20, "orange"), (21, None), (80, None)],
    )
    def test_get_partition_color(self, free_percent: int, expected: str | None) -> None:
        assert get_partition_color(free_percent) == expected

    def test_highlight_low_partition_only(self) -> None:
        """Only partitions low on space are wrapped."""
        html = highlight_partitions(DISK_OUTPUT)
        assert "<font style='color:red'><b>/ 700 MB (8% inode=60%)</b></font>" in html
        assert "/boot 119 MB (62% inode=99%);" in html
        assert html.count("<font") == 1

    def test_unrecognised_output_unchanged(self) -> None:
        assert highlight_partitions("DISK UNKNOWN") == "DISK UNKNOWN"


class TestCheckDiskPlan:
    """Tests for check_disk_plan."""

    def test_graph_follows_additional_info(self) -> None:
        sections = [call.section for call in check_disk_plan("PROBLEM", "email")]
        index = sections.index(Section.ADDITIONAL_INFO)
        assert sections[index + 1] is Section.GANGLIA_GRAPH

    def test_no_graph_for_pager(self) -> None:
        sections = [call.section for call in check_disk_plan("PROBLEM", "pager")]
        assert sections == [Section.ADDITIONAL_INFO]

    def test_no_graph_for_recovery(self) -> None:
        sections = [call.section for call in check_disk_plan("RECOVERY", "email")]
        assert Section.GANGLIA_GRAPH not in sections


class TestCheckDiskFormatter:
    """Tests for check_disk content."""

    def test_additional_info_highlighted(self, disk_context: NotificationContext) -> None:
        """HTML output highlights partitions while text stays plain."""
        formatter = Formatter(CHECK_DISK_FORMATTER, disk_context, "email")
        fragment = formatter.render(Section.ADDITIONAL_INFO)

        assert fragment.text == f"Additional Info: {DISK_OUTPUT}\n\n"
        assert "color:red" in fragment.html

    def test_graph_attached(self, disk_context: NotificationContext) -> None:
        """The fetched graph ends up in the attachments."""
        fetcher = MagicMock()
        with Formatter(
            CHECK_DISK_FORMATTER,
            disk_context,
            "email",
            FormatterOptions(graph_fetcher=fetcher),
        ) as formatter:
            image = f"{formatter.sandbox}/web01.example.com-{GRAPH_METRIC}.png"
            fetcher.get_graphs.return_value = [image]

            content = formatter.generate_body()

            fetcher.get_graphs.assert_called_once_with(
                ["web01.example.com"], GRAPH_METRIC, str(formatter.sandbox), GRAPH_RANGE
            )
            assert content.attachments == [image]
            assert "Ganglia graph (part_max_used, 1day) attached." in content.text

    def test_no_graph_when_fetch_fails(self, disk_context: NotificationContext) -> None:
        fetcher = MagicMock()
        fetcher.get_graphs.return_value = []
        with Formatter(
            CHECK_DISK_FORMATTER, disk_context, "email", FormatterOptions(graph_fetcher=fetcher)
        ) as formatter:
            content = formatter.generate_body()
        assert content.attachments == []
        assert "Ganglia graph" not in content.text

    def test_no_fetcher_configured(self, disk_context: NotificationContext) -> None:
        """Without a graph helper the section is empty."""
        formatter = Formatter(CHECK_DISK_FORMATTER, disk_context, "email")
        content = formatter.generate_body()
        assert content.attachments == []
        assert formatter._sandbox is None
