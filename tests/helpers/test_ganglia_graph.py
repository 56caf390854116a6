"""Tests for the Ganglia graph helper."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from nagios_herald.helpers.ganglia_graph import GangliaGraph
from nagios_herald.helpers.inventory import InventoryLookupError, NodeRecord

METRIC = "part_max_used"


class FakeInventory:
    """Inventory returning canned clusters; None values mean no cluster."""

    def __init__(self, clusters: dict[str, str | None], failing: tuple[str, ...] = ()) -> None:
        self.clusters = clusters
        self.failing = failing

    def find_node(self, host: str) -> NodeRecord | None:
        if host in self.failing:
            raise InventoryLookupError(f"search for {host} timed out")
        if host not in self.clusters:
            return None
        cluster = self.clusters[host]
        return NodeRecord(name=host, attributes={"ganglia": {"cluster_name": cluster}})


@pytest.fixture
def downloader() -> MagicMock:
    """Downloader that fails for host "b"."""
    return MagicMock(side_effect=lambda url, path: "/b-" not in path)


class TestGangliaGraph:
    """Tests for GangliaGraph."""

    def test_get_ganglia_url(self) -> None:
        graphs = GangliaGraph("ganglia.example.com", FakeInventory({}), MagicMock())
        url = graphs.get_ganglia_url("Web", "web0001.example.com", METRIC, "1day")
        assert url == (
            "http://ganglia.example.com/graph.php?&c=Web&h=web0001.example.com"
            "&m=part_max_used&r=1day&z=medium"
        )

    def test_get_cluster_name(self) -> None:
        graphs = GangliaGraph("ganglia", FakeInventory({"a": "Web"}), MagicMock())
        assert graphs.get_cluster_name_for_host("a") == "Web"
        assert graphs.get_cluster_name_for_host("unknown") is None

    def test_failed_download_omitted(
        self, downloader: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Only successful downloads are returned; failures are warned about."""
        graphs = GangliaGraph("ganglia", FakeInventory({"a": "Web", "b": "Web"}), downloader)

        with caplog.at_level(logging.WARNING):
            paths = graphs.get_graphs(["a", "b"], METRIC, "/tmp/dest", "1day")

        assert paths == [f"/tmp/dest/a-{METRIC}.png"]
        assert "'b'" in caplog.text
        assert downloader.call_count == 2

    def test_host_order_preserved(self) -> None:
        inventory = FakeInventory({"c": "Web", "a": "Db", "b": "Web"})
        graphs = GangliaGraph("ganglia", inventory, MagicMock(return_value=True))

        paths = graphs.get_graphs(["c", "a", "b"], METRIC, "/tmp/dest", "1day")

        assert paths == [
            f"/tmp/dest/c-{METRIC}.png",
            f"/tmp/dest/a-{METRIC}.png",
            f"/tmp/dest/b-{METRIC}.png",
        ]

    def test_trailing_slash_normalized(self) -> None:
        graphs = GangliaGraph("ganglia", FakeInventory({"a": "Web"}), MagicMock(return_value=True))
        assert graphs.get_graphs(["a"], METRIC, "/tmp/dest/", "1day") == [
            f"/tmp/dest/a-{METRIC}.png"
        ]

    def test_inventory_failure_skips_host(self, caplog: pytest.LogCaptureFixture) -> None:
        """An inventory error skips the host without downloading."""
        downloader = MagicMock(return_value=True)
        graphs = GangliaGraph("ganglia", FakeInventory({"a": "Web"}, failing=("b",)), downloader)

        with caplog.at_level(logging.WARNING):
            paths = graphs.get_graphs(["b", "a"], METRIC, "/tmp/dest", "1day")

        assert paths == [f"/tmp/dest/a-{METRIC}.png"]
        assert "Could not resolve Ganglia cluster for 'b'" in caplog.text
        downloader.assert_called_once()

    def test_host_without_cluster_skipped(self, caplog: pytest.LogCaptureFixture) -> None:
        """A host with no cluster is reported separately from lookup errors."""
        downloader = MagicMock(return_value=True)
        graphs = GangliaGraph("ganglia", FakeInventory({"a": None}), downloader)

        with caplog.at_level(logging.WARNING):
            paths = graphs.get_graphs(["a", "ghost"], METRIC, "/tmp/dest", "1day")

        assert paths == []
        assert "No Ganglia cluster known for 'a'" in caplog.text
        assert "No Ganglia cluster known for 'ghost'" in caplog.text
        downloader.assert_not_called()

    def test_download_url_and_path(self) -> None:
        downloader = MagicMock(return_value=True)
        graphs = GangliaGraph("ganglia.example.com", FakeInventory({"a": "Web"}), downloader)

        graphs.get_graphs(["a"], METRIC, "/tmp/dest", "1week")

        downloader.assert_called_once_with(
            "http://ganglia.example.com/graph.php?&c=Web&h=a&m=part_max_used&r=1week&z=medium",
            f"/tmp/dest/a-{METRIC}.png",
        )
