"""Fetch Ganglia graphs for attachment to notifications."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from nagios_herald.helpers.inventory import InventoryLookupError, NodeInventory

logger = logging.getLogger(__name__)

GANGLIA_GRAPH_URL = "http://{base}/graph.php?&c={cluster}&h={host}&m={metric}&r={range}&z=medium"

ImageDownloader = Callable[[str, str], bool]


class GangliaGraph:
    """Retrieves Ganglia metric graphs for a set of hosts.

    Example:
        ```python
        graphs = GangliaGraph("ganglia.example.com", inventory, UrlImageDownloader(client))
        paths = graphs.get_graphs(["web0001.example.com"], "part_max_used", "/tmp/img", "1day")
        ```
    """

    def __init__(
        self,
        base_uri: str,
        inventory: NodeInventory,
        downloader: ImageDownloader,
    ) -> None:
        """Initialize the helper.

        Args:
            base_uri: Ganglia web host (and optional path), without scheme.
            inventory: Inventory used to resolve a host's cluster.
            downloader: Callable (url, path) -> success.
        """
        self.base_uri = base_uri
        self.inventory = inventory
        self.downloader = downloader

    def get_cluster_name_for_host(self, host: str) -> str | None:
        """Get the Ganglia cluster a host belongs to.

        Returns:
            The cluster name, or None when the host has no node or cluster.

        Raises:
            InventoryLookupError: If the inventory could not be queried.
        """
        node = self.inventory.find_node(host)
        if node is None:
            return None
        return node.cluster_name

    def get_ganglia_url(self, cluster_name: str, host: str, metric: str, range: str) -> str:
        """Build the URL of a metric graph.

        Args:
            cluster_name: The Ganglia cluster this node belongs to.
            host: The hostname of the node.
            metric: The name of the Ganglia metric.
            range: The time period the graph covers (e.g. "1day").

        Returns:
            Full Ganglia graph URL.
        """
        return GANGLIA_GRAPH_URL.format(
            base=self.base_uri, cluster=cluster_name, host=host, metric=metric, range=range
        )

    def get_graphs(self, hosts: Sequence[str], metric: str, path: str, range: str) -> list[str]:
        """Download a metric graph for each host.

        Hosts whose cluster cannot be resolved or whose graph cannot be
        downloaded are logged and left out.

        Args:
            hosts: Hosts to fetch graphs for.
            metric: The name of the Ganglia metric.
            path: Directory to save images in.
            range: The time period the graphs cover.

        Returns:
            Local image paths, in host order.
        """
        # strip the trailing slash so image paths are built cleanly
        if path.endswith("/"):
            path = path[:-1]

        image_paths = []
        for host in hosts:
            try:
                cluster_name = self.get_cluster_name_for_host(host)
            except InventoryLookupError as e:
                logger.warning(f"Could not resolve Ganglia cluster for '{host}': {e}")
                continue
            if cluster_name is None:
                logger.warning(f"No Ganglia cluster known for '{host}' - skipping '{metric}' graph")
                continue

            url = self.get_ganglia_url(cluster_name, host, metric, range)
            image_path = f"{path}/{host}-{metric}.png"
            if self.downloader(url, image_path):
                image_paths.append(image_path)
            else:
                logger.warning(
                    f"No Ganglia graph found for '{host}' (cluster: '{cluster_name}') "
                    f"- '{metric}' in '{range}'"
                )
        return image_paths
