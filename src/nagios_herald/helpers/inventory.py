"""Node inventory lookups (Chef search).

The Ganglia graph helper needs the cluster a host reports to. That mapping
lives in the Chef node attributes (``ganglia.cluster_name``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)

# Chef attribute precedence levels to search, highest first
ATTRIBUTE_LEVELS = ("automatic", "override", "normal", "default")


class InventoryLookupError(Exception):
    """Raised when the inventory could not be queried."""


@dataclass(frozen=True)
class NodeRecord:
    """A node returned by the inventory.

    Attributes:
        name: Node name.
        attributes: Merged node attributes.
    """

    name: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def cluster_name(self) -> str | None:
        """Ganglia cluster of the node, if it has one."""
        ganglia = self.attributes.get("ganglia")
        if not isinstance(ganglia, Mapping):
            return None
        cluster = ganglia.get("cluster_name")
        return str(cluster) if cluster else None


class NodeInventory(Protocol):
    """Protocol for node inventories."""

    def find_node(self, host: str) -> NodeRecord | None:
        """Return the node for a host, or None when there is none.

        Raises InventoryLookupError when the inventory cannot be queried.
        """
        ...


def merge_attributes(row: Mapping[str, Any]) -> dict[str, Any]:
    """Flatten Chef's precedence levels into one attribute mapping."""
    merged: dict[str, Any] = {
        key: value for key, value in row.items() if key not in ATTRIBUTE_LEVELS
    }
    for level in reversed(ATTRIBUTE_LEVELS):
        level_attrs = row.get(level)
        if isinstance(level_attrs, Mapping):
            merged.update(level_attrs)
    return merged


class ChefInventory:
    """Looks up nodes through a Chef server search endpoint.

    Requests go to ``<search_url>/search/node?q=fqdn:<host>``. Request
    signing is left to the endpoint in front of the Chef server.
    """

    def __init__(self, search_url: str, *, client: httpx.Client) -> None:
        """Initialize the inventory.

        Args:
            search_url: Base URL of the Chef server API.
            client: HTTP client to use; the caller closes it.
        """
        self.search_url = search_url.rstrip("/")
        self.client = client

    def find_node(self, host: str) -> NodeRecord | None:
        """Find the node whose FQDN matches a host.

        Args:
            host: Fully qualified host name.

        Returns:
            The first matching node, or None when nothing matched.

        Raises:
            InventoryLookupError: If the search request fails or the reply
                is not a search result.
        """
        url = f"{self.search_url}/search/node"
        try:
            response = self.client.get(
                url,
                params={"q": f"fqdn:{host}"},
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise InventoryLookupError(f"Chef search for {host} failed: {e}") from e

        if not isinstance(result, Mapping):
            raise InventoryLookupError(
                f"Chef search for {host} returned {type(result).__name__}, expected an object"
            )

        rows = result.get("rows") or []
        if not isinstance(rows, list):
            raise InventoryLookupError(f"Chef search for {host} returned malformed rows")
        if not rows:
            logger.debug(f"No Chef node found for {host}")
            return None
        if len(rows) > 1:
            logger.warning(f"Chef search for {host} matched {len(rows)} nodes, using the first")

        row = rows[0]
        if not isinstance(row, Mapping):
            raise InventoryLookupError(f"Chef search for {host} returned a malformed node")
        return NodeRecord(name=str(row.get("name", host)), attributes=merge_attributes(row))
