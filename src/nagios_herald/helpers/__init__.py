"""Helpers for enriching notifications with external data."""

from nagios_herald.helpers.ganglia_graph import GangliaGraph
from nagios_herald.helpers.inventory import (
    ChefInventory,
    InventoryLookupError,
    NodeInventory,
    NodeRecord,
)
from nagios_herald.helpers.url_image import UrlImageDownloader, download_image

__all__ = [
    "ChefInventory",
    "GangliaGraph",
    "InventoryLookupError",
    "NodeInventory",
    "NodeRecord",
    "UrlImageDownloader",
    "download_image",
]
