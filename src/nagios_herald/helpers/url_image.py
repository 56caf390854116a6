"""Download images over HTTP."""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def download_image(
    url: str,
    path: str | Path,
    *,
    client: httpx.Client | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bool:
    """Download an image and write it to a local file.

    Args:
        url: URL of the image.
        path: Destination file path.
        client: HTTP client to use (a short-lived one is created if omitted).
        timeout: Request timeout in seconds when no client is given.

    Returns:
        True if the image was written, False otherwise.
    """
    try:
        if client is None:
            with httpx.Client(timeout=timeout, follow_redirects=True) as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url)
    except httpx.HTTPError as e:
        logger.warning(f"Image download failed for {url}: {e}")
        return False

    if response.status_code != 200:
        logger.warning(f"Image download failed for {url}: HTTP {response.status_code}")
        return False
    if not response.content:
        logger.warning(f"Image download returned an empty body for {url}")
        return False

    try:
        Path(path).write_bytes(response.content)
    except OSError as e:
        logger.warning(f"Could not write image to {path}: {e}")
        return False

    logger.debug(f"Downloaded {url} to {path} ({len(response.content)} bytes)")
    return True


class UrlImageDownloader:
    """Downloads images with a shared HTTP client owned by the caller."""

    def __init__(self, client: httpx.Client) -> None:
        self.client = client

    def __call__(self, url: str, path: str | Path) -> bool:
        return download_image(url, path, client=self.client)
