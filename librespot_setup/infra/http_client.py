"""
HTTPS download client for librespot-setup.

Fetches the raspotify unit file, configuration file and event hook.
Any HTTP error status counts as a failure; nothing is written for a
failed download.
"""

import hashlib
import logging
from pathlib import Path
from typing import Union

import requests

logger = logging.getLogger(__name__)

USER_AGENT = "librespot-setup"


class DownloadError(Exception):
    """A remote file could not be fetched."""
    def __init__(self, url: str, reason: str):
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class HttpClient:
    """
    Client for plain HTTPS file downloads.

    Example:
        client = HttpClient()
        digest = client.download(url, Path("/tmp/librespot/conf"))
    """

    def __init__(self, timeout: int = 30):
        """
        Initialize HttpClient.

        Args:
            timeout: HTTP request timeout in seconds
        """
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': USER_AGENT,
        })

    def fetch(self, url: str) -> bytes:
        """
        GET url and return the body.

        Raises:
            DownloadError: Non-HTTPS URL, network error or error status
        """
        if not url.startswith("https://"):
            raise DownloadError(url, "only https:// URLs are allowed")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadError(url, str(e)) from e

        return response.content

    def download(self, url: str, destination: Union[str, Path]) -> str:
        """
        Fetch url and write the body to destination.

        Returns:
            sha256 hex digest of the written body
        """
        body = self.fetch(url)
        destination = Path(destination)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(body)
        except OSError as e:
            raise DownloadError(url, f"cannot write {destination}: {e}") from e

        logger.debug(f"Downloaded {url} to {destination} ({len(body)} bytes)")
        return hashlib.sha256(body).hexdigest()
