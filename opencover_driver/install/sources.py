"""
Download and extraction collaborators used during installation.
"""

import zipfile
from pathlib import Path
from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class PackageDownloader(Protocol):
    """Fetches a package archive to a local file."""

    def download(self, url: str, destination: Path) -> None:
        """
        Stream the resource at url into destination.

        Raises:
            httpx.HTTPError: If the request fails
            OSError: If the file cannot be written
        """
        ...


@runtime_checkable
class ArchiveExtractor(Protocol):
    """Unpacks a package archive."""

    def extract(self, archive: Path, destination: Path) -> None:
        """Extract every member of archive into destination."""
        ...


class HttpDownloader:
    """
    Download packages over HTTP(S) with httpx.

    NuGet answers package URLs with a redirect to blob storage, so
    redirects are followed.
    """

    def __init__(
        self,
        timeout_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ):
        """
        Initialize the downloader.

        Args:
            timeout_seconds: Request timeout; None waits indefinitely
            transport: Optional httpx transport (used in tests)
        """
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def download(self, url: str, destination: Path) -> None:
        """Stream url into destination."""
        with httpx.Client(
            timeout=self.timeout_seconds,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            with client.stream("GET", url) as response:
                response.raise_for_status()
                with destination.open("wb") as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)


class ZipExtractor:
    """Extract zip archives (NuGet packages are zip files)."""

    def extract(self, archive: Path, destination: Path) -> None:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(destination)
