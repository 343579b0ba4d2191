"""
OpenCover engine installation.

Detect, download and upgrade the engine package.
"""

from opencover_driver.install.manager import InstallationManager
from opencover_driver.install.package import (
    ENGINE_NAME,
    EXECUTABLE_NAME,
    METADATA_FILE_NAME,
    MINIMUM_VERSION,
    package_url,
    parse_package_version,
)
from opencover_driver.install.sources import (
    ArchiveExtractor,
    HttpDownloader,
    PackageDownloader,
    ZipExtractor,
)

__all__ = [
    "ENGINE_NAME",
    "EXECUTABLE_NAME",
    "METADATA_FILE_NAME",
    "MINIMUM_VERSION",
    "ArchiveExtractor",
    "HttpDownloader",
    "InstallationManager",
    "PackageDownloader",
    "ZipExtractor",
    "package_url",
    "parse_package_version",
]
