"""
OpenCover package layout and metadata.

Knows where the engine lives inside an extracted NuGet package and how
to read the package version from its nuspec file.
"""

import xml.etree.ElementTree as ET
from pathlib import Path

from opencover_driver.errors import MetadataNotFoundError, VersionParseError
from opencover_driver.models import EngineVersion

ENGINE_NAME = "OpenCover"
EXECUTABLE_NAME = "OpenCover.Console.exe"
METADATA_FILE_NAME = "OpenCover.nuspec"
INSTALL_FOLDER_NAME = "openCover"
ARCHIVE_NAME = "bundle.zip"
PACKAGE_URL_TEMPLATE = "https://www.nuget.org/api/v2/package/OpenCover/{version}"

MINIMUM_VERSION = EngineVersion(4, 7, 922)


def package_url(version: EngineVersion) -> str:
    """Download URL for a specific package version."""
    return PACKAGE_URL_TEMPLATE.format(version=version)


def find_executable(install_root: Path) -> Path | None:
    """Find the engine executable anywhere under the install root."""
    if not install_root.is_dir():
        return None
    matches = sorted(install_root.rglob(EXECUTABLE_NAME))
    return matches[0] if matches else None


def find_metadata_file(install_root: Path) -> Path:
    """
    Locate the nuspec file in the top level of the install root.

    Raises:
        MetadataNotFoundError: If there is no nuspec file
    """
    path = install_root / METADATA_FILE_NAME
    if not path.is_file():
        msg = f"{METADATA_FILE_NAME} not found in {install_root}"
        raise MetadataNotFoundError(msg)
    return path


def _local_name(tag: str) -> str:
    # ElementTree spells namespaced tags as "{uri}local"
    return tag.rsplit("}", 1)[-1]


def parse_package_version(document: str | bytes) -> EngineVersion:
    """
    Extract the package version from nuspec XML.

    The version element is looked up by local name, case-insensitively,
    among the children of the root's first child (``<metadata>``).

    Args:
        document: The nuspec file contents

    Returns:
        The package version

    Raises:
        VersionParseError: If the XML is malformed or has no valid version
    """
    text = document.decode("utf-8", errors="replace") if isinstance(document, bytes) else document

    try:
        root = ET.fromstring(document)
    except (ET.ParseError, LookupError, ValueError) as e:
        raise VersionParseError(f"Failed to parse nuspec: {e}", text) from e

    metadata = next(iter(root), None)
    if metadata is None:
        raise VersionParseError("Failed to parse nuspec: no metadata element", text)

    version_element = next(
        (child for child in metadata if _local_name(child.tag).lower() == "version"),
        None,
    )
    if version_element is None:
        raise VersionParseError("Failed to parse nuspec: no version element", text)

    try:
        return EngineVersion.parse(version_element.text or "")
    except ValueError as e:
        raise VersionParseError(f"Failed to parse nuspec: {e}", text) from e


def read_package_version(install_root: Path) -> EngineVersion:
    """
    Read the installed package version from the install root.

    Raises:
        MetadataNotFoundError: If the nuspec file is missing
        VersionParseError: If the nuspec has no valid version
    """
    metadata_file = find_metadata_file(install_root)
    try:
        document = metadata_file.read_bytes()
    except OSError as e:
        raise VersionParseError(f"Failed to read nuspec: {e}") from e
    return parse_package_version(document)
