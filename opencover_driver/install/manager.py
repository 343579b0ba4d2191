"""
InstallationManager - Keep a compatible OpenCover engine installed.

Lifecycle per process:

    Uninitialized -> scan -> NotInstalled | InstalledStale | InstalledCurrent
    NotInstalled   -> install -> InstalledCurrent | NotInstalled
    InstalledStale -> update  -> InstalledCurrent | indeterminate

Installation errors never escape the manager. They are logged and
reported through InstallOutcome so the host decides what to do next.
"""

import logging
import shutil
from pathlib import Path

from opencover_driver.errors import (
    InstallError,
    MetadataNotFoundError,
    UpdateError,
    VersionParseError,
)
from opencover_driver.install.package import (
    ARCHIVE_NAME,
    ENGINE_NAME,
    INSTALL_FOLDER_NAME,
    MINIMUM_VERSION,
    find_executable,
    package_url,
    read_package_version,
)
from opencover_driver.install.sources import (
    ArchiveExtractor,
    HttpDownloader,
    PackageDownloader,
    ZipExtractor,
)
from opencover_driver.models import (
    EngineInstallation,
    EngineVersion,
    InstallAction,
    InstallOutcome,
)

logger = logging.getLogger(__name__)


class InstallationManager:
    """
    Detect, install and upgrade the OpenCover engine under an app data folder.

    The most recent scan result is kept in ``installation``; it belongs to
    this instance and is handed to runners explicitly.
    """

    def __init__(
        self,
        app_data_folder: str | Path,
        downloader: PackageDownloader | None = None,
        extractor: ArchiveExtractor | None = None,
        minimum_version: EngineVersion = MINIMUM_VERSION,
        purge_on_update: bool = False,
    ):
        """
        Initialize the manager.

        Args:
            app_data_folder: Folder that holds the install root
            downloader: Package download collaborator (httpx by default)
            extractor: Archive extraction collaborator (zip by default)
            minimum_version: Oldest acceptable engine version; also the
                version that gets installed
            purge_on_update: Delete a stale install root recursively
                instead of only removing an empty directory
        """
        self.install_root = Path(app_data_folder) / INSTALL_FOLDER_NAME
        self.downloader = downloader or HttpDownloader()
        self.extractor = extractor or ZipExtractor()
        self.minimum_version = minimum_version
        self.purge_on_update = purge_on_update
        self.installation = EngineInstallation(install_root=self.install_root)

    @property
    def executable_path(self) -> Path | None:
        """Engine executable found by the last scan."""
        return self.installation.executable_path

    @property
    def version(self) -> EngineVersion | None:
        """Engine version found by the last scan."""
        return self.installation.version

    def _clear(self) -> None:
        self.installation = EngineInstallation(install_root=self.install_root)

    def detect_version(self) -> EngineVersion | None:
        """
        Scan the install root and refresh ``installation``.

        Returns:
            The installed version, or None when the engine is missing or
            its metadata cannot be read
        """
        title = f"{ENGINE_NAME} Get Info"

        executable = find_executable(self.install_root)
        if executable is None:
            logger.info("%s Not Installed", title)
            self._clear()
            return None

        try:
            version = read_package_version(self.install_root)
        except MetadataNotFoundError as e:
            logger.warning("%s Nuspec Not Found: %s", title, e)
            self._clear()
            return None
        except VersionParseError as e:
            logger.warning("%s %s\n%s", title, e, e.document or "")
            self._clear()
            return None

        self.installation = EngineInstallation(
            install_root=self.install_root,
            version=version,
            executable_path=executable,
        )
        return version

    def ensure_installed(self) -> InstallOutcome:
        """
        Make sure an engine at least as new as the minimum version exists.

        Installs when nothing is detected, updates when the detected
        version is too old, and does nothing otherwise.
        """
        self.install_root.mkdir(parents=True, exist_ok=True)
        version = self.detect_version()

        if version is None:
            return self.install()
        if version < self.minimum_version:
            return self.update()

        return InstallOutcome(action=InstallAction.NONE, success=True, version=version)

    def update(self) -> InstallOutcome:
        """Remove the install root and install again."""
        title = f"{ENGINE_NAME} Update"

        try:
            if self.install_root.exists():
                if self.purge_on_update:
                    shutil.rmtree(self.install_root)
                else:
                    self.install_root.rmdir()
        except OSError as e:
            error = UpdateError(f"Could not remove {self.install_root}: {e}")
            logger.error("%s Error %s", title, error)
            return InstallOutcome(
                action=InstallAction.UPDATE,
                success=False,
                version=self.installation.version,
                error=str(error),
            )

        outcome = self.install()
        return InstallOutcome(
            action=InstallAction.UPDATE,
            success=outcome.success,
            version=outcome.version,
            error=outcome.error,
        )

    def install(self) -> InstallOutcome:
        """
        Download and extract the minimum engine version into the install root.

        The minimum version is always the one installed, never "latest".
        """
        title = f"{ENGINE_NAME} Install"

        try:
            self.install_root.mkdir(parents=True, exist_ok=True)

            # download
            archive = self.install_root / ARCHIVE_NAME
            self.downloader.download(package_url(self.minimum_version), archive)

            # extract and cleanup
            self.extractor.extract(archive, self.install_root)
            archive.unlink()

            # process
            version = self.detect_version()
        except Exception as e:
            error = InstallError(str(e))
            logger.exception("%s Error %s", title, error)
            self._clear()
            return InstallOutcome(
                action=InstallAction.INSTALL,
                success=False,
                error=str(error),
            )

        logger.info("%s Installed version %s", title, version)

        if version is None:
            return InstallOutcome(
                action=InstallAction.INSTALL,
                success=False,
                error="No usable engine found after install",
            )

        return InstallOutcome(action=InstallAction.INSTALL, success=True, version=version)
