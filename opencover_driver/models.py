"""
Data models for engine installation and coverage projects.

Project descriptors are frozen Pydantic models so that building an
invocation can never change them. Installation state is a plain
dataclass owned by the InstallationManager.
"""

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+){1,3}$")


# =============================================================================
# Engine Versions
# =============================================================================


@dataclass(frozen=True, order=True)
class EngineVersion:
    """
    Dotted numeric version with two to four components.

    Missing build/revision components are stored as -1, so ``4.7`` sorts
    before ``4.7.0``.
    """

    major: int
    minor: int
    build: int = -1
    revision: int = -1

    @classmethod
    def parse(cls, text: str) -> "EngineVersion":
        """
        Parse a version string such as ``4.7.922``.

        Args:
            text: Version text; surrounding whitespace is ignored

        Returns:
            Parsed EngineVersion

        Raises:
            ValueError: If the text is not a 2-4 component numeric version
        """
        candidate = (text or "").strip()
        if not _VERSION_PATTERN.match(candidate):
            msg = f"Invalid version: {text!r}"
            raise ValueError(msg)

        parts = [int(p) for p in candidate.split(".")]
        return cls(*parts)

    def __str__(self) -> str:
        parts = [self.major, self.minor, self.build, self.revision]
        return ".".join(str(p) for p in parts if p >= 0)


@dataclass
class EngineInstallation:
    """What the last scan of the install root found."""

    install_root: Path
    version: EngineVersion | None = None
    executable_path: Path | None = None

    def __post_init__(self) -> None:
        if (self.version is None) != (self.executable_path is None):
            msg = "version and executable_path must be set together"
            raise ValueError(msg)

    @property
    def is_installed(self) -> bool:
        """Check if a usable engine was found."""
        return self.executable_path is not None


class InstallAction(str, Enum):
    """What ensure_installed decided to do."""

    NONE = "none"
    INSTALL = "install"
    UPDATE = "update"


@dataclass
class InstallOutcome:
    """Result of an install, update or ensure_installed call."""

    action: InstallAction
    success: bool
    version: EngineVersion | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary."""
        return {
            "action": self.action.value,
            "success": self.success,
            "version": str(self.version) if self.version else None,
            "error": self.error,
        }


# =============================================================================
# Coverage Projects
# =============================================================================


class FilterSettings(BaseModel):
    """Include/exclude settings for one coverage run."""

    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    exclude_by_file: list[str] = Field(default_factory=list)
    exclude_by_attribute: list[str] = Field(default_factory=list)
    include_test_assembly: bool = True

    model_config = ConfigDict(frozen=True)


class ReferencedProject(BaseModel):
    """A project referenced by the test project."""

    assembly_name: str
    exclude_from_code_coverage: bool = False

    model_config = ConfigDict(frozen=True)


class CoverageProject(BaseModel):
    """Everything needed to run the engine for one test project."""

    project_name: str
    test_dll_file: str
    project_output_folder: str
    coverage_output_file: str
    run_settings_file: str | None = None
    is_64_bit: bool = False
    settings: FilterSettings = Field(default_factory=FilterSettings)
    referenced_projects: list[ReferencedProject] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
