"""
Configuration loading for OpenCover runs.

A run configuration is a YAML document with an ``engine`` section
(DriverSettings) and a ``project`` section (CoverageProject).
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from opencover_driver.models import CoverageProject

DEFAULT_APP_DATA_FOLDER = Path.home() / ".opencover-driver"


class DriverSettings(BaseModel):
    """Where the engine lives and how long external work may take."""

    app_data_folder: Path = DEFAULT_APP_DATA_FOLDER
    test_runner_path: str = "vstest.console.exe"
    download_timeout_seconds: float | None = Field(default=None, gt=0)
    execution_timeout_seconds: float | None = Field(default=None, gt=0)
    purge_on_update: bool = False


class RunConfig(BaseModel):
    """Engine settings plus the project to cover."""

    engine: DriverSettings = Field(default_factory=DriverSettings)
    project: CoverageProject


class ProjectConfigLoader:
    """Load run configurations from YAML files."""

    @classmethod
    def from_yaml(cls, path: str | Path) -> RunConfig:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            RunConfig loaded from file

        Raises:
            FileNotFoundError: If the file does not exist
            pydantic.ValidationError: If the document is invalid
        """
        path = Path(path)
        if not path.exists():
            msg = f"Configuration file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = yaml.safe_load(f)

        return cls.from_dict(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """Create configuration from a dictionary."""
        return RunConfig.model_validate(data)

    @classmethod
    def generate_sample_config(cls) -> str:
        """
        Generate a sample YAML configuration file.

        Returns:
            YAML string for sample configuration
        """
        sample = {
            "engine": {
                "app_data_folder": str(DEFAULT_APP_DATA_FOLDER),
                "test_runner_path": "C:/tools/vstest/vstest.console.exe",
                "download_timeout_seconds": 120.0,
                "execution_timeout_seconds": None,
                "purge_on_update": False,
            },
            "project": {
                "project_name": "MyApp.Tests",
                "test_dll_file": "C:/src/MyApp.Tests/bin/Debug/MyApp.Tests.dll",
                "project_output_folder": "C:/src/MyApp.Tests/bin/Debug",
                "coverage_output_file": "C:/src/MyApp.Tests/coverage/opencover.xml",
                "run_settings_file": None,
                "is_64_bit": True,
                "settings": {
                    "include": ["[MyApp]*"],
                    "exclude": ["[MyApp]MyApp.Generated.*"],
                    "exclude_by_file": ["**/Migrations/*.cs"],
                    "exclude_by_attribute": ["GeneratedCode"],
                    "include_test_assembly": False,
                },
                "referenced_projects": [
                    {"assembly_name": "MyApp.Contracts", "exclude_from_code_coverage": True},
                ],
            },
        }
        return yaml.dump(sample, default_flow_style=False, sort_keys=False)
