"""
Argument construction for OpenCover.Console.

The engine's parser is order-sensitive for some switches, so the order
produced by build_arguments is part of its contract.
"""

from pathlib import Path

from opencover_driver.errors import SymbolFileDeleteError
from opencover_driver.invocation.filters import (
    DEFAULT_FILTER,
    build_excluded_attributes,
    build_excluded_files,
    build_filters,
    format_excluded_attributes,
)
from opencover_driver.models import CoverageProject


def build_arguments(project: CoverageProject, test_runner_path: str | Path) -> list[str]:
    """
    Build the engine arguments for a project.

    Pure: the project is not modified and no files are touched. See
    remove_test_symbols for the one side effect a run needs.

    Args:
        project: The coverage project
        test_runner_path: Test runner executable the engine launches

    Returns:
        Ordered argument tokens
    """
    register = "path64" if project.is_64_bit else "path32"

    arguments = [
        "-mergebyhash",
        "-hideskipped:all",
        f"-register:{register}",
        f'"-target:{test_runner_path}"',
    ]

    filters = build_filters(project.settings, project.referenced_projects)
    if filters != [DEFAULT_FILTER]:
        arguments.append(f'"-filter:{" ".join(filters)}"')

    excluded_files = build_excluded_files(project.settings)
    if excluded_files:
        arguments.append(f'"-excludebyfile:{";".join(excluded_files)}"')

    excluded_attributes = build_excluded_attributes(project.settings)
    if excluded_attributes:
        arguments.append(
            f'"-excludebyattribute:{format_excluded_attributes(excluded_attributes)}"'
        )

    target_args = f'\\"{project.test_dll_file}\\"'
    if project.run_settings_file and project.run_settings_file.strip():
        target_args += f' /Settings:\\"{project.run_settings_file}\\"'
    arguments.append(f'"-targetargs:{target_args}"')

    arguments.append(f'"-output:{project.coverage_output_file}"')

    return arguments


def symbols_file_for(project: CoverageProject) -> Path:
    """Path of the test assembly's .pdb in the project output folder."""
    return Path(project.project_output_folder) / f"{Path(project.test_dll_file).stem}.pdb"


def remove_test_symbols(project: CoverageProject) -> Path | None:
    """
    Delete the test assembly's symbol file when the test assembly is excluded.

    OpenCover skips assemblies it has no symbols for. Filtering the test
    assembly out with ``-[name]*`` stops instrumentation entirely, so this
    is the only working way to keep it out of the results.

    Returns:
        The deleted path, or None when the test assembly is included

    Raises:
        SymbolFileDeleteError: If the file exists but cannot be deleted
    """
    if project.settings.include_test_assembly:
        return None

    pdb_file = symbols_file_for(project)
    try:
        pdb_file.unlink(missing_ok=True)
    except OSError as e:
        msg = f"Could not delete {pdb_file}: {e}"
        raise SymbolFileDeleteError(msg) from e

    return pdb_file
