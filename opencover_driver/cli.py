"""
OpenCover Driver CLI - Install OpenCover and run it for test projects.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from opencover_driver.config import DEFAULT_APP_DATA_FOLDER, ProjectConfigLoader, RunConfig
from opencover_driver.errors import OpenCoverError
from opencover_driver.install import HttpDownloader, InstallationManager
from opencover_driver.install.package import MINIMUM_VERSION
from opencover_driver.invocation import OpenCoverRunner, build_arguments
from opencover_driver.models import InstallOutcome
from opencover_driver.process import SubprocessExecutor

app = typer.Typer(
    name="opencover-driver",
    help="Install OpenCover and run it for .NET test projects",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        from opencover_driver import __version__

        console.print(f"[bold blue]OpenCover Driver[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-V", help="Verbose logging"),
) -> None:
    """OpenCover Driver - manage and run the OpenCover engine."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_config(config: str) -> RunConfig:
    try:
        return ProjectConfigLoader.from_yaml(config)
    except FileNotFoundError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from e
    except ValidationError as e:
        console.print(f"[red]Invalid configuration:[/red]\n{escape(str(e))}")
        raise typer.Exit(1) from e


def _display_outcome(outcome: InstallOutcome) -> None:
    if outcome.success:
        console.print(
            f"[green]✓[/green] OpenCover {outcome.version} ready"
            f" [dim](action: {outcome.action.value})[/dim]"
        )
    else:
        console.print(
            f"[red]✗ OpenCover {outcome.action.value} failed:[/red] {escape(outcome.error or '')}"
        )


@app.command()
def install(
    app_data: Path = typer.Option(
        DEFAULT_APP_DATA_FOLDER, "--app-data", "-d", help="Folder holding the engine"
    ),
    timeout: float = typer.Option(None, "--timeout", "-t", help="Download timeout in seconds"),
    purge: bool = typer.Option(
        False, "--purge", help="Remove a stale installation recursively before updating"
    ),
    format_: str = typer.Option("console", "--format", "-f", help="Output format: console, json"),
) -> None:
    """
    Install OpenCover, or upgrade it when the installed version is too old.
    """
    manager = InstallationManager(
        app_data,
        downloader=HttpDownloader(timeout_seconds=timeout),
        purge_on_update=purge,
    )

    if format_ != "json":
        console.print(
            Panel(
                f"[bold]Install root:[/bold] {manager.install_root}\n"
                f"[dim]Minimum version: {MINIMUM_VERSION}[/dim]",
                title="📦 OpenCover Install",
                border_style="blue",
            )
        )

    outcome = manager.ensure_installed()

    if format_ == "json":
        console.print(json.dumps(outcome.to_dict(), indent=2))
    else:
        _display_outcome(outcome)

    if not outcome.success:
        raise typer.Exit(1)


@app.command()
def version(
    app_data: Path = typer.Option(
        DEFAULT_APP_DATA_FOLDER, "--app-data", "-d", help="Folder holding the engine"
    ),
) -> None:
    """Show the installed OpenCover version."""
    manager = InstallationManager(app_data)
    detected = manager.detect_version()

    if detected is None:
        console.print("[yellow]OpenCover is not installed[/yellow]")
        raise typer.Exit(1)

    status = "[green]current[/green]" if detected >= MINIMUM_VERSION else "[yellow]stale[/yellow]"
    console.print(f"OpenCover {detected} ({status})")
    console.print(f"[dim]{manager.executable_path}[/dim]")


@app.command()
def args(
    config: str = typer.Argument(..., help="Path to run configuration YAML"),
) -> None:
    """
    Show the arguments OpenCover would be run with.

    Nothing is deleted or executed.
    """
    run_config = _load_config(config)
    arguments = build_arguments(run_config.project, run_config.engine.test_runner_path)

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", style="dim", width=3)
    table.add_column("Argument")
    for index, argument in enumerate(arguments, 1):
        table.add_row(str(index), escape(argument))

    console.print(table)


@app.command()
def run(
    config: str = typer.Argument(..., help="Path to run configuration YAML"),
    strict: bool = typer.Option(
        False, "--strict", help="Treat a failing engine run as an error"
    ),
) -> None:
    """
    Install OpenCover if needed and run coverage for the configured project.
    """
    run_config = _load_config(config)
    engine = run_config.engine
    project = run_config.project

    console.print(
        Panel(
            f"[bold]Project:[/bold] {project.project_name}\n"
            f"[dim]Output: {project.coverage_output_file}[/dim]",
            title="🧪 OpenCover Run",
            border_style="green",
        )
    )

    manager = InstallationManager(
        engine.app_data_folder,
        downloader=HttpDownloader(timeout_seconds=engine.download_timeout_seconds),
        purge_on_update=engine.purge_on_update,
    )
    outcome = manager.ensure_installed()
    if not outcome.success:
        _display_outcome(outcome)
        raise typer.Exit(1)

    runner = OpenCoverRunner(
        manager.installation,
        engine.test_runner_path,
        executor=SubprocessExecutor(timeout_seconds=engine.execution_timeout_seconds),
    )

    try:
        succeeded = asyncio.run(runner.run(project, throw_error=strict))
    except OpenCoverError as e:
        console.print(f"[red]✗ OpenCover run failed:[/red]\n{escape(str(e))}")
        raise typer.Exit(1) from e

    if not succeeded:
        console.print("[red]✗ OpenCover run failed[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Coverage written to {project.coverage_output_file}")


@app.command("sample-config")
def sample_config(
    output: str = typer.Option(None, "--output", "-o", help="Write the sample to a file"),
) -> None:
    """Print a sample run configuration."""
    sample = ProjectConfigLoader.generate_sample_config()
    if output:
        Path(output).write_text(sample)
        console.print(f"[green]✓[/green] Sample configuration written to {output}")
    else:
        console.print(sample, markup=False)


if __name__ == "__main__":
    app()
