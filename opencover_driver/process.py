"""
External process execution.

The engine receives a single pre-quoted argument string. On Windows it is
passed through untouched; elsewhere it is split with POSIX shell rules.

POSIX splitting consumes the backslash of each escaped double quote, so a
configured value containing a double quote reaches the engine as a bare
quote on POSIX but still escaped on Windows.
"""

import asyncio
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Exit code and combined stdout/stderr of a finished process."""

    exit_code: int
    output: str


@runtime_checkable
class ProcessExecutor(Protocol):
    """Runs an executable to completion."""

    async def execute(
        self,
        executable: str | Path,
        arguments: str,
        working_directory: str | Path,
    ) -> ProcessResult | None:
        """
        Run executable with arguments in working_directory.

        Returns:
            ProcessResult, or None if the process could not be run
        """
        ...


def build_command(executable: str | Path, arguments: str) -> str | list[str]:
    """Build the command passed to subprocess for this platform."""
    if os.name == "nt":
        return f'"{executable}" {arguments}'
    return [str(executable), *shlex.split(arguments)]


class SubprocessExecutor:
    """Run processes with subprocess on a worker thread."""

    def __init__(self, timeout_seconds: float | None = None):
        """
        Initialize the executor.

        Args:
            timeout_seconds: Kill the process after this long; None waits
                indefinitely
        """
        self.timeout_seconds = timeout_seconds

    async def execute(
        self,
        executable: str | Path,
        arguments: str,
        working_directory: str | Path,
    ) -> ProcessResult | None:
        """Run the process and capture its output."""
        command = build_command(executable, arguments)

        try:
            completed = await asyncio.to_thread(
                subprocess.run,
                command,
                cwd=str(working_directory),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.timeout_seconds,
            )
        except subprocess.TimeoutExpired:
            logger.error("%s timed out after %ss", executable, self.timeout_seconds)
            return None
        except OSError as e:
            logger.error("Failed to start %s: %s", executable, e)
            return None

        return ProcessResult(exit_code=completed.returncode, output=completed.stdout or "")
