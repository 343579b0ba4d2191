"""
OpenCoverRunner - Run OpenCover for a coverage project.

Builds the argument list, runs the engine through a ProcessExecutor and
classifies the result. Each run is independent; the only shared input is
the EngineInstallation passed in at construction.
"""

import logging
from pathlib import Path

from opencover_driver.errors import EngineNotInstalledError, ExecutionError
from opencover_driver.install.package import ENGINE_NAME
from opencover_driver.invocation.arguments import build_arguments, remove_test_symbols
from opencover_driver.models import CoverageProject, EngineInstallation
from opencover_driver.process import ProcessExecutor, SubprocessExecutor

logger = logging.getLogger(__name__)


class OpenCoverRunner:
    """Run the engine for coverage projects."""

    def __init__(
        self,
        installation: EngineInstallation,
        test_runner_path: str | Path,
        executor: ProcessExecutor | None = None,
    ):
        """
        Initialize the runner.

        Args:
            installation: Installation found by the InstallationManager
            test_runner_path: Test runner executable the engine launches
            executor: Process collaborator (subprocess by default)
        """
        self.installation = installation
        self.test_runner_path = test_runner_path
        self.executor = executor or SubprocessExecutor()

    async def run(self, project: CoverageProject, throw_error: bool = False) -> bool:
        """
        Run coverage for a project.

        Args:
            project: The coverage project
            throw_error: Raise instead of returning False when the engine
                reports failure

        Returns:
            True if the engine exited with code 0

        Raises:
            ExecutionError: On a non-zero exit when throw_error is set; the
                message is the engine output
            EngineNotInstalledError: If no engine is installed and
                throw_error is set
            SymbolFileDeleteError: If the test symbols cannot be removed
        """
        title = f"{ENGINE_NAME} Run ({project.project_name})"

        executable = self.installation.executable_path
        if executable is None:
            error = EngineNotInstalledError(f"{ENGINE_NAME} is not installed")
            if throw_error:
                raise error
            logger.error("%s Error %s", title, error)
            return False

        remove_test_symbols(project)

        arguments = build_arguments(project, self.test_runner_path)
        logger.info("%s Arguments\n%s", title, "\n".join(arguments))

        result = await self.executor.execute(
            executable,
            " ".join(arguments),
            project.project_output_folder,
        )

        if result is None:
            logger.error("%s Error no result from process", title)
            return False

        if result.exit_code != 0:
            if throw_error:
                raise ExecutionError(result.output, exit_code=result.exit_code)

            logger.error("%s Error\n%s", title, result.output)
            return False

        logger.info("%s\n%s", title, result.output)
        return True
