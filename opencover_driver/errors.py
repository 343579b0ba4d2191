"""
Exception hierarchy for engine installation and invocation.
"""


class OpenCoverError(Exception):
    """Base class for all OpenCover driver errors."""


class MetadataNotFoundError(OpenCoverError):
    """The package metadata file is missing from the install root."""


class VersionParseError(OpenCoverError):
    """The package metadata has no usable version."""

    def __init__(self, message: str, document: str | None = None):
        super().__init__(message)
        self.document = document


class InstallError(OpenCoverError):
    """Downloading or extracting the engine package failed."""


class UpdateError(OpenCoverError):
    """Replacing a stale installation failed."""


class EngineNotInstalledError(OpenCoverError):
    """No engine executable is available."""


class SymbolFileDeleteError(OpenCoverError):
    """The test assembly's symbol file could not be removed."""


class ExecutionError(OpenCoverError):
    """The engine exited with a non-zero code.

    The message is the captured engine output, unchanged.
    """

    def __init__(self, output: str, exit_code: int | None = None):
        super().__init__(output)
        self.output = output
        self.exit_code = exit_code
