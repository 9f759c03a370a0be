"""Exception hierarchy for project scaffolding.

Every error is fatal: the composer stops at the first one and the CLI turns it
into a red message plus a non-zero exit code.  Nothing is rolled back, so a
failure half-way through leaves the partially generated tree on disk.
"""

from __future__ import annotations

from pathlib import Path


class ScaffoldError(Exception):
    """Base class for all scaffolding failures."""


class InvalidArgument(ScaffoldError):
    """Raised for a missing or malformed command-line value."""


class DirectoryExists(ScaffoldError):
    """Raised when the target project directory is already present."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        super().__init__(f"Directory already exists: {self.path}")


class ExternalToolFailure(ScaffoldError):
    """Raised when ``git`` or ``dvc`` exits non-zero, is missing, or times out."""

    def __init__(self, command: list[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(
            f"Command failed with exit code {returncode}: {' '.join(self.command)}{detail}"
        )


class IOFailure(ScaffoldError):
    """Raised when a file or directory cannot be written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Could not write {self.path}: {reason}")
