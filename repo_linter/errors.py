"""
Exception hierarchy.

Rule violations are never raised; they are reported as a check status.
Everything here means the linter could not reach a verdict.
"""

from typing import Iterable


class RepoLinterError(Exception):
    """Base class for all repo-linter errors."""
    pass


class ToolError(RepoLinterError):
    """An external tool or resource failed, so the verdict is unknown."""
    pass


class SecretScanError(ToolError):
    """The secret scanner could not start, timed out or exited unexpectedly."""

    def __init__(self, message: str, exit_code: int | None = None, stderr: str = ""):
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


class IgnoreSourceError(ToolError):
    """An ignore file exists but could not be read."""
    pass


class CheckIOError(ToolError):
    """A check could not read part of the repository."""
    pass


class ToolFailureError(ToolError):
    """One or more checks were inconclusive because a tool failed."""

    def __init__(self, failures: Iterable[tuple[str, ToolError]]):
        self.failures = list(failures)
        names = ", ".join(name for name, _ in self.failures)
        super().__init__(f"Inconclusive checks: {names}")


class RepositoryError(RepoLinterError):
    """The repository could not be loaded."""
    pass


class CloneError(RepositoryError):
    """Cloning a remote repository failed."""
    pass


class CloneTimeoutError(CloneError):
    pass


class CloneNetworkError(CloneError):
    pass


class CloneAuthError(CloneError):
    pass


class ConfigError(RepoLinterError):
    """The configuration file is invalid."""
    pass


class LinterStateError(RepoLinterError):
    """Linter operations were called in the wrong order."""
    pass
