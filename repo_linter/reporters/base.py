"""
Reporter interface
"""

from typing import Optional, Protocol

from repo_linter.linter import Linter


class Reporter(Protocol):
    """Reporter protocol"""

    def report(self, linter: Linter, error: Optional[str] = None) -> None:
        """Write the report for a finished lint run."""
        ...

    def report_failure(self, target: str, error: str) -> None:
        """Report a target that could not be linted at all."""
        ...
