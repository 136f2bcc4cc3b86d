"""Check base class.

Every check has a name, a description, a tip to fix and a status. ``run()``
is the only entry point: it resets the check's own state, evaluates the
repository and stores the resulting status and detail lines.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from repo_linter.core.status import CheckStatus
from repo_linter.errors import CheckIOError


class Checker(ABC):
    """Base class for repository checks."""

    def __init__(
        self,
        name: str,
        description: str,
        tip_to_fix: str = "",
        status_when_failed: CheckStatus = CheckStatus.RED,
    ):
        """
        Args:
            name: short unique name, also used to look up override policy
            description: what the check verifies
            tip_to_fix: advice shown when the check is not green
            status_when_failed: status used when the rule is violated
        """
        self.name = name
        self.description = description
        self.tip_to_fix = tip_to_fix
        self.status_when_failed = status_when_failed
        self.status = CheckStatus.GRAY
        self.details: list[str] = []

    def run(self) -> None:
        """
        Run the check and set its status.

        Raises:
            CheckIOError: the repository could not be read; the status stays GRAY
        """
        self.status = CheckStatus.GRAY
        self.details = []
        self.reset()
        try:
            status = self._evaluate()
        except OSError as e:
            raise CheckIOError(f"Cannot read repository: {e}") from e
        if status is CheckStatus.GRAY:
            raise RuntimeError(f"Check '{self.name}' did not produce a status")
        self.status = status

    def reset(self) -> None:
        """Clear variant state before a run. Subclasses with found-item lists override this."""
        pass

    @abstractmethod
    def _evaluate(self) -> CheckStatus:
        """Evaluate the rule, append detail lines and return the resulting status."""
        pass

    def mark_inconclusive(self, reason: str) -> None:
        """Record that the check could not reach a verdict."""
        self.status = CheckStatus.GRAY
        self.details.append(f"Inconclusive: {reason}")

    def allow_failure(self) -> bool:
        """Downgrade a red result to yellow. Returns True if the status changed."""
        if self.status is not CheckStatus.RED:
            return False
        self.status = CheckStatus.YELLOW
        self.details.append("Allowed to fail: status downgraded from red to yellow by configuration.")
        return True

    def render_lines(self) -> list[str]:
        """Report lines: icon and name, plus description, tip and details when not green."""
        header = f"{self.status.icon}   {self.name}"
        if self.status is CheckStatus.GREEN:
            return [header]

        lines = [header, f"Description: {self.description}"]
        if self.tip_to_fix:
            lines.append(f"Tip to fix: {self.tip_to_fix}")
        lines.extend(self.details)
        return lines

    def render(self) -> str:
        return "\n".join(self.render_lines())

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, status={self.status.name})"


def relative_posix(path: Path, root: Path) -> str:
    """Path relative to the repository root, with forward slashes."""
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def is_empty_file(path: Path) -> bool:
    """True if the file has zero bytes. A file that vanished counts as empty."""
    try:
        return path.stat().st_size == 0
    except FileNotFoundError:
        return True


def format_file_list(paths: list[str], limit: int | None = None) -> list[str]:
    shown = paths if limit is None else paths[:limit]
    lines = [f"  - {p}" for p in shown]
    if limit is not None and len(paths) > limit:
        lines.append(f"  ... and {len(paths) - limit} more")
    return lines
