"""
Linter - runs checks against one repository snapshot and aggregates the verdict

Flow:
1. add_check() registers checks (names must be unique)
2. run() executes them on a thread pool and waits for all of them
3. apply_override_policy() downgrades red checks that are allowed to fail
4. status_code() / render_report() produce the verdict and the report
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from repo_linter.checks.base import Checker
from repo_linter.core.config import CheckerConfiguration, GlobalConfiguration
from repo_linter.core.exit_codes import ExitCode
from repo_linter.core.status import CheckStatus
from repo_linter.errors import LinterStateError, ToolError, ToolFailureError
from repo_linter.repo import RepoContext

logger = logging.getLogger(__name__)


def truncate_lines(lines: list[str], threshold: int, head: int, tail: int) -> list[str]:
    """
    Keep the first ``head`` and last ``tail`` lines when there are more than
    ``threshold`` lines, with a marker in between.
    """
    if len(lines) <= threshold or head + tail >= len(lines):
        return list(lines)
    hidden = len(lines) - head - tail
    kept_tail = lines[len(lines) - tail:] if tail else []
    return [*lines[:head], f"... ({hidden} lines truncated) ...", *kept_tail]


class Linter:
    """Runs a set of checks against a repository."""

    def __init__(self, repo: RepoContext, config: Optional[GlobalConfiguration] = None):
        self.repo = repo
        self.config = config or GlobalConfiguration()
        self._checks: list[Checker] = []
        self._has_run = False

    @property
    def checks(self) -> list[Checker]:
        """Registered checks, in registration order."""
        return list(self._checks)

    def add_check(self, check: Checker) -> None:
        """
        Register a check.

        Raises:
            ValueError: a check with the same name is already registered
        """
        if any(c.name == check.name for c in self._checks):
            raise ValueError(f"Duplicate check name: {check.name}")
        self._checks.append(check)
        self._has_run = False

    def get_check(self, name: str) -> Optional[Checker]:
        for check in self._checks:
            if check.name == name:
                return check
        return None

    # ------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------

    def _run_one(self, check: Checker) -> Optional[ToolError]:
        logger.debug("Running check: %s", check.name)
        try:
            check.run()
        except ToolError as e:
            logger.error("Check '%s' is inconclusive: %s", check.name, e)
            check.mark_inconclusive(str(e))
            return e
        logger.debug("Check '%s' finished: %s", check.name, check.status.value)
        return None

    def run(self) -> None:
        """
        Run every registered check and wait for all of them.

        Checks are independent, so they run on a pool of ``config.jobs``
        threads. Results don't depend on completion order.

        Raises:
            ToolFailureError: a check could not reach a verdict because an
                external tool failed; the other checks still ran
        """
        jobs = max(1, min(self.config.jobs, len(self._checks) or 1))
        logger.info("Running %d checks on %s with %d workers", len(self._checks), self.repo.name, jobs)

        if jobs == 1:
            outcomes = [self._run_one(check) for check in self._checks]
        else:
            with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="check") as executor:
                futures = [executor.submit(self._run_one, check) for check in self._checks]
                # unexpected exceptions propagate once the pool has drained
                outcomes = [future.result() for future in futures]

        self._has_run = True

        failures = [
            (check.name, error)
            for check, error in zip(self._checks, outcomes)
            if error is not None
        ]
        if failures:
            raise ToolFailureError(failures)

    # ------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------

    def _require_run(self, operation: str) -> None:
        if not self._has_run:
            raise LinterStateError(f"{operation}() called before run()")

    def apply_override_policy(self, entries: Optional[Iterable[CheckerConfiguration]] = None) -> list[str]:
        """
        Downgrade red checks that are allowed to fail to yellow.

        Args:
            entries: override policy, defaults to ``config.checks``

        Returns:
            names of the checks that were downgraded
        """
        self._require_run("apply_override_policy")
        if entries is None:
            entries = self.config.checks

        downgraded = []
        for entry in entries:
            check = self.get_check(entry.name)
            if check is None:
                logger.warning("Override policy names unknown check: %s", entry.name)
                continue
            if entry.allowed_to_fail and check.allow_failure():
                logger.info("Check '%s' is allowed to fail, downgraded to yellow", check.name)
                downgraded.append(check.name)
        return downgraded

    def status_code(self) -> int:
        """100 when any check is red after the override policy, 0 otherwise."""
        self._require_run("status_code")
        if any(check.status.is_failing for check in self._checks):
            return int(ExitCode.CHECKS_FAILED)
        return int(ExitCode.SUCCESS)

    def summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in CheckStatus}
        for check in self._checks:
            counts[check.status.value] += 1
        return counts

    # ------------------------------------------------------------
    # Report
    # ------------------------------------------------------------

    def render_check(self, check: Checker) -> list[str]:
        """Report lines for one check, truncated when configured."""
        lines = check.render_lines()
        if not self.config.truncate_output:
            return lines
        return truncate_lines(
            lines,
            self.config.truncate_threshold,
            self.config.truncate_head,
            self.config.truncate_tail,
        )

    def header_lines(self) -> list[str]:
        lines = [f"Report for {self.repo.name}"]
        if self.repo.source_url:
            lines.append(f"Source: {self.repo.source_url}")
        lines.append(f"Commits: {self.repo.commit_count}")
        if self.repo.contributors:
            lines.append("Contributors:")
            lines.extend(f"  {c}" for c in self.repo.contributors)
        return lines

    def render_report(self) -> str:
        """Plain text report, checks in registration order."""
        blocks = ["\n".join(self.header_lines())]
        blocks.extend("\n".join(self.render_check(check)) for check in self._checks)
        return "\n\n".join(blocks) + "\n"
