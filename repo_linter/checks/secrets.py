"""Check the repository for leaked secrets."""

import logging
from pathlib import Path
from typing import Optional

from repo_linter.checks.base import Checker
from repo_linter.core.status import CheckStatus
from repo_linter.filters import IgnoreMatcher
from repo_linter.secrets import SecretFinding, TrufflehogScanner

logger = logging.getLogger(__name__)


class SecretsCheck(Checker):
    """
    Scan for secrets with trufflehog.

    Findings in ignored files are dropped. When every finding was dropped the
    check is yellow, since those secrets would not be committed; any remaining
    finding makes it ``status_when_failed``.

    A scanner failure raises SecretScanError instead of producing a status.
    """

    def __init__(
        self,
        repo_path: Path,
        scanner: Optional[TrufflehogScanner] = None,
        ignore_matcher: Optional[IgnoreMatcher] = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.repo_path = repo_path
        self.scanner = scanner or TrufflehogScanner()
        self.ignore_matcher = ignore_matcher
        self.found_secrets: list[SecretFinding] = []
        self.ignored_secrets: list[SecretFinding] = []

    def reset(self) -> None:
        self.found_secrets = []
        self.ignored_secrets = []

    def _evaluate(self) -> CheckStatus:
        result = self.scanner.scan(self.repo_path)

        if result.status is CheckStatus.GREEN:
            return CheckStatus.GREEN

        for finding in result.findings:
            if self.ignore_matcher is not None and self.ignore_matcher.is_ignored(finding.file):
                self.ignored_secrets.append(finding)
            else:
                self.found_secrets.append(finding)

        if self.found_secrets:
            self.details.append("Secrets found:")
            self.details.extend(f"  {finding}" for finding in self.found_secrets)
            if self.ignored_secrets:
                self.details.append(f"{len(self.ignored_secrets)} more secrets found in ignored files.")
            return self.status_when_failed

        if self.ignored_secrets:
            self.details.append(
                "Caution: secrets found only in ignored files. "
                "They will not be committed, but make sure they stay out of the repository:"
            )
            self.details.extend(f"  {finding}" for finding in self.ignored_secrets)
            return CheckStatus.YELLOW

        logger.warning("Secret scanner reported secrets but none of its output could be parsed")
        self.details.append("The secret scanner reported secrets, but no findings could be parsed.")
        return self.status_when_failed
