"""
Lint runner - builds the default check set for a repository and runs it
"""

import logging
from typing import Optional

from repo_linter.checks import (
    DirectoryExistsCheck,
    FileExistsCheck,
    FilePathContainsStringCheck,
    LicenseFileCheck,
    SearchForStringCheck,
    SecretsCheck,
)
from repo_linter.core.config import GlobalConfiguration
from repo_linter.core.status import CheckStatus
from repo_linter.errors import ToolFailureError
from repo_linter.filters import IgnoreMatcher
from repo_linter.linter import Linter
from repo_linter.repo import RepoContext
from repo_linter.secrets import TrufflehogScanner

logger = logging.getLogger(__name__)


LICENSE_TIP = (
    "Create a LICENSE file. Read more about licenses at https://choosealicense.com/ and "
    "https://docs.github.com/en/repositories/managing-your-repositorys-settings-and-features/"
    "customizing-your-repository/licensing-a-repository"
)

WORKFLOW_TIP = (
    "Create a GitHub Workflow directory. Read more about GitHub workflows at "
    "https://docs.github.com/en/actions/learn-github-actions"
)


class LintRunner:
    """Builds the default checks for a repository and runs the linter."""

    def __init__(self, config: Optional[GlobalConfiguration] = None):
        self.config = config or GlobalConfiguration()

    def build_linter(self, repo: RepoContext) -> Linter:
        config = self.config
        root = repo.path
        ignore_matcher = IgnoreMatcher(root, enabled=config.gitignore_enabled)
        scanner = TrufflehogScanner(config.trufflehog_path, timeout=config.secret_scan_timeout)

        linter = Linter(repo, config)

        linter.add_check(FileExistsCheck(
            "README*",
            root,
            name="README exists",
            description="Check if README exists",
            tip_to_fix="Create a README file.",
        ))

        linter.add_check(LicenseFileCheck(
            root,
            name="LICENSE file exists",
            description="Check if LICENSE exists",
            tip_to_fix=LICENSE_TIP,
        ))

        linter.add_check(DirectoryExistsCheck(
            ".github/workflows",
            root,
            required_globs=["*.yml", "*.yaml"],
            name="GitHub Workflow directory exists",
            description="Check if GitHub Workflow directory exists and contains workflows",
            tip_to_fix=WORKFLOW_TIP,
            status_when_failed=CheckStatus.YELLOW,
            status_when_empty=CheckStatus.YELLOW,
        ))

        linter.add_check(FilePathContainsStringCheck(
            "test",
            root,
            ignore_matcher,
            name="Tests exist",
            description="Check if any file path mentions tests",
            tip_to_fix="Add tests to the repository.",
            status_when_not_found=CheckStatus.YELLOW,
        ))

        for forbidden in config.forbidden_strings:
            linter.add_check(SearchForStringCheck(
                forbidden,
                root,
                ignore_matcher,
                invert_result=True,
                name=f"Forbidden string '{forbidden}' absent",
                description=f"Check that the string '{forbidden}' does not appear in the repository",
                tip_to_fix=f"Remove the string '{forbidden}' from the repository.",
            ))

        linter.add_check(SecretsCheck(
            root,
            scanner,
            ignore_matcher,
            name="Secrets check",
            description="Check if the repository contains any secrets",
            tip_to_fix="Remove the secrets found and rotate them.",
        ))

        return linter

    def execute(self, linter: Linter) -> int:
        """
        Run the linter and apply the override policy.

        Returns:
            the linter's status code

        Raises:
            ToolFailureError: a check was inconclusive; the override policy is
                still applied to the checks that finished
        """
        try:
            linter.run()
        except ToolFailureError:
            linter.apply_override_policy()
            raise
        linter.apply_override_policy()
        return linter.status_code()

    def run(self, repo: RepoContext) -> Linter:
        """Build and run the default checks for a repository."""
        linter = self.build_linter(repo)
        self.execute(linter)
        return linter
