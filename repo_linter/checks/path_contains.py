"""Check file paths for a substring."""

from pathlib import Path
from typing import Optional

from repo_linter.checks.base import Checker, format_file_list, relative_posix
from repo_linter.core.status import CheckStatus
from repo_linter.filters import IgnoreMatcher, iter_repository_files


class FilePathContainsStringCheck(Checker):
    """Look for a string in the relative paths of all non-ignored files."""

    def __init__(
        self,
        search_string: str,
        repo_path: Path,
        ignore_matcher: Optional[IgnoreMatcher] = None,
        *,
        status_when_found: CheckStatus = CheckStatus.GREEN,
        status_when_not_found: CheckStatus = CheckStatus.RED,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.search_string = search_string
        self.repo_path = repo_path
        self.ignore_matcher = ignore_matcher
        self.status_when_found = status_when_found
        self.status_when_not_found = status_when_not_found
        self.found_paths: list[str] = []

    def reset(self) -> None:
        self.found_paths = []

    def _evaluate(self) -> CheckStatus:
        relatives = (relative_posix(p, self.repo_path) for p in iter_repository_files(self.repo_path))
        candidates = [Path(r) for r in relatives if self.search_string in r]
        if self.ignore_matcher is not None:
            candidates = self.ignore_matcher.filter_paths(candidates)
        self.found_paths = [p.as_posix() for p in candidates]

        if self.found_paths:
            self.details.append(f"Found '{self.search_string}' in paths:")
            self.details.extend(format_file_list(self.found_paths))
            return self.status_when_found

        self.details.append(f"No file path contains '{self.search_string}'.")
        return self.status_when_not_found
