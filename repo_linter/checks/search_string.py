"""Search the repository for a literal string."""

import logging
from pathlib import Path
from typing import Optional

from repo_linter.checks.base import Checker, format_file_list, relative_posix
from repo_linter.core.status import CheckStatus
from repo_linter.filters import IgnoreMatcher, iter_repository_files

logger = logging.getLogger(__name__)


# Files are read in chunks of this size instead of loading them whole
CHUNK_SIZE = 64 * 1024

# Maximum number of file names listed in the report
MAX_LISTED_FILES = 50


def file_contains(path: Path, needle: bytes, chunk_size: int = CHUNK_SIZE) -> bool:
    """
    Check whether a file contains ``needle`` without reading it into memory.

    Consecutive chunks overlap by ``len(needle) - 1`` bytes so a match that
    straddles a chunk boundary is still found.
    """
    if not needle:
        return True
    overlap = len(needle) - 1
    tail = b""
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                return False
            window = tail + chunk
            if needle in window:
                return True
            tail = window[-overlap:] if overlap else b""


class SearchForStringCheck(Checker):
    """
    Search every file for a string.

    Green when the string is found, ``status_when_failed`` otherwise. With
    ``invert_result`` the mapping flips, which asserts that a forbidden string
    is absent. Hits in ignored files don't count but are reported separately.
    """

    def __init__(
        self,
        search_string: str,
        repo_path: Path,
        ignore_matcher: Optional[IgnoreMatcher] = None,
        *,
        invert_result: bool = False,
        chunk_size: int = CHUNK_SIZE,
        **kwargs,
    ):
        super().__init__(**kwargs)
        if not search_string:
            raise ValueError("search_string must not be empty")
        self.search_string = search_string
        self.repo_path = repo_path
        self.ignore_matcher = ignore_matcher
        self.invert_result = invert_result
        self.chunk_size = chunk_size
        self.found_files: list[str] = []
        self.ignored_files: list[str] = []

    def reset(self) -> None:
        self.found_files = []
        self.ignored_files = []

    def _evaluate(self) -> CheckStatus:
        needle = self.search_string.encode("utf-8")

        for path in iter_repository_files(self.repo_path):
            relative = relative_posix(path, self.repo_path)
            try:
                hit = file_contains(path, needle, self.chunk_size)
            except OSError as e:
                logger.warning("Cannot read %s: %s", path, e)
                continue
            if not hit:
                continue
            if self.ignore_matcher is not None and self.ignore_matcher.is_ignored(relative):
                self.ignored_files.append(relative)
            else:
                self.found_files.append(relative)

        found = bool(self.found_files)
        if found:
            self.details.append(f"Search string '{self.search_string}' found in the following files:")
            self.details.extend(format_file_list(self.found_files, MAX_LISTED_FILES))
        elif self.ignored_files:
            self.details.append(
                f"Search string '{self.search_string}' only found in ignored files:"
            )
            self.details.extend(format_file_list(self.ignored_files, MAX_LISTED_FILES))
        else:
            self.details.append(f"Search string '{self.search_string}' not found in any file.")

        if self.invert_result:
            found = not found
        return CheckStatus.GREEN if found else self.status_when_failed
