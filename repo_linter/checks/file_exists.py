"""Check that a file exists in the repository."""

import fnmatch
import os
from pathlib import Path, PurePosixPath

from repo_linter.checks.base import Checker, format_file_list, is_empty_file, relative_posix
from repo_linter.core.status import CheckStatus
from repo_linter.filters import iter_repository_files


class FileExistsCheck(Checker):
    """
    Check that exactly one file matches a pattern.

    The pattern is relative to the repository root. Its file name component
    may contain a ``*`` wildcard and is matched case-insensitively.

    - no match: ``status_when_failed``
    - one match: green, or ``status_when_empty`` when the file has zero bytes
    - several matches: yellow
    """

    def __init__(
        self,
        pattern: str,
        repo_path: Path,
        *,
        status_when_empty: CheckStatus = CheckStatus.GREEN,
        recursive: bool = False,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.pattern = pattern
        self.repo_path = repo_path
        self.status_when_empty = status_when_empty
        self.recursive = recursive
        self.matches: list[Path] = []

    def reset(self) -> None:
        self.matches = []

    def _split_pattern(self) -> tuple[Path, str]:
        posix = PurePosixPath(self.pattern.replace("\\", "/"))
        directory = self.repo_path.joinpath(*posix.parent.parts) if posix.parent.parts else self.repo_path
        return directory, posix.name

    def _find_matches(self, directory: Path, file_pattern: str) -> list[Path]:
        wanted = file_pattern.lower()
        if self.recursive:
            candidates = iter_repository_files(directory)
        else:
            candidates = (
                directory / name
                for name in sorted(os.listdir(directory))
                if (directory / name).is_file()
            )
        return [p for p in candidates if fnmatch.fnmatchcase(p.name.lower(), wanted)]

    def _evaluate(self) -> CheckStatus:
        directory, file_pattern = self._split_pattern()

        if not directory.is_dir():
            self.details.append(f"Directory {relative_posix(directory, self.repo_path)} does not exist.")
            return self.status_when_failed

        self.matches = self._find_matches(directory, file_pattern)

        if not self.matches:
            self.details.append(f"No file matching {self.pattern} found.")
            return self.status_when_failed

        if len(self.matches) > 1:
            where = relative_posix(directory, self.repo_path) if directory != self.repo_path else "the repository root"
            self.details.append(f"Multiple files matching {file_pattern} found in {where}:")
            self.details.extend(format_file_list([relative_posix(p, self.repo_path) for p in self.matches]))
            return CheckStatus.YELLOW

        if is_empty_file(self.matches[0]):
            self.details.append(f"File {relative_posix(self.matches[0], self.repo_path)} is empty.")
            return self.status_when_empty

        return CheckStatus.GREEN
