"""Check that the repository has a license file."""

import fnmatch
from pathlib import Path

from repo_linter.checks.base import Checker, format_file_list, is_empty_file, relative_posix
from repo_linter.core.status import CheckStatus


LICENSE_PATTERN = "license*"


def _license_entries(directory: Path, want_dirs: bool) -> list[Path]:
    """Top-level entries of ``directory`` whose name starts with LICENSE (any case)."""
    entries = []
    for entry in sorted(directory.iterdir()):
        if not fnmatch.fnmatchcase(entry.name.lower(), LICENSE_PATTERN):
            continue
        if (entry.is_dir() if want_dirs else entry.is_file()):
            entries.append(entry)
    return entries


class LicenseFileCheck(Checker):
    """
    Look for ``LICENSE*`` files at the top of the repository.

    One non-empty file is green, an empty one gets ``status_when_empty`` and
    several files are yellow. Without a top-level file, the first
    ``LICENSE*`` file inside a ``LICENSE*`` directory is checked the same way.
    """

    def __init__(
        self,
        repo_path: Path,
        *,
        status_when_empty: CheckStatus = CheckStatus.RED,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.repo_path = repo_path
        self.status_when_empty = status_when_empty
        self.license_files: list[str] = []

    def reset(self) -> None:
        self.license_files = []

    def _check_single(self, path: Path) -> CheckStatus:
        if is_empty_file(path):
            self.details.append(f"License file {relative_posix(path, self.repo_path)} is empty.")
            return self.status_when_empty
        return CheckStatus.GREEN

    def _evaluate(self) -> CheckStatus:
        files = _license_entries(self.repo_path, want_dirs=False)
        self.license_files = [relative_posix(p, self.repo_path) for p in files]

        if len(files) > 1:
            self.details.append("Multiple license files found:")
            self.details.extend(format_file_list(self.license_files))
            return CheckStatus.YELLOW

        if len(files) == 1:
            return self._check_single(files[0])

        directories = _license_entries(self.repo_path, want_dirs=True)
        if directories:
            nested = _license_entries(directories[0], want_dirs=False)
            if nested:
                self.license_files = [relative_posix(nested[0], self.repo_path)]
                return self._check_single(nested[0])
            self.details.append(f"Directory {relative_posix(directories[0], self.repo_path)} has no LICENSE file.")

        self.details.append("License file not found.")
        return self.status_when_failed
