"""Check that a directory exists in the repository."""

from pathlib import Path
from typing import Sequence

from repo_linter.checks.base import Checker, relative_posix
from repo_linter.core.status import CheckStatus


class DirectoryExistsCheck(Checker):
    """
    Check that a directory exists and is not empty.

    An empty directory gets ``status_when_empty``, red unless configured
    otherwise. With ``required_globs`` the directory must also hold at least
    one file matching one of the globs (searched recursively when
    ``recursive`` is set); no match counts as empty.
    """

    def __init__(
        self,
        relative_path: str,
        repo_path: Path,
        *,
        required_globs: Sequence[str] = (),
        recursive: bool = False,
        status_when_empty: CheckStatus = CheckStatus.RED,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.relative_path = relative_path.strip("/")
        self.repo_path = repo_path
        self.required_globs = list(required_globs)
        self.recursive = recursive
        self.status_when_empty = status_when_empty
        self.matched_files: list[str] = []

    def reset(self) -> None:
        self.matched_files = []

    def _evaluate(self) -> CheckStatus:
        directory = self.repo_path / self.relative_path

        if not directory.is_dir():
            self.details.append(f"Directory {self.relative_path} does not exist.")
            return self.status_when_failed

        if not any(directory.iterdir()):
            self.details.append(f"Directory {self.relative_path} is empty.")
            return self.status_when_empty

        if self.required_globs:
            matched: set[Path] = set()
            for glob in self.required_globs:
                found = directory.rglob(glob) if self.recursive else directory.glob(glob)
                matched.update(p for p in found if p.is_file())
            self.matched_files = sorted(relative_posix(p, self.repo_path) for p in matched)

            if not self.matched_files:
                self.details.append(
                    f"Directory {self.relative_path} contains no files matching "
                    + ", ".join(self.required_globs)
                    + "."
                )
                return self.status_when_empty

        return CheckStatus.GREEN
