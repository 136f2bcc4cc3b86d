"""Pathspec-based ignore matching.

Loads the repository's ignore files (root and nested ``.gitignore`` files plus
``.git/info/exclude``) and evaluates them with gitignore semantics through the
pathspec library, including ``!`` negations and ``**`` globs.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Iterator

import pathspec

from repo_linter.errors import IgnoreSourceError

logger = logging.getLogger(__name__)


GITIGNORE_NAME = ".gitignore"
GIT_DIR_NAME = ".git"


@dataclass
class IgnoreSource:
    """Patterns read from one ignore file, anchored at ``base`` (posix, relative to the repo root)."""
    path: Path
    base: str
    patterns: list[str]
    spec: pathspec.GitIgnoreSpec


def read_ignore_lines(path: Path) -> list[str]:
    """
    Read pattern lines from an ignore file, dropping blank and comment lines.

    A missing file yields no patterns.

    Raises:
        IgnoreSourceError: the file exists but cannot be read
    """
    if not path.is_file():
        return []

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise IgnoreSourceError(f"Cannot read ignore file {path}: {e}") from e

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError:
        content = raw.decode("latin-1")

    patterns: list[str] = []
    for line in content.splitlines():
        # trailing spaces are insignificant unless escaped
        stripped = line.rstrip()
        if stripped.endswith("\\") and line != stripped:
            stripped += " "
        if not stripped.strip() or stripped.lstrip().startswith("#"):
            continue
        patterns.append(stripped.lstrip())
    return patterns


def iter_repository_files(root: Path) -> Iterator[Path]:
    """Yield every regular file under ``root``, skipping the ``.git`` directory."""
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d != GIT_DIR_NAME)
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.is_file():
                yield path


class IgnoreMatcher:
    """Answers whether a repository-relative path is excluded by the ignore files."""

    def __init__(self, repo_path: Path, enabled: bool = True, include_nested: bool = True):
        """
        Initialize the matcher.

        Args:
            repo_path: repository root
            enabled: when False nothing is read and no path is ignored
            include_nested: also load .gitignore files in subdirectories
        """
        self.repo_path = repo_path
        self.enabled = enabled
        self._sources: list[IgnoreSource] = []

        if not enabled:
            logger.info("Ignore files are disabled, every file will be checked")
            return

        self._load_source(repo_path / GIT_DIR_NAME / "info" / "exclude", "")
        self._load_source(repo_path / GITIGNORE_NAME, "")
        if include_nested:
            self._load_nested()

    def _load_source(self, path: Path, base: str) -> None:
        patterns = read_ignore_lines(path)
        if not patterns:
            return
        logger.debug("Loaded %d ignore patterns from %s", len(patterns), path)
        self._sources.append(IgnoreSource(
            path=path,
            base=base,
            patterns=patterns,
            spec=pathspec.GitIgnoreSpec.from_lines(patterns),
        ))

    def _load_nested(self) -> None:
        """Load .gitignore files from subdirectories, shallowest first."""
        nested: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.repo_path):
            dirnames[:] = [d for d in dirnames if d != GIT_DIR_NAME]
            if Path(dirpath) == self.repo_path:
                continue
            if GITIGNORE_NAME in filenames:
                nested.append(Path(dirpath) / GITIGNORE_NAME)

        nested.sort(key=lambda p: (len(p.parts), str(p)))
        for gitignore_path in nested:
            base = gitignore_path.parent.relative_to(self.repo_path).as_posix()
            self._load_source(gitignore_path, base)

    @property
    def patterns(self) -> list[str]:
        """All raw patterns, in load order."""
        return [p for source in self._sources for p in source.patterns]

    def _normalize(self, path: "Path | str") -> str | None:
        candidate = Path(path)
        if candidate.is_absolute():
            try:
                candidate = candidate.relative_to(self.repo_path)
            except ValueError:
                # outside the repository
                return None
        relative = PurePosixPath(str(candidate).replace("\\", "/")).as_posix()
        if relative.startswith("./"):
            relative = relative[2:]
        if relative in ("", "."):
            return None
        return relative

    def is_ignored(self, path: "Path | str") -> bool:
        """
        Check whether a path is ignored.

        Sources are evaluated root first, deeper .gitignore files last, and
        the last matching pattern decides, so a nested ``!pattern`` can
        re-include a file excluded higher up. As in git, a file inside an
        excluded directory stays ignored whatever later patterns say.
        """
        if not self.enabled or not self._sources:
            return False

        relative = self._normalize(path)
        if relative is None:
            return False

        parts = relative.split("/")
        for depth in range(1, len(parts)):
            if self._match("/".join(parts[:depth]) + "/"):
                return True
        return self._match(relative)

    def _match(self, relative: str) -> bool:
        """Verdict of all sources for one path; directories end with ``/``."""
        ignored = False
        for source in self._sources:
            if source.base:
                prefix = source.base + "/"
                if not relative.startswith(prefix):
                    continue
                local = relative[len(prefix):]
                # a .gitignore never applies to its own directory
                if not local:
                    continue
            else:
                local = relative

            verdict = self._evaluate(source, local)
            if verdict is not None:
                ignored = verdict
        return ignored

    @staticmethod
    def _evaluate(source: IgnoreSource, local: str) -> bool | None:
        """Return True/False for the last matching pattern of a source, None when nothing matches."""
        verdict = None
        for pattern in source.spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(local) is not None:
                verdict = bool(pattern.include)
        return verdict

    def filter_paths(self, paths: list[Path]) -> list[Path]:
        """Filter paths, returning those that are NOT ignored."""
        return [p for p in paths if not self.is_ignored(p)]
