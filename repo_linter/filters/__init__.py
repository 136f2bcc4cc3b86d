"""
File filtering for repo-linter.

Gitignore-aware path matching built on the pathspec library.
"""

from repo_linter.filters.ignore_matcher import (
    IgnoreMatcher,
    IgnoreSource,
    iter_repository_files,
    read_ignore_lines,
)

__all__ = [
    "IgnoreMatcher",
    "IgnoreSource",
    "iter_repository_files",
    "read_ignore_lines",
]
