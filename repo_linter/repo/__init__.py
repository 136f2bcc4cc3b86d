"""
Repository Layer - loading local and remote repositories.
"""

from repo_linter.repo.loader import (
    RepoContext,
    load_repository,
    open_repository,
    cleanup_repository,
    clone_with_retry,
    get_commit_count,
    get_contributors,
    is_url,
    repository_name,
)

__all__ = [
    "RepoContext",
    "load_repository",
    "open_repository",
    "cleanup_repository",
    "clone_with_retry",
    "get_commit_count",
    "get_contributors",
    "is_url",
    "repository_name",
]
