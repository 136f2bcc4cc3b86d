"""
Repository loader - local working copies and remote git URLs

Supports:
1. local directory paths
2. git URLs (cloned to a temporary or configured directory)
3. clone retries with exponential backoff
4. scoped cleanup of clones through ``open_repository``
"""

import logging
import re
import shutil
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from repo_linter.core.config import GlobalConfiguration
from repo_linter.errors import (
    CloneAuthError,
    CloneError,
    CloneNetworkError,
    CloneTimeoutError,
    RepositoryError,
)

logger = logging.getLogger(__name__)


# ============================================================
# Constants
# ============================================================

URL_PATTERN = re.compile(r"^(?:https?://|ssh://|git://|git@[^:]+:)")

CLONE_ERROR_MESSAGES: dict[str, str] = {
    "timeout": (
        "Clone of {url} timed out after {timeout} seconds. "
        "Check your network connection or raise clone_timeout."
    ),
    "network": (
        "Network error while cloning {url}. "
        "Check that the repository exists and is reachable."
    ),
    "auth": (
        "Authentication required for {url}. "
        "Make sure you have access and your git credentials are set up."
    ),
}


# ============================================================
# Data model
# ============================================================

@dataclass
class RepoContext:
    """
    A repository snapshot ready to be linted.

    Attributes:
        path: root of the working copy
        name: repository name, used in report headers
        is_temporary: the working copy was cloned by us and may be deleted
        source_url: URL the repository was cloned from
        commit_count: number of commits reachable from HEAD
        contributors: contributors as reported by ``git shortlog``
        scratch_dir: temporary directory created for the clone, removed on cleanup
    """
    path: Path
    name: str
    is_temporary: bool = False
    source_url: Optional[str] = None
    commit_count: int = 0
    contributors: list[str] = field(default_factory=list)
    scratch_dir: Optional[Path] = None


def is_url(target: str) -> bool:
    return bool(URL_PATTERN.match(target))


def repository_name(url: str) -> str:
    """``https://github.com/user/repo.git`` -> ``repo``"""
    name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    if name.endswith(".git"):
        name = name[:-4]
    return name or "repository"


# ============================================================
# Git metadata
# ============================================================

def get_commit_count(repo: Repo) -> int:
    """Count commits reachable from HEAD, 0 for a repository without commits."""
    try:
        return int(repo.git.rev_list("--count", "HEAD").strip())
    except (GitCommandError, ValueError):
        return 0


def get_contributors(repo: Repo) -> list[str]:
    """Contributors from ``git shortlog -sne HEAD``, most active first."""
    try:
        output = repo.git.shortlog("-sne", "HEAD")
    except GitCommandError:
        return []

    contributors = []
    for line in output.splitlines():
        parts = line.strip().split("\t", 1)
        if len(parts) == 2 and parts[1].strip():
            contributors.append(parts[1].strip())
    return contributors


def _read_metadata(ctx: RepoContext) -> None:
    try:
        repo = Repo(ctx.path)
    except (InvalidGitRepositoryError, NoSuchPathError):
        logger.warning("%s is not a git repository, commit metadata unavailable", ctx.path)
        return

    with repo:
        ctx.commit_count = get_commit_count(repo)
        ctx.contributors = get_contributors(repo)


# ============================================================
# Cloning
# ============================================================

def _classify_clone_error(error: Exception) -> CloneError:
    error_str = str(error).lower()
    if "timeout" in error_str or "timed out" in error_str or "too slow" in error_str:
        return CloneTimeoutError(str(error))
    if "authentication" in error_str or "403" in error_str or "401" in error_str:
        return CloneAuthError(str(error))
    return CloneNetworkError(str(error))


def clone_with_retry(
    url: str,
    destination: Path,
    timeout: int = 60,
    max_retries: int = 2,
    retry_delay: float = 2.0,
    backoff_factor: float = 2.0,
) -> Path:
    """
    Clone a repository, retrying transient failures.

    Authentication errors are not retried.

    Raises:
        CloneError: all attempts failed
    """
    last_error: Optional[CloneError] = None
    delay = retry_delay

    for attempt in range(max_retries + 1):
        # a previous partial clone would make git refuse the destination
        if destination.exists():
            shutil.rmtree(destination, ignore_errors=True)

        try:
            logger.info("Cloning %s into %s (attempt %d)", url, destination, attempt + 1)
            Repo.clone_from(
                url,
                destination,
                env={
                    "GIT_HTTP_LOW_SPEED_LIMIT": "1000",
                    "GIT_HTTP_LOW_SPEED_TIME": str(timeout),
                    "GIT_TERMINAL_PROMPT": "0",
                },
            ).close()
            return destination
        except GitCommandError as e:
            shutil.rmtree(destination, ignore_errors=True)
            last_error = _classify_clone_error(e)
            if isinstance(last_error, CloneAuthError):
                break
        except OSError as e:
            shutil.rmtree(destination, ignore_errors=True)
            last_error = CloneNetworkError(str(e))

        if attempt < max_retries:
            logger.warning("Clone failed, retrying in %.1f seconds: %s", delay, last_error)
            time.sleep(delay)
            delay *= backoff_factor

    raise last_error or CloneNetworkError("Unknown error during clone")


def _format_clone_error(error: CloneError, url: str, timeout: int) -> str:
    if isinstance(error, CloneTimeoutError):
        return CLONE_ERROR_MESSAGES["timeout"].format(url=url, timeout=timeout)
    if isinstance(error, CloneAuthError):
        return CLONE_ERROR_MESSAGES["auth"].format(url=url)
    return CLONE_ERROR_MESSAGES["network"].format(url=url)


# ============================================================
# Loading
# ============================================================

def load_repository(
    target: str,
    config: Optional[GlobalConfiguration] = None,
    clone_directory: Optional[Path] = None,
) -> RepoContext:
    """
    Load a repository from a local path or a git URL.

    Args:
        target: local path or URL
        config: global configuration (clone options)
        clone_directory: parent directory for clones, overrides the configuration

    Raises:
        RepositoryError: path invalid or clone failed
    """
    config = config or GlobalConfiguration()

    if is_url(target):
        name = repository_name(target)
        parent = clone_directory or config.clone_directory
        scratch_dir = None
        if parent is None:
            parent = scratch_dir = Path(tempfile.mkdtemp(prefix="repo-linter-"))
        else:
            parent.mkdir(parents=True, exist_ok=True)

        try:
            path = clone_with_retry(
                target,
                parent / name,
                timeout=config.clone_timeout,
                max_retries=config.clone_retries,
            )
        except CloneError as e:
            if scratch_dir is not None:
                shutil.rmtree(scratch_dir, ignore_errors=True)
            raise type(e)(_format_clone_error(e, target, config.clone_timeout)) from e

        ctx = RepoContext(
            path=path,
            name=name,
            is_temporary=True,
            source_url=target,
            scratch_dir=scratch_dir,
        )
    else:
        path = Path(target).expanduser().resolve()
        if not path.exists():
            raise RepositoryError(f"Path does not exist: {target}")
        if not path.is_dir():
            raise RepositoryError(f"Path is not a directory: {target}")
        ctx = RepoContext(path=path, name=path.name)

    _read_metadata(ctx)
    return ctx


def cleanup_repository(ctx: RepoContext) -> None:
    """Delete a cloned working copy. Local repositories are never deleted."""
    if not ctx.is_temporary:
        return
    target = ctx.scratch_dir or ctx.path
    if target.exists():
        logger.info("Removing cloned repository %s", target)
        shutil.rmtree(target, ignore_errors=True)


@contextmanager
def open_repository(
    target: str,
    config: Optional[GlobalConfiguration] = None,
    clone_directory: Optional[Path] = None,
) -> Iterator[RepoContext]:
    """Load a repository and clean up the clone when the block exits, unless cleanup is disabled."""
    config = config or GlobalConfiguration()
    ctx = load_repository(target, config, clone_directory)
    try:
        yield ctx
    finally:
        if config.cleanup:
            cleanup_repository(ctx)
        elif ctx.is_temporary:
            logger.info("Cleanup is disabled, cloned repository kept at %s", ctx.path)
