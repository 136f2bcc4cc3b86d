"""
Tests for loading local and remote repositories.
"""

import shutil

import pytest
from git import Actor, GitCommandError, Repo

from repo_linter.core.config import GlobalConfiguration
from repo_linter.errors import CloneAuthError, CloneNetworkError, RepositoryError
from repo_linter.repo import (
    clone_with_retry,
    is_url,
    load_repository,
    open_repository,
    repository_name,
)
from repo_linter.repo import loader

from conftest import init_git, write


@pytest.mark.parametrize("target, expected", [
    ("https://github.com/user/repo", True),
    ("http://example.com/repo.git", True),
    ("git@github.com:user/repo.git", True),
    ("ssh://git@example.com/repo.git", True),
    ("git://example.com/repo", True),
    ("./repo", False),
    ("/home/user/repo", False),
    ("repos.txt", False),
])
def test_is_url(target, expected):
    assert is_url(target) is expected


@pytest.mark.parametrize("url, name", [
    ("https://github.com/user/repo", "repo"),
    ("https://github.com/user/repo.git", "repo"),
    ("https://github.com/user/repo/", "repo"),
    ("git@github.com:user/tool.git", "tool"),
])
def test_repository_name(url, name):
    assert repository_name(url) == name


# =============================================================================
# Local repositories
# =============================================================================


class TestLocal:

    def test_plain_directory(self, fake_repo):
        ctx = load_repository(str(fake_repo))
        assert ctx.path == fake_repo.resolve()
        assert ctx.name == "FakeRepo"
        assert not ctx.is_temporary
        assert ctx.commit_count == 0
        assert ctx.contributors == []

    def test_git_metadata(self, passing_repo):
        init_git(passing_repo)
        ctx = load_repository(str(passing_repo))
        assert ctx.commit_count == 1
        assert ctx.contributors == ["Alice <alice@example.com>"]

    def test_contributors_most_active_first(self, passing_repo):
        init_git(passing_repo)
        bob = Actor("Bob", "bob@example.com")
        repo = Repo(passing_repo)
        for i in range(2):
            write(passing_repo / f"bob{i}.txt", "bob")
            repo.index.add([f"bob{i}.txt"])
            repo.index.commit(f"Bob {i}", author=bob, committer=bob)
        repo.close()

        ctx = load_repository(str(passing_repo))
        assert ctx.commit_count == 3
        assert ctx.contributors == ["Bob <bob@example.com>", "Alice <alice@example.com>"]

    def test_repository_without_commits(self, tmp_path):
        Repo.init(tmp_path).close()
        ctx = load_repository(str(tmp_path))
        assert ctx.commit_count == 0
        assert ctx.contributors == []

    def test_missing_path(self, tmp_path):
        with pytest.raises(RepositoryError, match="does not exist"):
            load_repository(str(tmp_path / "missing"))

    def test_file_path(self, tmp_path):
        path = write(tmp_path / "file.txt", "x")
        with pytest.raises(RepositoryError, match="not a directory"):
            load_repository(str(path))

    def test_local_repository_is_never_deleted(self, fake_repo):
        with open_repository(str(fake_repo)) as ctx:
            assert ctx.path.is_dir()
        assert fake_repo.is_dir()


# =============================================================================
# Remote repositories
# =============================================================================


@pytest.fixture
def fake_clone(monkeypatch, passing_repo):
    """Replace cloning with a copy of ``passing_repo``."""
    calls = []

    def clone(url, destination, timeout=60, max_retries=2, **kwargs):
        calls.append((url, destination))
        shutil.copytree(passing_repo, destination)
        return destination

    monkeypatch.setattr(loader, "clone_with_retry", clone)
    return calls


class TestRemote:

    URL = "https://github.com/user/project.git"

    def test_clone_into_scratch_directory_is_removed(self, fake_clone):
        with open_repository(self.URL) as ctx:
            assert ctx.is_temporary
            assert ctx.name == "project"
            assert ctx.source_url == self.URL
            assert (ctx.path / "README.md").is_file()
            scratch = ctx.scratch_dir
            assert ctx.path.parent == scratch

        assert not scratch.exists()

    def test_clone_into_configured_directory(self, fake_clone, tmp_path):
        target = tmp_path / "clones"
        with open_repository(self.URL, clone_directory=target) as ctx:
            assert ctx.path == target / "project"
            assert ctx.scratch_dir is None

        assert not (target / "project").exists()
        assert target.is_dir()

    def test_cleanup_disabled_keeps_clone(self, fake_clone, tmp_path):
        config = GlobalConfiguration(cleanup=False, clone_directory=tmp_path / "clones")
        with open_repository(self.URL, config) as ctx:
            path = ctx.path

        assert (path / "README.md").is_file()

    def test_clone_is_removed_when_the_block_raises(self, fake_clone):
        with pytest.raises(KeyError):
            with open_repository(self.URL) as ctx:
                scratch = ctx.scratch_dir
                raise KeyError("boom")
        assert not scratch.exists()

    def test_clone_failure(self, monkeypatch):
        def clone(url, destination, **kwargs):
            raise CloneNetworkError("fatal: unable to access")

        monkeypatch.setattr(loader, "clone_with_retry", clone)
        with pytest.raises(RepositoryError, match="Network error while cloning"):
            load_repository(self.URL)


class TestCloneWithRetry:

    @pytest.fixture
    def sleeps(self, monkeypatch):
        recorded = []
        monkeypatch.setattr(loader.time, "sleep", recorded.append)
        return recorded

    def test_auth_error_is_not_retried(self, monkeypatch, tmp_path, sleeps):
        calls = []

        def clone_from(url, destination, **kwargs):
            calls.append(url)
            raise GitCommandError("clone", 128, stderr="fatal: Authentication failed")

        monkeypatch.setattr(loader.Repo, "clone_from", clone_from)
        with pytest.raises(CloneAuthError):
            clone_with_retry("https://example.com/r.git", tmp_path / "r", max_retries=3)
        assert len(calls) == 1
        assert sleeps == []

    def test_network_error_is_retried_with_backoff(self, monkeypatch, tmp_path, sleeps):
        calls = []

        def clone_from(url, destination, **kwargs):
            calls.append(url)
            raise GitCommandError("clone", 128, stderr="fatal: unable to access")

        monkeypatch.setattr(loader.Repo, "clone_from", clone_from)
        with pytest.raises(CloneNetworkError):
            clone_with_retry("https://example.com/r.git", tmp_path / "r", max_retries=2, retry_delay=1.0)
        assert len(calls) == 3
        assert sleeps == [1.0, 2.0]

    def test_success_after_retry(self, monkeypatch, tmp_path, sleeps):
        attempts = []

        class FakeRepo:
            def close(self):
                pass

        def clone_from(url, destination, **kwargs):
            attempts.append(kwargs["env"])
            if len(attempts) == 1:
                raise GitCommandError("clone", 128, stderr="Connection reset")
            destination.mkdir(parents=True)
            return FakeRepo()

        monkeypatch.setattr(loader.Repo, "clone_from", clone_from)
        destination = clone_with_retry("https://example.com/r.git", tmp_path / "r", timeout=30)

        assert destination == tmp_path / "r"
        assert len(attempts) == 2
        assert attempts[0]["GIT_TERMINAL_PROMPT"] == "0"
        assert attempts[0]["GIT_HTTP_LOW_SPEED_TIME"] == "30"
