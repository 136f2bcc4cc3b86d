"""
Shared fixtures: throw-away repositories and a fake trufflehog.
"""

import json
import subprocess
from pathlib import Path
from typing import Callable, Optional

import pytest
from git import Actor, Repo

from repo_linter.core.status import CheckStatus
from repo_linter.filters import iter_repository_files
from repo_linter.repo import RepoContext
from repo_linter.secrets import SecretFinding, SecretScanResult


# =============================================================================
# Repositories
# =============================================================================


def write(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def fake_repo(tmp_path: Path) -> Path:
    """A repository with a bit of everything."""
    repo = tmp_path / "FakeRepo"
    repo.mkdir()

    write(repo / ".gitignore", "node_modules\n")
    write(repo / "README.md", "# Hello World")
    write(repo / "README.txt", "Hello World")
    write(repo / "LICENSE", "MIT LICENSE")
    write(repo / "EMPTY_LICENSE", "")
    write(repo / ".github" / "workflows" / "main.yaml", "name: CI")
    write(repo / "secrets" / "secret.txt", "45f68f4c-930d-4648-88c3-3a6e260da304")
    (repo / "no-secrets").mkdir()
    (repo / "no-license").mkdir()
    write(repo / "thisisalongdirectorynamethatisnotrandomandshouldbefound" / "test", "HELLO")
    return repo


@pytest.fixture
def passing_repo(tmp_path: Path) -> Path:
    """A repository where every default check passes."""
    repo = tmp_path / "passing"
    repo.mkdir()
    write(repo / "README.md", "# Passing")
    write(repo / "LICENSE", "MIT License")
    write(repo / ".github" / "workflows" / "ci.yml", "name: CI")
    write(repo / "tests" / "test_app.py", "def test_ok():\n    assert True\n")
    return repo


ALICE = Actor("Alice", "alice@example.com")


def init_git(path: Path, author: Actor = ALICE) -> Path:
    """Turn a directory into a git repository with one commit of all its files."""
    repo = Repo.init(path)
    files = [p.relative_to(path).as_posix() for p in iter_repository_files(path)]
    if files:
        repo.index.add(files)
        repo.index.commit("Initial commit", author=author, committer=author)
    repo.close()
    return path


@pytest.fixture
def repo_context(fake_repo: Path) -> RepoContext:
    return RepoContext(
        path=fake_repo,
        name=fake_repo.name,
        commit_count=3,
        contributors=["Alice <alice@example.com>", "Bob <bob@example.com>"],
    )


# =============================================================================
# Secret scanner
# =============================================================================


def trufflehog_record(file: str, line: int = 1, description: str = "Generic API key") -> dict:
    return {
        "DetectorName": "Generic",
        "DetectorDescription": description,
        "SourceMetadata": {"Data": {"Filesystem": {"file": file, "line": line}}},
        "Raw": "REDACTED",
    }


def trufflehog_output(*records: dict) -> str:
    return "\n".join(json.dumps(r) for r in records) + "\n"


class StubScanner:
    """Scanner double returning a fixed result, or raising a fixed error."""

    def __init__(self, findings: Optional[list[SecretFinding]] = None, error: Optional[Exception] = None):
        self.findings = findings or []
        self.error = error
        self.calls = 0

    def scan(self, root: Path) -> SecretScanResult:
        self.calls += 1
        if self.error is not None:
            raise self.error
        if not self.findings:
            return SecretScanResult(status=CheckStatus.GREEN)
        return SecretScanResult(status=CheckStatus.RED, findings=list(self.findings), exit_code=183)


@pytest.fixture
def fake_subprocess_run(monkeypatch) -> Callable[..., list]:
    """
    Replace subprocess.run with a function returning a canned result.

    Returns an installer: ``install(returncode, stdout)`` or ``install(error=exc)``;
    the installer returns the list of recorded calls.
    """
    def install(returncode: int = 0, stdout: str = "", stderr: str = "", error: Optional[Exception] = None) -> list:
        calls: list = []

        def fake_run(command, **kwargs):
            calls.append((command, kwargs))
            if error is not None:
                raise error
            return subprocess.CompletedProcess(command, returncode, stdout, stderr)

        monkeypatch.setattr(subprocess, "run", fake_run)
        return calls

    return install
