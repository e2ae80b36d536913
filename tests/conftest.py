"""Shared fixtures for shelfkit tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from shelfkit.config import set_config
from shelfkit.core.git_ops import GitResult
from shelfkit.core.repository import Repository
from tests.utils import git


@pytest.fixture(autouse=True)
def _reset_config():
    """Drop any cached configuration between tests."""
    set_config(None)
    yield
    set_config(None)


@pytest.fixture(name="_git_identity")
def git_identity_fixture(monkeypatch):
    """Ensure git commands can commit even if the user has no global config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Shelf Kit")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "shelf@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Shelf Kit")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "shelf@example.com")


@pytest.fixture
def git_repo(tmp_path, _git_identity) -> Path:
    """Create a git repository on ``main`` with one committed file."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "--initial-branch=main")
    git(repo, "config", "user.email", "shelf@example.com")
    git(repo, "config", "user.name", "Shelf Kit")
    git(repo, "config", "commit.gpgsign", "false")

    (repo / "README.md").write_text("# Test Repo\n", encoding="utf-8")
    git(repo, "add", ".")
    git(repo, "commit", "-m", "Initial commit")
    return repo


@pytest.fixture
def repository(git_repo) -> Repository:
    return Repository(git_repo)


@pytest.fixture
def make_result() -> Callable[..., GitResult]:
    """Build GitResult objects for mocked git invocations."""

    def _make(exit_code: int = 0, stdout: str = "", stderr: str = "", git_error=None) -> GitResult:
        return GitResult(exit_code=exit_code, stdout=stdout, stderr=stderr, git_error=git_error)

    return _make
