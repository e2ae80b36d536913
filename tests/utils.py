"""Helpers shared by shelfkit tests."""

from __future__ import annotations

import subprocess
from pathlib import Path


def git(repo: Path, *args: str) -> subprocess.CompletedProcess[str]:
    """Run git in ``repo`` and fail the test on a non-zero exit."""
    return subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=True,
    )


def reflog_output(*records: tuple[str, str, str]) -> str:
    """Render (name, sha, subject) records the way ``git log -g -z`` does."""
    return "".join("\x1f".join(record) + "\0" for record in records)


def stash_shas(repo: Path) -> list[str]:
    """All stash commit hashes, most recent first, straight from git."""
    result = subprocess.run(
        ["git", "log", "-g", "--format=%H", "refs/stash"],
        cwd=repo,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=False,
    )
    if result.returncode != 0:
        return []
    return [line for line in result.stdout.splitlines() if line]
