"""Async git process helpers for shelfkit."""

from __future__ import annotations

import asyncio
import logging
import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import AbstractSet, Sequence

from shelfkit.config import ShelfkitConfig, get_config
from shelfkit.errors import GitError

logger = logging.getLogger(__name__)


class GitErrorKind(str, Enum):
    """Recognised git failure signatures."""

    MERGE_CONFLICTS = "merge_conflicts"
    LOCAL_CHANGES_OVERWRITTEN = "local_changes_overwritten"
    UNRESOLVED_CONFLICTS = "unresolved_conflicts"
    NOT_A_REPOSITORY = "not_a_repository"
    BAD_REVISION = "bad_revision"
    LOCK_FILE_EXISTS = "lock_file_exists"
    NO_STASH_ENTRIES = "no_stash_entries"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_DESCRIPTIONS: dict[GitErrorKind, str] = {
    GitErrorKind.MERGE_CONFLICTS: "The operation produced merge conflicts",
    GitErrorKind.LOCAL_CHANGES_OVERWRITTEN: "Local changes would be overwritten",
    GitErrorKind.UNRESOLVED_CONFLICTS: "The index contains unresolved conflicts",
    GitErrorKind.NOT_A_REPOSITORY: "The path is not a git repository",
    GitErrorKind.BAD_REVISION: "The revision could not be resolved",
    GitErrorKind.LOCK_FILE_EXISTS: "Another git process holds the index lock",
    GitErrorKind.NO_STASH_ENTRIES: "There are no stash entries",
}

# Checked in order; first match wins.
_ERROR_PATTERNS: tuple[tuple[re.Pattern[str], GitErrorKind], ...] = (
    (re.compile(r"CONFLICT \([^)]+\): "), GitErrorKind.MERGE_CONFLICTS),
    (
        re.compile(
            r"error: (?:Your local changes to the following|The following untracked working tree) "
            r"files would be overwritten by"
        ),
        GitErrorKind.LOCAL_CHANGES_OVERWRITTEN,
    ),
    (
        re.compile(r"(?:you need to resolve your current index first|needs merge)"),
        GitErrorKind.UNRESOLVED_CONFLICTS,
    ),
    (re.compile(r"fatal: [Nn]ot a git repository"), GitErrorKind.NOT_A_REPOSITORY),
    (
        re.compile(r"(?:fatal: bad revision|unknown revision or path not in the working tree|is not a valid reference)"),
        GitErrorKind.BAD_REVISION,
    ),
    (re.compile(r"Unable to create '.+\.lock': File exists"), GitErrorKind.LOCK_FILE_EXISTS),
    (re.compile(r"No stash entries found"), GitErrorKind.NO_STASH_ENTRIES),
)


@dataclass(frozen=True)
class GitResult:
    """Outcome of a git invocation.

    Attributes:
        exit_code: Process exit code
        stdout: Decoded standard output (not stripped; NUL bytes preserved)
        stderr: Decoded standard error
        git_error: Classified error kind when the exit code was not a success code
    """

    exit_code: int
    stdout: str
    stderr: str
    git_error: GitErrorKind | None = None


def classify_git_error(stderr: str, stdout: str = "") -> GitErrorKind | None:
    """Map git output to a known error kind.

    stderr is searched first, then stdout (some conflicts are only reported
    on stdout).
    """
    for text in (stderr, stdout):
        if not text:
            continue
        for pattern, kind in _ERROR_PATTERNS:
            if pattern.search(text):
                return kind
    return None


def _git_env() -> dict[str, str]:
    env = os.environ.copy()
    # stderr heuristics rely on untranslated messages
    env["LC_ALL"] = "C"
    env["GIT_TERMINAL_PROMPT"] = "0"
    return env


async def run_git(
    args: Sequence[str],
    path: Path | str,
    name: str,
    *,
    success_exit_codes: AbstractSet[int] = frozenset({0}),
    expected_errors: AbstractSet[GitErrorKind] = frozenset(),
    input_text: str | None = None,
    config: ShelfkitConfig | None = None,
) -> GitResult:
    """Run git in ``path`` and return its result.

    Args:
        args: Arguments passed to git (without the executable)
        path: Working directory for the invocation
        name: Short operation label used in logs
        success_exit_codes: Exit codes treated as success
        expected_errors: Error kinds returned to the caller instead of raised
        input_text: Text written to git's stdin (stdin is closed otherwise)
        config: Configuration override (defaults to the process-wide config)

    Returns:
        GitResult with exit code, decoded output and classified error kind

    Raises:
        GitError: If the exit code is not a success code and the classified
            error is not one of ``expected_errors``
    """
    resolved = config or get_config()
    logger.debug("[%s] git %s (cwd=%s)", name, " ".join(args), path)

    process = await asyncio.create_subprocess_exec(
        resolved.git_executable,
        *args,
        stdin=asyncio.subprocess.PIPE if input_text is not None else asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        cwd=str(path),
        env=_git_env(),
    )
    stdin_bytes = input_text.encode("utf-8") if input_text is not None else None
    stdout_bytes, stderr_bytes = await process.communicate(stdin_bytes)
    exit_code = process.returncode if process.returncode is not None else -1

    stdout = stdout_bytes.decode("utf-8", errors="replace")
    stderr = stderr_bytes.decode("utf-8", errors="replace")

    git_error: GitErrorKind | None = None
    acceptable_exit_code = exit_code in success_exit_codes
    if not acceptable_exit_code:
        git_error = classify_git_error(stderr, stdout)

    result = GitResult(exit_code=exit_code, stdout=stdout, stderr=stderr, git_error=git_error)

    if acceptable_exit_code:
        return result
    if git_error is not None and git_error in expected_errors:
        logger.debug("[%s] expected git error: %s", name, git_error.value)
        return result

    logger.debug("[%s] git failed with exit code %d: %s", name, exit_code, stderr.strip())
    raise GitError(result, args)


async def is_git_repo(path: Path | None = None) -> bool:
    """Return True when the provided path lives inside a git repository."""
    target = (path or Path.cwd()).resolve()
    if not target.is_dir():
        return False
    try:
        result = await run_git(
            ["rev-parse", "--is-inside-work-tree"],
            target,
            "isGitRepository",
            success_exit_codes=frozenset({0, 128}),
        )
    except (GitError, FileNotFoundError):
        return False
    return result.exit_code == 0 and result.stdout.strip() == "true"


async def get_current_branch(path: Path | None = None) -> str | None:
    """Return the current branch name, or None for detached HEAD.

    Uses ``git branch --show-current`` (Git 2.22+, handles unborn branches).
    Returns None outside of a repository.
    """
    repo_path = (path or Path.cwd()).resolve()
    try:
        result = await run_git(
            ["branch", "--show-current"],
            repo_path,
            "getCurrentBranch",
            success_exit_codes=frozenset({0, 128}),
        )
    except FileNotFoundError:
        return None
    if result.exit_code != 0:
        return None
    return result.stdout.strip() or None


__all__ = [
    "GitErrorKind",
    "GitResult",
    "classify_git_error",
    "get_current_branch",
    "is_git_repo",
    "run_git",
]
