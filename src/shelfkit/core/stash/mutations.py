"""Create, apply, pop and drop shelfkit stash entries.

Every operation that targets an existing entry resolves ``stash_sha`` to its
current positional name immediately before acting. An entry that no longer
exists (dropped by another tool, or never ours) makes the operation a no-op.

Concurrent calls against the same repository are not serialised here;
positional names shift on every push/pop/drop, so callers must not overlap
mutations of one repository.
"""

from __future__ import annotations

import logging
import re

from shelfkit.core.git_ops import GitErrorKind, GitResult, run_git
from shelfkit.core.repository import Repository
from shelfkit.core.stash.listing import find_stash_by_sha
from shelfkit.core.stash.marker import build_marker_message
from shelfkit.errors import GitError

logger = logging.getLogger(__name__)

# Applied per line, without splitting stderr
_ERROR_LINE_RE = re.compile(r"^error: ", re.MULTILINE)

_BENIGN_EXIT_CODES = frozenset({0, 1})
_EXPECTED_APPLY_ERRORS = frozenset({GitErrorKind.MERGE_CONFLICTS})


async def stage_untracked_files(repository: Repository) -> list[str]:
    """Stage untracked, non-ignored files so ``git stash push`` captures them.

    Returns:
        Paths that were staged (empty when there were none)
    """
    result = await run_git(
        ["ls-files", "-z", "--others", "--exclude-standard"],
        repository.path,
        "getUntrackedFilesToStage",
    )

    untracked_files = [path for path in result.stdout.split("\0") if path]
    if untracked_files:
        # paths go through stdin; large trees would overflow the argument list
        await run_git(
            ["add", "--pathspec-from-file=-", "--pathspec-file-nul"],
            repository.path,
            "stageUntrackedFiles",
            input_text="".join(f"{path}\0" for path in untracked_files),
        )
    return untracked_files


async def create_stash(repository: Repository, branch_name: str) -> bool:
    """Stash the working directory changes for ``branch_name``.

    Untracked files are staged first so they are stashed too. The created
    entry is not returned; use ``find_owned_stash_for_branch`` to locate it.

    Args:
        repository: Repository whose working directory is stashed
        branch_name: Branch recorded in the entry's marker

    Returns:
        True once git reported a usable stash

    Raises:
        GitError: If git reported an ``error:`` line on exit code 1, or any
            other failure
    """
    await stage_untracked_files(repository)

    message = build_marker_message(branch_name)
    args = ["stash", "push", "-m", message]
    result = await run_git(
        args,
        repository.path,
        "createStashEntry",
        success_exit_codes=_BENIGN_EXIT_CODES,
    )

    if result.exit_code == 1:
        if _ERROR_LINE_RE.search(result.stderr):
            raise GitError(result, args)

        # no error lines: the stash was created, git only warned
        logger.info(
            "[createStashEntry] a stash was created successfully but exit code %d reported. stderr: %s",
            result.exit_code,
            result.stderr,
        )

    return True


async def drop_stash(repository: Repository, stash_sha: str) -> None:
    """Remove the shelfkit stash entry identified by ``stash_sha`` if it exists."""
    entry = await find_stash_by_sha(repository, stash_sha)
    if entry is None:
        return

    await run_git(["stash", "drop", entry.name], repository.path, "dropStashEntry")


async def _apply_entry(repository: Repository, args: list[str], name: str) -> GitResult:
    result = await run_git(
        args,
        repository.path,
        name,
        success_exit_codes=_BENIGN_EXIT_CODES,
        expected_errors=_EXPECTED_APPLY_ERRORS,
    )
    if result.exit_code == 1 and result.stderr:
        raise GitError(result, args)
    return result


async def pop_stash(repository: Repository, stash_sha: str) -> None:
    """Apply the shelfkit stash entry ``stash_sha`` and remove it from the stack.

    git does not drop an entry whose application reported exit code 1
    (e.g. conflicts in the working directory). When that happens without
    any stderr output the changes were applied, so the entry is dropped
    explicitly with ``drop_stash``.

    Raises:
        GitError: If git wrote to stderr on exit code 1 (the entry is kept),
            or failed outright
    """
    entry = await find_stash_by_sha(repository, stash_sha)
    if entry is None:
        return

    result = await _apply_entry(
        repository,
        ["stash", "pop", "--quiet", entry.name],
        "popStashEntry",
    )

    if result.exit_code == 1:
        logger.info(
            "[popStashEntry] a stash was popped successfully but exit code %d reported.",
            result.exit_code,
        )
        await drop_stash(repository, stash_sha)


async def apply_stash(repository: Repository, stash_sha: str) -> None:
    """Apply the shelfkit stash entry ``stash_sha`` and keep it on the stack.

    Raises:
        GitError: If git wrote to stderr on exit code 1, or failed outright
    """
    entry = await find_stash_by_sha(repository, stash_sha)
    if entry is None:
        return

    result = await _apply_entry(
        repository,
        ["stash", "apply", "--quiet", entry.name],
        "applyStashEntry",
    )
    if result.exit_code == 1:
        logger.info(
            "[applyStashEntry] a stash was applied but exit code %d reported.",
            result.exit_code,
        )


__all__ = [
    "apply_stash",
    "create_stash",
    "drop_stash",
    "pop_stash",
    "stage_untracked_files",
]
