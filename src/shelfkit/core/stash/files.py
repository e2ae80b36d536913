"""Loading the file list of a stash entry on demand."""

from __future__ import annotations

import dataclasses
import logging

from shelfkit.core.file_changes import CommittedFileChange, parse_changed_files
from shelfkit.core.git_ops import run_git
from shelfkit.core.repository import Repository
from shelfkit.core.stash.models import StashEntry, StashedFileChanges
from shelfkit.errors import GitError

logger = logging.getLogger(__name__)


async def get_stashed_files(repository: Repository, stash_sha: str) -> list[CommittedFileChange]:
    """Return the files changed by the stash entry ``stash_sha``.

    Untracked files are part of the list because shelfkit stages them
    before stashing.

    Raises:
        GitError: If git cannot read the entry
    """
    result = await run_git(
        ["stash", "show", "--name-status", "-z", "-M", stash_sha],
        repository.path,
        "getStashedFiles",
    )
    return parse_changed_files(result.stdout, stash_sha)


async def load_stash_entry_files(repository: Repository, entry: StashEntry) -> StashEntry:
    """Return a copy of ``entry`` with its file list loaded.

    A git failure yields LOAD_FAILED rather than an exception, since the
    entry itself is still usable.
    """
    try:
        files = await get_stashed_files(repository, entry.stash_sha)
    except GitError as exc:
        logger.warning("Could not load files for stash %s: %s", entry.stash_sha, exc.description)
        return dataclasses.replace(entry, files=StashedFileChanges.load_failed())

    return dataclasses.replace(entry, files=StashedFileChanges.loaded(files))


__all__ = ["get_stashed_files", "load_stash_entry_files"]
