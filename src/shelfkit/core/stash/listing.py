"""Listing and lookup of stash entries created by shelfkit.

The stash stack is read from the ``refs/stash`` reflog. Each record holds
three fields (positional name, commit hash, subject) separated by 0x1F and
records are NUL-terminated. Neither byte occurs in hashes, reflog selectors
or one-line subjects.

Nothing is cached: positional names shift whenever anyone pushes, pops or
drops a stash, so every lookup re-reads the reflog. Callers should hold on
to ``stash_sha`` and resolve it again when they need to act.
"""

from __future__ import annotations

import logging

from shelfkit.core.git_ops import run_git
from shelfkit.core.repository import Repository
from shelfkit.core.stash.marker import extract_branch_from_message
from shelfkit.core.stash.models import StashEntry, StashListing

logger = logging.getLogger(__name__)

FIELD_DELIMITER = "\x1f"
RECORD_TERMINATOR = "\0"
STASH_REF = "refs/stash"

# git exits with 128 when refs/stash does not exist (or the path is not a repository)
NO_STASH_REF_EXIT_CODE = 128

_LOG_FORMAT = "%x1F".join(["%gd", "%H", "%gs"])


async def list_stashes(repository: Repository) -> StashListing:
    """Get shelfkit's stash entries and the total number of entries.

    Entries are returned in git's reflog order (LIFO), so the first entry
    is the most recently created one.

    Args:
        repository: Repository to inspect

    Returns:
        StashListing with owned entries and the count of all entries
    """
    result = await run_git(
        ["log", "-g", "-z", f"--pretty={_LOG_FORMAT}", STASH_REF],
        repository.path,
        "getStashEntries",
        success_exit_codes=frozenset({0, NO_STASH_REF_EXIT_CODE}),
    )

    if result.exit_code == NO_STASH_REF_EXIT_CODE:
        return StashListing(entries=(), total_count=0)

    records = [record for record in result.stdout.split(RECORD_TERMINATOR) if record != ""]

    entries: list[StashEntry] = []
    for record in records:
        pieces = record.split(FIELD_DELIMITER)
        if len(pieces) != 3:
            logger.debug("Discarding malformed stash reflog record: %r", record)
            continue

        name, stash_sha, message = pieces
        branch_name = extract_branch_from_message(message)
        if branch_name is not None:
            entries.append(StashEntry(name=name, stash_sha=stash_sha, branch_name=branch_name))

    # Counted as if the walk yielded one boundary record on top of the real
    # entries. git 2.39 emits none; record_count carries the real figure.
    total_count = max(len(records) - 1, 0)
    return StashListing(entries=tuple(entries), total_count=total_count, record_count=len(records))


async def find_owned_stash_for_branch(repository: Repository, branch_name: str) -> StashEntry | None:
    """Return the most recent shelfkit stash entry for ``branch_name``."""
    listing = await list_stashes(repository)
    # LIFO order: the first match is the last entry created
    for entry in listing.entries:
        if entry.branch_name == branch_name:
            return entry
    return None


async def find_stash_by_sha(repository: Repository, stash_sha: str) -> StashEntry | None:
    """Return the shelfkit stash entry whose commit hash is ``stash_sha``."""
    listing = await list_stashes(repository)
    for entry in listing.entries:
        if entry.stash_sha == stash_sha:
            return entry
    return None


__all__ = [
    "FIELD_DELIMITER",
    "NO_STASH_REF_EXIT_CODE",
    "RECORD_TERMINATOR",
    "STASH_REF",
    "find_owned_stash_for_branch",
    "find_stash_by_sha",
    "list_stashes",
]
