"""
Stash Management
================

Versioned, LIFO collection of shelved change sets on top of git's stash.
Entries created by shelfkit carry an ownership marker in their message;
entries created by other tools are counted but otherwise ignored.

Usage:
    from shelfkit.core.stash import create_stash, find_owned_stash_for_branch, pop_stash

    await create_stash(repo, "feature-x")
    entry = await find_owned_stash_for_branch(repo, "feature-x")
    await pop_stash(repo, entry.stash_sha)
"""

from __future__ import annotations

# Marker
from .marker import (
    STASH_ENTRY_MARKER,
    build_marker_message,
    extract_branch_from_message,
)

# Models
from .models import (
    StashEntry,
    StashListing,
    StashedChangesLoadState,
    StashedFileChanges,
)

# Listing and lookup
from .listing import (
    find_owned_stash_for_branch,
    find_stash_by_sha,
    list_stashes,
)

# Mutations
from .mutations import (
    apply_stash,
    create_stash,
    drop_stash,
    pop_stash,
    stage_untracked_files,
)

# File lists
from .files import (
    get_stashed_files,
    load_stash_entry_files,
)

__all__ = [
    # Marker
    "STASH_ENTRY_MARKER",
    "build_marker_message",
    "extract_branch_from_message",
    # Models
    "StashEntry",
    "StashListing",
    "StashedChangesLoadState",
    "StashedFileChanges",
    # Listing and lookup
    "find_owned_stash_for_branch",
    "find_stash_by_sha",
    "list_stashes",
    # Mutations
    "apply_stash",
    "create_stash",
    "drop_stash",
    "pop_stash",
    "stage_untracked_files",
    # File lists
    "get_stashed_files",
    "load_stash_entry_files",
]
