"""Stash entry read models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from shelfkit.core.file_changes import CommittedFileChange


class StashedChangesLoadState(str, Enum):
    """Load state of a stash entry's file list."""

    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


@dataclass(frozen=True)
class StashedFileChanges:
    """Lazily loaded file list of a stash entry.

    ``files`` is only meaningful when ``kind`` is LOADED.
    """

    kind: StashedChangesLoadState = StashedChangesLoadState.NOT_LOADED
    files: tuple[CommittedFileChange, ...] = ()

    @classmethod
    def not_loaded(cls) -> "StashedFileChanges":
        return cls(StashedChangesLoadState.NOT_LOADED)

    @classmethod
    def loading(cls) -> "StashedFileChanges":
        return cls(StashedChangesLoadState.LOADING)

    @classmethod
    def loaded(cls, files: list[CommittedFileChange] | tuple[CommittedFileChange, ...]) -> "StashedFileChanges":
        return cls(StashedChangesLoadState.LOADED, tuple(files))

    @classmethod
    def load_failed(cls) -> "StashedFileChanges":
        return cls(StashedChangesLoadState.LOAD_FAILED)


@dataclass(frozen=True)
class StashEntry:
    """A stash entry created by shelfkit.

    Attributes:
        name: Positional reference (``stash@{0}``); shifts whenever the stack changes
        stash_sha: Commit hash of the entry; stable for the entry's lifetime
        branch_name: Branch the changes were shelved from
        files: Lazily loaded file list
    """

    name: str
    stash_sha: str
    branch_name: str
    files: StashedFileChanges = field(default_factory=StashedFileChanges.not_loaded)

    def to_dict(self) -> dict[str, object]:
        """Serialize to JSON-compatible dict."""
        data: dict[str, object] = {
            "name": self.name,
            "stashSha": self.stash_sha,
            "branchName": self.branch_name,
            "filesState": self.files.kind.value,
        }
        if self.files.kind == StashedChangesLoadState.LOADED:
            data["files"] = [change.to_dict() for change in self.files.files]
        return data


@dataclass(frozen=True)
class StashListing:
    """Owned stash entries plus the size of the whole stash stack.

    Attributes:
        entries: Entries created by shelfkit, most recent first
        total_count: Reflog records minus the boundary record the walk is
            assumed to emit; current git emits none, so this trails the
            real stack size by one
        record_count: Reflog records git actually returned
    """

    entries: tuple[StashEntry, ...] = ()
    total_count: int = 0
    record_count: int = 0

    @property
    def foreign_count(self) -> int:
        """``total_count`` minus the owned entries, never below zero."""
        return max(self.total_count - len(self.entries), 0)

    @property
    def other_record_count(self) -> int:
        """Reflog records that do not belong to shelfkit."""
        return max(self.record_count - len(self.entries), 0)


__all__ = [
    "StashEntry",
    "StashListing",
    "StashedChangesLoadState",
    "StashedFileChanges",
]
