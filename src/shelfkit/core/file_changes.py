"""Parsing of ``--name-status -z`` output into file change records.

Each record is a status token followed by one path, or by two paths (old,
new) for renames and copies. Rename and copy statuses carry a similarity
score (``R087``) which is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class AppFileStatusKind(str, Enum):
    """Kind of change applied to a file."""

    NEW = "new"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    TYPE_CHANGED = "type_changed"
    UNMERGED = "unmerged"
    UNKNOWN = "unknown"


_STATUS_CODES: dict[str, AppFileStatusKind] = {
    "A": AppFileStatusKind.NEW,
    "M": AppFileStatusKind.MODIFIED,
    "D": AppFileStatusKind.DELETED,
    "R": AppFileStatusKind.RENAMED,
    "C": AppFileStatusKind.COPIED,
    "T": AppFileStatusKind.TYPE_CHANGED,
    "U": AppFileStatusKind.UNMERGED,
}


@dataclass(frozen=True)
class CommittedFileChange:
    """A file changed by a commit (or stash entry)."""

    path: str
    status: AppFileStatusKind
    commitish: str
    old_path: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize to JSON-compatible dict."""
        return {
            "path": self.path,
            "status": self.status.value,
            "oldPath": self.old_path,
            "commitish": self.commitish,
        }


def map_status(code: str) -> AppFileStatusKind:
    """Map a git status letter (with optional score) to a status kind."""
    if not code:
        return AppFileStatusKind.UNKNOWN
    return _STATUS_CODES.get(code[0], AppFileStatusKind.UNKNOWN)


def parse_changed_files(stdout: str, commitish: str) -> list[CommittedFileChange]:
    """Parse ``git diff --name-status -z`` style output.

    Args:
        stdout: Raw NUL-separated output
        commitish: Commit the changes belong to

    Returns:
        File changes in the order git reported them
    """
    tokens = stdout.split("\0")
    # -z output ends with a terminator, leaving an empty trailing token
    if tokens and tokens[-1] == "":
        tokens.pop()

    changes: list[CommittedFileChange] = []
    index = 0
    while index < len(tokens):
        code = tokens[index].strip()
        index += 1
        if not code:
            continue
        status = map_status(code)

        if status in (AppFileStatusKind.RENAMED, AppFileStatusKind.COPIED):
            if index + 1 >= len(tokens):
                logger.debug("Truncated %s record in name-status output", code)
                break
            old_path, path = tokens[index], tokens[index + 1]
            index += 2
            changes.append(
                CommittedFileChange(path=path, status=status, commitish=commitish, old_path=old_path)
            )
            continue

        if index >= len(tokens):
            logger.debug("Truncated %s record in name-status output", code)
            break
        changes.append(CommittedFileChange(path=tokens[index], status=status, commitish=commitish))
        index += 1

    return changes


__all__ = [
    "AppFileStatusKind",
    "CommittedFileChange",
    "map_status",
    "parse_changed_files",
]
