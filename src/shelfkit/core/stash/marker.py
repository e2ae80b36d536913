"""Ownership marker embedded in the message of stash entries shelfkit creates.

Messages take the form ``!!GitHub_Desktop<branch>``. The prefix predates
shelfkit and is kept as-is so existing entries are still recognised.
A branch name containing ``>`` does not round-trip.
"""

from __future__ import annotations

import re

STASH_ENTRY_MARKER = "!!GitHub_Desktop"

_MARKER_MESSAGE_RE = re.compile(re.escape(STASH_ENTRY_MARKER) + r"<(.+)>$")


def build_marker_message(branch_name: str) -> str:
    """Return the stash message marking an entry as created for ``branch_name``."""
    return f"{STASH_ENTRY_MARKER}<{branch_name}>"


def extract_branch_from_message(message: str) -> str | None:
    """Return the branch encoded in a stash message, or None if not ours."""
    match = _MARKER_MESSAGE_RE.search(message)
    if match is None or not match.group(1):
        return None
    return match.group(1)


__all__ = [
    "STASH_ENTRY_MARKER",
    "build_marker_message",
    "extract_branch_from_message",
]
