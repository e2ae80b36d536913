"""Exception hierarchy for shelfkit."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from shelfkit.core.git_ops import GitErrorKind, GitResult


class ShelfkitError(Exception):
    """Base error for shelfkit operations."""

    pass


class ConfigError(ShelfkitError):
    """Invalid shelfkit configuration."""

    pass


class GitError(ShelfkitError):
    """A git invocation failed in a way the caller did not accept.

    Attributes:
        args_list: Arguments passed to git (without the executable)
        result: Captured exit code and output of the failed invocation
        kind: Pre-classified error kind, or None when unrecognised
        description: Human readable summary of the failure
    """

    def __init__(self, result: GitResult, args: Sequence[str]) -> None:
        self.args_list = list(args)
        self.result = result
        self.kind: GitErrorKind | None = result.git_error
        self.description = _describe(result)
        super().__init__(f"git {' '.join(self.args_list)}: {self.description}")


def _describe(result: GitResult) -> str:
    if result.git_error is not None:
        return result.git_error.description
    output = result.stderr.strip() or result.stdout.strip()
    if output:
        return output
    return f"exited with code {result.exit_code}"


__all__ = ["ConfigError", "GitError", "ShelfkitError"]
