"""Shared CLI helpers: console, logging setup and repository resolution."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from shelfkit.config import ShelfkitConfig
from shelfkit.core.git_ops import get_current_branch, is_git_repo
from shelfkit.core.repository import Repository

console = Console()
err_console = Console(stderr=True)


def configure_logging(config: ShelfkitConfig) -> None:
    """Route log records through rich at the configured level."""
    logging.basicConfig(
        level=config.log_level_number,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def get_repository_or_exit(path: Path | None = None) -> Repository:
    """Return the repository at ``path`` (default: cwd) or exit with an error."""
    target = (path or Path.cwd()).resolve()
    if not asyncio.run(is_git_repo(target)):
        console.print(f"[red]Error:[/red] Not a git repository: {target}")
        raise typer.Exit(1)
    return Repository(target)


def resolve_branch_or_exit(repository: Repository, branch: str | None) -> str:
    """Return ``branch`` or the repository's current branch.

    Raises:
        typer.Exit: If no branch was given and HEAD is detached
    """
    if branch:
        return branch
    current = asyncio.run(get_current_branch(repository.path))
    if current is None:
        console.print("[red]Error:[/red] Could not determine current branch (detached HEAD?)")
        console.print("[dim]Pass --branch explicitly.[/dim]")
        raise typer.Exit(1)
    return current


__all__ = [
    "configure_logging",
    "console",
    "err_console",
    "get_repository_or_exit",
    "resolve_branch_or_exit",
]
