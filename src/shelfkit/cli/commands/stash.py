"""Stash commands - list, show, create, apply, pop and drop shelfkit entries."""

from __future__ import annotations

import asyncio
import json
from typing import Optional

import typer
from rich.table import Table
from typing_extensions import Annotated

from shelfkit.cli.helpers import console, get_repository_or_exit, resolve_branch_or_exit
from shelfkit.core.stash import (
    StashedChangesLoadState,
    apply_stash,
    create_stash,
    drop_stash,
    find_owned_stash_for_branch,
    find_stash_by_sha,
    list_stashes,
    load_stash_entry_files,
    pop_stash,
)
from shelfkit.errors import ShelfkitError

app = typer.Typer(
    name="shelfkit",
    help="Shelve working directory changes as marked git stash entries.",
    no_args_is_help=True,
)


def _output_error(exc: ShelfkitError) -> None:
    console.print(f"[red]Error:[/red] {exc}")


def list_command(as_json: bool = False) -> None:
    """Print shelfkit entries and stack counts."""
    repository = get_repository_or_exit()
    try:
        listing = asyncio.run(list_stashes(repository))
    except ShelfkitError as exc:
        _output_error(exc)
        raise typer.Exit(1)

    if as_json:
        print(
            json.dumps(
                {
                    "entries": [entry.to_dict() for entry in listing.entries],
                    "totalCount": listing.total_count,
                    "recordCount": listing.record_count,
                    "foreignCount": listing.other_record_count,
                },
                indent=2,
            )
        )
        return

    if not listing.entries:
        console.print("[dim]No shelfkit stash entries.[/dim]")
    else:
        table = Table(title=f"Stash entries in {repository.name}")
        table.add_column("Ref")
        table.add_column("Branch")
        table.add_column("SHA")
        for entry in listing.entries:
            table.add_row(entry.name, entry.branch_name, entry.stash_sha[:12])
        console.print(table)

    console.print(
        f"{len(listing.entries)} shelfkit entries, "
        f"{listing.other_record_count} other records in the stash reflog"
    )


def show_command(stash_sha: str, as_json: bool = False) -> None:
    """Print the files of a shelfkit entry."""
    repository = get_repository_or_exit()
    try:
        entry = asyncio.run(find_stash_by_sha(repository, stash_sha))
        if entry is None:
            console.print(f"[red]Error:[/red] No shelfkit stash entry with SHA {stash_sha}")
            raise typer.Exit(1)
        entry = asyncio.run(load_stash_entry_files(repository, entry))
    except ShelfkitError as exc:
        _output_error(exc)
        raise typer.Exit(1)

    if as_json:
        print(json.dumps(entry.to_dict(), indent=2))
        return

    if entry.files.kind != StashedChangesLoadState.LOADED:
        console.print(f"[yellow]Could not load files for {entry.name}[/yellow]")
        raise typer.Exit(1)

    console.print(f"[bold]{entry.name}[/bold] ({entry.branch_name})")
    for change in entry.files.files:
        if change.old_path:
            console.print(f"  {change.status.value:<12} {change.old_path} -> {change.path}")
        else:
            console.print(f"  {change.status.value:<12} {change.path}")


def create_command(branch: str | None = None) -> None:
    """Stash working directory changes for a branch."""
    repository = get_repository_or_exit()
    branch_name = resolve_branch_or_exit(repository, branch)
    try:
        previous = asyncio.run(find_owned_stash_for_branch(repository, branch_name))
        asyncio.run(create_stash(repository, branch_name))
        entry = asyncio.run(find_owned_stash_for_branch(repository, branch_name))
    except ShelfkitError as exc:
        _output_error(exc)
        raise typer.Exit(1)

    # git exits 0 without creating an entry when the tree is clean
    if entry is None or (previous is not None and entry.stash_sha == previous.stash_sha):
        console.print("[yellow]Nothing to stash.[/yellow]")
        return
    console.print(f"✅ Stashed changes for [bold]{branch_name}[/bold] as {entry.name} ([cyan]{entry.stash_sha[:12]}[/cyan])")


def _print_missing(stash_sha: str) -> None:
    console.print(f"[dim]No shelfkit stash entry with SHA {stash_sha}; nothing to do.[/dim]")


def pop_command(stash_sha: str | None = None, branch: str | None = None) -> None:
    """Pop a shelfkit entry, defaulting to the latest one for the branch."""
    repository = get_repository_or_exit()
    try:
        if stash_sha is None:
            branch_name = resolve_branch_or_exit(repository, branch)
            entry = asyncio.run(find_owned_stash_for_branch(repository, branch_name))
            if entry is None:
                console.print(f"[yellow]No shelfkit stash entry for {branch_name}.[/yellow]")
                return
            stash_sha = entry.stash_sha
        elif asyncio.run(find_stash_by_sha(repository, stash_sha)) is None:
            _print_missing(stash_sha)
            return
        asyncio.run(pop_stash(repository, stash_sha))
    except ShelfkitError as exc:
        _output_error(exc)
        raise typer.Exit(1)

    console.print(f"✅ Popped [cyan]{stash_sha[:12]}[/cyan]")


def apply_command(stash_sha: str) -> None:
    """Apply a shelfkit entry without removing it."""
    repository = get_repository_or_exit()
    try:
        if asyncio.run(find_stash_by_sha(repository, stash_sha)) is None:
            _print_missing(stash_sha)
            return
        asyncio.run(apply_stash(repository, stash_sha))
    except ShelfkitError as exc:
        _output_error(exc)
        raise typer.Exit(1)

    console.print(f"✅ Applied [cyan]{stash_sha[:12]}[/cyan]")


def drop_command(stash_sha: str) -> None:
    """Drop a shelfkit entry."""
    repository = get_repository_or_exit()
    try:
        if asyncio.run(find_stash_by_sha(repository, stash_sha)) is None:
            _print_missing(stash_sha)
            return
        asyncio.run(drop_stash(repository, stash_sha))
    except ShelfkitError as exc:
        _output_error(exc)
        raise typer.Exit(1)

    console.print(f"✅ Dropped [cyan]{stash_sha[:12]}[/cyan]")


@app.command(name="list")
def list_cmd(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """List stash entries created by shelfkit (most recent first)."""
    list_command(json_output)


@app.command(name="show")
def show_cmd(
    stash_sha: Annotated[str, typer.Argument(help="Full SHA of the stash entry")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the files changed by a stash entry."""
    show_command(stash_sha, json_output)


@app.command(name="create")
def create_cmd(
    branch: Annotated[
        Optional[str], typer.Option("--branch", help="Branch to record (default: current branch)")
    ] = None,
) -> None:
    """Stash all working directory changes, including untracked files."""
    create_command(branch)


@app.command(name="pop")
def pop_cmd(
    stash_sha: Annotated[Optional[str], typer.Argument(help="Full SHA of the stash entry")] = None,
    branch: Annotated[
        Optional[str], typer.Option("--branch", help="Branch whose latest entry to pop (default: current)")
    ] = None,
) -> None:
    """Apply a stash entry and remove it from the stack."""
    pop_command(stash_sha, branch)


@app.command(name="apply")
def apply_cmd(
    stash_sha: Annotated[str, typer.Argument(help="Full SHA of the stash entry")],
) -> None:
    """Apply a stash entry and keep it on the stack."""
    apply_command(stash_sha)


@app.command(name="drop")
def drop_cmd(
    stash_sha: Annotated[str, typer.Argument(help="Full SHA of the stash entry")],
) -> None:
    """Remove a stash entry (no-op if it no longer exists)."""
    drop_command(stash_sha)


__all__ = [
    "app",
    "apply_command",
    "create_command",
    "drop_command",
    "list_command",
    "pop_command",
    "show_command",
]
