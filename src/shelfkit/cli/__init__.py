"""shelfkit command line entry point."""

from __future__ import annotations

import typer

from shelfkit.cli.commands.stash import app
from shelfkit.cli.helpers import configure_logging, console
from shelfkit.config import get_config
from shelfkit.errors import ConfigError


@app.callback()
def _bootstrap() -> None:
    """Shelve working directory changes as marked git stash entries."""
    try:
        config = get_config()
    except ConfigError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(1)
    configure_logging(config)


def main() -> None:
    """Console script entry point."""
    app()


__all__ = ["app", "main"]
