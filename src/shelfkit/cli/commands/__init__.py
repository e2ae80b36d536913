"""shelfkit CLI commands."""
