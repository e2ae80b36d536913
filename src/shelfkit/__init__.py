"""shelfkit - shelve working directory changes as marked git stash entries."""

__version__ = "0.3.0"
