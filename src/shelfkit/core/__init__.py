"""Core git and stash logic for shelfkit."""
