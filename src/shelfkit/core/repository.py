"""Repository model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Repository:
    """A git working tree shelfkit operates on."""

    path: Path

    def __post_init__(self) -> None:
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    @property
    def name(self) -> str:
        """Directory name of the working tree."""
        return self.path.name


__all__ = ["Repository"]
