"""Environment-driven configuration for shelfkit."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from shelfkit.errors import ConfigError

GIT_ENV_VAR = "SHELFKIT_GIT"
LOG_LEVEL_ENV_VAR = "SHELFKIT_LOG_LEVEL"

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class ShelfkitConfig:
    """Runtime settings.

    Attributes:
        git_executable: Name or path of the git binary to invoke
        log_level: Root log level name used by the CLI
    """

    git_executable: str = "git"
    log_level: str = "WARNING"

    @property
    def log_level_number(self) -> int:
        """Numeric logging level for ``log_level``."""
        return logging.getLevelName(self.log_level)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ShelfkitConfig":
        """Build configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            ShelfkitConfig populated from ``SHELFKIT_GIT`` and ``SHELFKIT_LOG_LEVEL``

        Raises:
            ConfigError: If the log level is not a standard level name
        """
        env = os.environ if environ is None else environ

        git_executable = env.get(GIT_ENV_VAR, "").strip() or "git"
        log_level = env.get(LOG_LEVEL_ENV_VAR, "").strip().upper() or "WARNING"
        if log_level not in _LOG_LEVELS:
            raise ConfigError(
                f"Invalid {LOG_LEVEL_ENV_VAR} '{log_level}'. "
                f"Expected one of: {', '.join(_LOG_LEVELS)}"
            )

        return cls(git_executable=git_executable, log_level=log_level)


_active_config: ShelfkitConfig | None = None


def get_config() -> ShelfkitConfig:
    """Return the process-wide configuration, loading it on first use."""
    global _active_config
    if _active_config is None:
        _active_config = ShelfkitConfig.from_env()
    return _active_config


def set_config(config: ShelfkitConfig | None) -> None:
    """Override the process-wide configuration (None resets to env lookup)."""
    global _active_config
    _active_config = config


__all__ = [
    "GIT_ENV_VAR",
    "LOG_LEVEL_ENV_VAR",
    "ShelfkitConfig",
    "get_config",
    "set_config",
]
