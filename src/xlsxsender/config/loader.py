"""Locating and caching the configuration.

An explicit ``--config`` file wins; otherwise the first existing default
location is used, and without any file the environment and built-in
defaults apply. The loaded ``Settings`` is cached process-wide.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from pydantic import ValidationError

from xlsxsender.config.settings import Settings
from xlsxsender.shared.constants import Application
from xlsxsender.shared.errors import create_config_error

logger = logging.getLogger(__name__)


def default_config_paths() -> list[Path]:
    """Locations searched, in order, when no explicit path is given."""
    return [
        Path("config/config.toml"),
        Path("config.toml"),
        Path.home() / Application.HOME_DIR / "config.toml",
    ]


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML configuration file or the environment.

    Args:
        config_path: Optional path to a TOML file. If None, the default
            locations are tried before falling back to environment variables
            and built-in defaults.

    Returns:
        The loaded settings.

    Raises:
        ApplicationError: If the configuration file exists but is invalid
    """
    candidates = [Path(config_path)] if config_path else default_config_paths()

    for candidate in candidates:
        if not candidate.exists():
            continue
        try:
            return Settings.from_toml_file(candidate)
        except (ValueError, ValidationError, OSError) as e:
            # toml.TomlDecodeError is a ValueError
            raise create_config_error(
                f"Invalid configuration file {candidate}: {e}",
                config_key=str(candidate),
                operation="load_settings",
                original_error=e,
            ) from e

    if config_path:
        raise create_config_error(
            f"Configuration file not found: {config_path}",
            config_key=str(config_path),
            operation="load_settings",
        )

    return Settings()


class SettingsLoader:
    """Process-wide ``Settings`` cache, loaded on first use.

    Double-checked locking keeps the common read path lock free.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings()

        return self._instance


_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config() -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config()


__all__ = [
    "SettingsLoader",
    "default_config_paths",
    "get_config",
    "load_settings",
    "reload_config",
]
