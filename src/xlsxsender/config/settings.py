"""Top-level settings object.

Groups the ``scan``, ``transfer`` and ``logging`` sections of the TOML file.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from xlsxsender.config.models import LoggingSettings, ScanSettings, TransferSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings facade providing unified configuration access.

    Values come from a TOML file and can be overridden by environment
    variables such as ``XLSXSENDER_SCAN__TARGET_EXTENSION``.
    """

    model_config = SettingsConfigDict(
        env_prefix="XLSXSENDER_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    scan: ScanSettings = Field(default_factory=ScanSettings)
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Build settings from a TOML file.

        Values given in the file take precedence over environment variables.

        Raises:
            FileNotFoundError: If ``file_path`` does not exist
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration from %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Write the settings, including defaults, to a TOML file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(exclude_none=True, by_alias=True)

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)
