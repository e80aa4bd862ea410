"""Configuration domain models.

Each section of the TOML configuration file maps onto one of these models.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from xlsxsender.shared.constants import Logging, StatusFile, Workbook


class ScanSettings(BaseModel):
    """Scanning configuration.

    Controls which files are listed and where the status sidecar lives.
    """

    target_extension: str = Field(
        default=Workbook.TARGET_EXTENSION,
        description="File extension to list (case-insensitive suffix match)",
    )
    status_filename: str = Field(
        default=StatusFile.FILENAME,
        description="Name of the status sidecar inside the source folder",
    )
    extract_metadata: bool = Field(
        default=True,
        description="Read the last-saved-by author from each workbook",
    )

    @field_validator("target_extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            msg = "target_extension must not be empty"
            raise ValueError(msg)
        return value if value.startswith(".") else f".{value}"

    @field_validator("status_filename")
    @classmethod
    def _plain_filename(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            msg = "status_filename must be a plain file name"
            raise ValueError(msg)
        return value


class TransferSettings(BaseModel):
    """Send/discard configuration."""

    mark_failed_as_sent: bool = Field(
        default=True,
        description="Record 'sent' for every attempted file, even when its copy failed",
    )
    atomic_writes: bool = Field(
        default=False,
        description="Write files through a temporary file and rename it into place",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    format_string: str = Field(
        default=Logging.DEFAULT_FORMAT,
        description="Log format string",
        alias="format",
    )
    file: str = Field(default=Logging.DEFAULT_FILE_PATH, description="Log file path")
    max_bytes: int = Field(
        default=Logging.MAX_BYTES,
        description="Maximum log file size in bytes",
    )
    backup_count: int = Field(
        default=Logging.BACKUP_COUNT,
        description="Number of backup log files to keep",
    )
    console_output: bool = Field(default=True, description="Enable console logging")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()


__all__ = ["LoggingSettings", "ScanSettings", "TransferSettings"]
