"""
Data models for xlsx-sender core operations.

This module defines the fundamental data structures shared by the status
store, the scanner and the transfer operations.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from xlsxsender.shared.constants import StatusFile


class FileStatus(str, Enum):
    """Handled states recorded in the status sidecar."""

    SENT = "sent"
    DISCARDED = "discarded"


# Mapping of identity key -> handled status
StatusMap = Dict[str, FileStatus]


def make_identity_key(name: str, size: int, last_modified_ms: int) -> str:
    """Build the identity key of a file from its name, size and mtime.

    Two scans of an unmodified file produce the same key; any change to the
    size or modification time produces a different one.

    Example:
        >>> make_identity_key("a.xlsx", 100, 1672531200000)
        'a.xlsx|100|1672531200000'
    """
    sep = StatusFile.KEY_SEPARATOR
    return f"{name}{sep}{size}{sep}{last_modified_ms}"


@dataclass(frozen=True)
class FileStat:
    """Size and modification time of a file as reported by its handle."""

    size: int
    last_modified_ms: int


class FileEntry(BaseModel):
    """
    One discovered candidate file.

    The ``handle`` lets the transfer operation read the file's bytes later.
    It is excluded from serialization.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., min_length=1, description="File name, unique within a scan")
    size: int = Field(..., ge=0, description="File size in bytes")
    last_modified_ms: int = Field(
        ...,
        description="Last modification time as epoch milliseconds",
    )
    last_saved_by: str | None = Field(
        default=None,
        description="Author who last saved the workbook, when readable",
    )
    handle: Any = Field(default=None, exclude=True, repr=False)

    @property
    def identity_key(self) -> str:
        """Identity key used for status tracking across scans."""
        return make_identity_key(self.name, self.size, self.last_modified_ms)

    @property
    def last_modified(self) -> datetime:
        """Modification time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.last_modified_ms / 1000, tz=timezone.utc)

    def __str__(self) -> str:
        """Return a human-readable string representation."""
        return f"FileEntry: {self.name} ({self.size} bytes)"


class TransferResult(BaseModel):
    """Outcome of sending a selection to a destination folder."""

    copied: list[str] = Field(default_factory=list, description="Names copied")
    failed: list[str] = Field(default_factory=list, description="Names that failed")
    marked: list[str] = Field(
        default_factory=list,
        description="Names recorded as sent in the status sidecar",
    )
    status_persisted: bool = Field(
        default=True,
        description="False when the status sidecar could not be written",
    )
    status_error: str | None = Field(default=None, description="Why the save failed")

    @property
    def copied_count(self) -> int:
        return len(self.copied)

    @property
    def failed_count(self) -> int:
        return len(self.failed)


class DiscardResult(BaseModel):
    """Outcome of discarding a selection."""

    discarded: list[str] = Field(default_factory=list, description="Names discarded")
    status_persisted: bool = Field(default=True)
    status_error: str | None = Field(default=None)

    @property
    def discarded_count(self) -> int:
        return len(self.discarded)


__all__ = [
    "DiscardResult",
    "FileEntry",
    "FileStat",
    "FileStatus",
    "StatusMap",
    "TransferResult",
    "make_identity_key",
]
