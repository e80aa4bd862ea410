"""Shared building blocks: errors and constants."""

from .errors import (
    ApplicationError,
    DestinationPermissionError,
    DomainError,
    ErrorCode,
    ErrorContext,
    FolderAccessError,
    FolderSelectionCancelled,
    InfrastructureError,
    StatusNotPersistedError,
    XlsxSenderError,
)

__all__ = [
    "ApplicationError",
    "DestinationPermissionError",
    "DomainError",
    "ErrorCode",
    "ErrorContext",
    "FolderAccessError",
    "FolderSelectionCancelled",
    "InfrastructureError",
    "StatusNotPersistedError",
    "XlsxSenderError",
]
