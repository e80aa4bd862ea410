"""Errors raised by xlsx-sender.

Every error carries an ``ErrorCode``, a message meant for the user, an
``ErrorContext`` for logs and JSON output, and the exception that caused it
when there is one.

Layers:
    DomainError          selection rules (empty selection, ...)
    InfrastructureError  folders, files, permissions, the status sidecar
    ApplicationError     configuration and user flow (cancelled prompts)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Union

ContextValue = Union[str, int, float, bool]


class ErrorCode(str, Enum):
    """All error codes used by xlsx-sender."""

    # Folders
    FOLDER_SELECTION_CANCELLED = "FOLDER_SELECTION_CANCELLED"
    FOLDER_ACCESS_FAILED = "FOLDER_ACCESS_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"

    # Status sidecar
    STATUS_NOT_PERSISTED = "STATUS_NOT_PERSISTED"

    # Selection
    EMPTY_SELECTION = "EMPTY_SELECTION"

    # Configuration
    CONFIG_ERROR = "CONFIG_ERROR"

    # CLI
    CLI_UNEXPECTED_ERROR = "CLI_UNEXPECTED_ERROR"


def _to_context_value(key: str, value: Any) -> ContextValue:
    if isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    msg = f"Context value {key!r} has unsupported type {type(value).__name__}"
    raise TypeError(msg)


@dataclass(frozen=True)
class ErrorContext:
    """Where an error happened.

    ``additional_data`` only holds str, int, float or bool values so errors stay
    JSON serializable; paths and enums are converted on creation.

    Attributes:
        file_path: File or folder involved
        operation: Operation that failed (``scan``, ``save_status``, ...)
        additional_data: Extra key/value details
    """

    file_path: str | None = None
    operation: str | None = None
    additional_data: Dict[str, ContextValue] | None = None

    def __post_init__(self) -> None:
        if self.additional_data is None:
            return
        if not isinstance(self.additional_data, dict):
            msg = f"additional_data must be a dict, not {type(self.additional_data).__name__}"
            raise TypeError(msg)
        converted = {k: _to_context_value(k, v) for k, v in self.additional_data.items()}
        object.__setattr__(self, "additional_data", converted)

    def safe_dict(self) -> dict[str, Any]:
        """Context as a plain dict; unset fields are left out."""
        data: dict[str, Any] = {
            name: value
            for name, value in (("file_path", self.file_path), ("operation", self.operation))
            if value is not None
        }
        data["additional_data"] = dict(self.additional_data or {})
        return data


class XlsxSenderError(Exception):
    """Base class of every xlsx-sender error.

    Args:
        code: Error code
        message: Message shown to the user
        context: Where the error happened
        original_error: Exception that caused this one
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: ErrorContext | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = context if context is not None else ErrorContext()
        self.original_error = original_error

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Serializable form used in logs."""
        cause = self.original_error
        return {
            "code": self.code.value,
            "message": self.message,
            "context": self.context.safe_dict(),
            "original_error": None if cause is None else str(cause),
        }


class DomainError(XlsxSenderError):
    """A selection rule was violated, e.g. nothing pending was selected."""


class InfrastructureError(XlsxSenderError):
    """The file system refused: unreadable folder, failed write, denied permission."""


class ApplicationError(XlsxSenderError):
    """Configuration problems and user flow outcomes."""


class FolderSelectionCancelled(ApplicationError):
    """Raised when the user aborts a folder prompt.

    This is not a failure: callers abort the in-progress operation silently
    and leave their prior state untouched.
    """

    def __init__(self, purpose: str = "source") -> None:
        super().__init__(
            ErrorCode.FOLDER_SELECTION_CANCELLED,
            f"Selection of the {purpose} folder was cancelled",
            ErrorContext(operation="choose_folder", additional_data={"purpose": purpose}),
        )
        self.purpose = purpose


class FolderAccessError(InfrastructureError):
    """Raised when a folder cannot be chosen, opened or enumerated."""


class DestinationPermissionError(InfrastructureError):
    """Raised when write permission on the destination folder is denied."""


class StatusNotPersistedError(InfrastructureError):
    """Raised when the status sidecar could not be written.

    Handled files will reappear on the next scan; no content is lost.
    """


def create_folder_access_error(
    path: str,
    reason: str,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> FolderAccessError:
    """Folder that could not be opened or listed; ``reason`` is shown as is."""
    return FolderAccessError(
        ErrorCode.FOLDER_ACCESS_FAILED,
        reason,
        ErrorContext(file_path=path, operation=operation),
        original_error,
    )


def create_permission_denied_error(
    path: str,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> DestinationPermissionError:
    return DestinationPermissionError(
        ErrorCode.PERMISSION_DENIED,
        f"Permission denied to write into: {path}",
        ErrorContext(file_path=path, operation=operation),
        original_error,
    )


def create_status_not_persisted_error(
    path: str,
    original_error: Exception | None = None,
) -> StatusNotPersistedError:
    return StatusNotPersistedError(
        ErrorCode.STATUS_NOT_PERSISTED,
        f"Status not persisted to {path}; handled files will reappear on next scan",
        ErrorContext(file_path=path, operation="save_status"),
        original_error,
    )


def create_config_error(
    message: str,
    config_key: str | None = None,
    operation: str | None = None,
    original_error: Exception | None = None,
) -> ApplicationError:
    """Invalid or missing configuration; ``config_key`` names the file or setting."""
    return ApplicationError(
        ErrorCode.CONFIG_ERROR,
        message,
        ErrorContext(
            operation=operation,
            additional_data={"config_key": config_key} if config_key else None,
        ),
        original_error,
    )
