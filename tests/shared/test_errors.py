"""Tests for the error hierarchy."""

from enum import Enum
from pathlib import Path

import pytest

from xlsxsender.shared.errors import (
    ApplicationError,
    DestinationPermissionError,
    ErrorCode,
    ErrorContext,
    FolderSelectionCancelled,
    InfrastructureError,
    StatusNotPersistedError,
    XlsxSenderError,
    create_config_error,
    create_folder_access_error,
    create_permission_denied_error,
    create_status_not_persisted_error,
)


class _Color(Enum):
    RED = "red"


class TestErrorContext:
    """Test ErrorContext coercion."""

    def test_coerces_path_and_enum(self):
        context = ErrorContext(additional_data={"path": Path("a/b"), "color": _Color.RED, "n": 1})
        assert context.additional_data == {"path": str(Path("a/b")), "color": "red", "n": 1}

    def test_rejects_complex_values(self):
        with pytest.raises(TypeError):
            ErrorContext(additional_data={"items": [1, 2]})

    def test_safe_dict(self):
        context = ErrorContext(file_path="x.json", operation="save_status")
        assert context.safe_dict() == {
            "file_path": "x.json",
            "operation": "save_status",
            "additional_data": {},
        }


class TestErrors:
    """Test error classes and factories."""

    def test_str_includes_code(self):
        error = XlsxSenderError(ErrorCode.EMPTY_SELECTION, "nothing")
        assert str(error) == "EMPTY_SELECTION: nothing"

    def test_to_dict(self):
        cause = OSError("disk full")
        error = create_status_not_persisted_error("src/status.json", original_error=cause)

        data = error.to_dict()

        assert data["code"] == "STATUS_NOT_PERSISTED"
        assert data["context"]["file_path"] == "src/status.json"
        assert data["original_error"] == "disk full"

    def test_cancelled(self):
        error = FolderSelectionCancelled("destination")

        assert isinstance(error, ApplicationError)
        assert error.code == ErrorCode.FOLDER_SELECTION_CANCELLED
        assert error.purpose == "destination"

    def test_factories(self):
        assert isinstance(create_folder_access_error("/x", "gone"), InfrastructureError)

        denied = create_permission_denied_error("dest", operation="send")
        assert isinstance(denied, DestinationPermissionError)
        assert denied.message == "Permission denied to write into: dest"

        assert isinstance(create_status_not_persisted_error("p"), StatusNotPersistedError)

        config = create_config_error("bad", config_key="scan")
        assert config.code == ErrorCode.CONFIG_ERROR
        assert config.context.additional_data == {"config_key": "scan"}
