"""Tests for handle_cli_errors."""

import json

from xlsxsender.cli.common.context import CliContext, set_cli_context
from xlsxsender.cli.common.error_decorator import handle_cli_errors
from xlsxsender.shared.errors import FolderSelectionCancelled, create_folder_access_error


@handle_cli_errors(operation="handle_test", command_name="test")
def _raise(error):
    raise error


@handle_cli_errors(operation="handle_test", command_name="test")
def _succeed():
    return 0


class TestHandleCliErrors:
    """Test the error decorator."""

    def test_passes_exit_code_through(self):
        assert _succeed() == 0

    def test_cancel_is_silent_success(self, capsys):
        assert _raise(FolderSelectionCancelled()) == 0

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Error" not in captured.err

    def test_known_error(self, capsys):
        assert _raise(create_folder_access_error("/x", "Folder does not exist: /x")) == 1

        assert "Error: Folder does not exist: /x" in capsys.readouterr().err

    def test_unexpected_error(self, capsys):
        assert _raise(RuntimeError("kaboom")) == 1

        assert "Unexpected error: kaboom" in capsys.readouterr().err

    def test_json_error(self, capsysbinary):
        set_cli_context(CliContext(json_output=True))

        assert _raise(RuntimeError("kaboom")) == 1

        payload = json.loads(capsysbinary.readouterr().out)
        assert payload["command"] == "test"
        assert payload["success"] is False
        assert payload["errors"] == ["CLI_UNEXPECTED_ERROR: Unexpected error: kaboom"]
