"""CLI error handling decorator.

Command handlers raise; this decorator turns the exception into one
message (Rich or JSON) and an exit code, so handlers carry no repetitive
try/except blocks.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, TypeVar

from rich.console import Console

from xlsxsender.cli.common.context import get_cli_context
from xlsxsender.cli.json_formatter import format_json_output, write_json_output
from xlsxsender.shared.constants import CLIDefaults
from xlsxsender.shared.errors import ErrorCode, FolderSelectionCancelled, XlsxSenderError

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., int])

error_console = Console(stderr=True)


def handle_cli_errors(operation: str, command_name: str) -> Callable[[F], F]:
    """Decorator for standardized CLI error handling.

    The decorator:
    1. Treats a cancelled folder prompt as a silent, successful exit
    2. Reports XlsxSenderError subclasses with their message
    3. Logs and reports anything unexpected
    4. Returns the exit code instead of raising

    Args:
        operation: Operation name for log context (e.g., "handle_scan")
        command_name: CLI command name used in JSON output

    Example:
        >>> @handle_cli_errors(operation="handle_scan", command_name="scan")
        ... def handle_scan(source):
        ...     return run_scan(source)  # No try-except needed!
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)

            except FolderSelectionCancelled:
                logger.debug("%s: folder selection cancelled", operation)
                return CLIDefaults.EXIT_SUCCESS

            except XlsxSenderError as e:
                logger.error("%s failed: %s", operation, e, extra={"error": e.to_dict()})
                _output_error(command_name, e.message, e.code.value)
                return CLIDefaults.EXIT_ERROR

            except Exception as e:  # noqa: BLE001  # pylint: disable=broad-exception-caught
                # Must catch all exceptions to provide user-friendly CLI error messages
                logger.exception("Unexpected error in %s", operation)
                _output_error(
                    command_name,
                    f"Unexpected error: {e}",
                    ErrorCode.CLI_UNEXPECTED_ERROR.value,
                )
                return CLIDefaults.EXIT_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def _output_error(command_name: str, message: str, code: str) -> None:
    """Output an error message to JSON or the Rich console."""
    if get_cli_context().is_json_output_enabled():
        write_json_output(format_json_output(False, command_name, errors=[f"{code}: {message}"]))
    else:
        error_console.print(f"[red]Error:[/red] {message}", highlight=False)
