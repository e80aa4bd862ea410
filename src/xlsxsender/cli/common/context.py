"""
Global CLI state shared by the main callback and the command handlers.

The callback stores one ``CliContext`` in a ``ContextVar``; handlers read it
to decide between Rich and JSON output and to find the ``--config`` file.
"""

from __future__ import annotations

import contextvars
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class LogLevel(str, Enum):
    """Values accepted by ``--log-level``."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CliContext(BaseModel):
    """
    Global options of one CLI invocation.

    Attributes:
        verbose: Number of ``-v`` flags; any value above 0 means DEBUG logging
        log_level: Level chosen with ``--log-level``
        json_output: True when ``--json`` was given
        config_path: File given with ``--config``, if any
    """

    model_config = ConfigDict(frozen=True)

    verbose: int = Field(default=0, ge=0)
    log_level: LogLevel = LogLevel.INFO
    json_output: bool = False
    config_path: Path | None = None

    def is_verbose(self) -> bool:
        return self.verbose > 0

    def get_effective_log_level(self) -> str:
        """``-v`` wins over ``--log-level``."""
        return LogLevel.DEBUG.value if self.is_verbose() else self.log_level.value

    def is_json_output_enabled(self) -> bool:
        return self.json_output


cli_context_var: contextvars.ContextVar[CliContext | None] = contextvars.ContextVar(
    "xlsxsender_cli_context",
    default=None,
)


def get_cli_context() -> CliContext:
    """
    Return the context set by the main callback.

    Handlers called directly (e.g. from tests) get the defaults.
    """
    return cli_context_var.get() or CliContext()


def set_cli_context(context: CliContext) -> None:
    cli_context_var.set(context)


def clear_cli_context() -> None:
    cli_context_var.set(None)
