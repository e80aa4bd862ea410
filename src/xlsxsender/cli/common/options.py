"""
Reusable Typer options and arguments.

Global options (verbosity, log level, JSON output, version) are used by the
main callback; the folder and selection options are shared by the commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from xlsxsender.cli.common.context import LogLevel
from xlsxsender.shared.constants import CLIDefaults, CLIHelp

# Verbose option - count-based for multiple -v flags
VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Enable verbose output (equivalent to --log-level DEBUG).",
    ),
]

LogLevelOption = Annotated[
    LogLevel,
    typer.Option(
        "--log-level",
        case_sensitive=False,
        help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: INFO.",
    ),
]

JsonOutputOption = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Enable machine-readable JSON output instead of human-readable format.",
    ),
]

ConfigOption = Annotated[
    Optional[Path],
    typer.Option(
        "--config",
        "-c",
        help="Path to a TOML configuration file.",
        dir_okay=False,
    ),
]


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(CLIHelp.VERSION_TEXT.format(version=CLIDefaults.VERSION))
        raise typer.Exit


VersionOption = Annotated[
    bool,
    typer.Option(
        "--version",
        "-V",
        help="Show version information and exit.",
        callback=version_callback,
        is_eager=True,
    ),
]

# Folders are validated by the picker, so a missing path becomes a
# readable error instead of a usage error
SourceArgument = Annotated[
    Optional[Path],
    typer.Argument(help=CLIHelp.SOURCE_HELP, show_default=False),
]

DestinationArgument = Annotated[
    Optional[Path],
    typer.Argument(help=CLIHelp.DESTINATION_HELP, show_default=False),
]

FileOption = Annotated[
    Optional[list[str]],
    typer.Option("--file", "-f", help=CLIHelp.FILE_HELP, show_default=False),
]

AllOption = Annotated[bool, typer.Option("--all", "-a", help=CLIHelp.ALL_HELP)]

YesOption = Annotated[bool, typer.Option("--yes", "-y", help=CLIHelp.YES_HELP)]
