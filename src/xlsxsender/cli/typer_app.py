"""
xlsx-sender Typer CLI Application

Commands:
    scan     List pending workbooks of a source folder
    send     Copy selected workbooks to a destination and mark them sent
    discard  Mark selected workbooks as discarded
    status   Show what the status file of a source folder records
"""

from __future__ import annotations

from pathlib import Path

import typer

from xlsxsender.cli.common.context import CliContext, LogLevel, set_cli_context
from xlsxsender.cli.common.options import (
    AllOption,
    ConfigOption,
    DestinationArgument,
    FileOption,
    JsonOutputOption,
    LogLevelOption,
    SourceArgument,
    VerboseOption,
    VersionOption,
    YesOption,
)
from xlsxsender.cli.handlers import (
    current_settings,
    handle_discard,
    handle_scan,
    handle_send,
    handle_status,
)
from xlsxsender.core.logging import setup_logging
from xlsxsender.shared.constants import CLICommands, CLIDefaults, CLIHelp
from xlsxsender.shared.errors import XlsxSenderError


def main_callback(
    verbose: int,
    log_level: LogLevel,
    json_output: bool,
    config_path: Path | None = None,
) -> None:
    """
    Process the global options.

    Sets up the CLI context, then configures logging from the loaded
    settings, with ``--verbose``/``--log-level`` taking precedence.
    """
    context = CliContext(
        verbose=verbose,
        log_level=log_level,
        json_output=json_output,
        config_path=config_path,
    )
    set_cli_context(context)

    settings = current_settings()
    setup_logging(settings.logging, log_level=context.get_effective_log_level())


app = typer.Typer(
    name=CLIHelp.APP_NAME,
    help=CLIHelp.APP_DESCRIPTION,
    add_completion=False,
    rich_markup_mode=CLIHelp.APP_STYLE,
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: VerboseOption = 0,
    log_level: LogLevelOption = LogLevel.INFO,
    json_output: JsonOutputOption = False,
    config: ConfigOption = None,
    version: VersionOption = False,
) -> None:
    """Main CLI callback with error handling."""
    try:
        main_callback(verbose, log_level, json_output, config)
    except XlsxSenderError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(CLIDefaults.EXIT_ERROR) from e


@app.command(CLICommands.SCAN)
def scan_command(source: SourceArgument = None) -> None:
    """
    List the workbooks of SOURCE that were neither sent nor discarded.

    Only files directly inside SOURCE are listed, most recently modified
    first.

    Examples:
        xlsx-sender scan ~/Reports
        xlsx-sender --json scan ~/Reports
    """
    raise typer.Exit(handle_scan(source))


@app.command(CLICommands.SEND)
def send_command(
    source: SourceArgument = None,
    destination: DestinationArgument = None,
    files: FileOption = None,
    select_all: AllOption = False,
    yes: YesOption = False,
) -> None:
    """
    Copy selected workbooks from SOURCE to DESTINATION and mark them sent.

    Every attempted file is recorded as sent, even if its copy failed,
    unless transfer.mark_failed_as_sent is disabled in the configuration.

    Examples:
        xlsx-sender send ~/Reports /mnt/cloud --all --yes
        xlsx-sender send ~/Reports /mnt/cloud -f q1.xlsx -f q2.xlsx
    """
    raise typer.Exit(handle_send(source, destination, files, select_all, yes))


@app.command(CLICommands.DISCARD)
def discard_command(
    source: SourceArgument = None,
    files: FileOption = None,
    select_all: AllOption = False,
    yes: YesOption = False,
) -> None:
    """
    Mark selected workbooks of SOURCE as discarded so they are no longer listed.

    Examples:
        xlsx-sender discard ~/Reports -f draft.xlsx --yes
    """
    raise typer.Exit(handle_discard(source, files, select_all, yes))


@app.command(CLICommands.STATUS)
def status_command(source: SourceArgument = None) -> None:
    """Show the files recorded as sent or discarded in SOURCE."""
    raise typer.Exit(handle_status(source))


def run() -> None:
    """Console script entry point."""
    app()
