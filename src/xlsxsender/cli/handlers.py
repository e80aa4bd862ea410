"""Command handlers for the xlsx-sender CLI.

Each handler builds a ``SenderSession`` from the configured services, runs
one operation and renders the outcome with Rich or as JSON.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from xlsxsender.cli.common.context import get_cli_context
from xlsxsender.cli.common.error_decorator import handle_cli_errors
from xlsxsender.cli.json_formatter import format_json_output, write_json_output
from xlsxsender.cli.pickers import PromptFolderPicker
from xlsxsender.config import Settings, get_config, load_settings
from xlsxsender.core.folders import StaticFolderPicker
from xlsxsender.core.models import FileEntry, FileStatus
from xlsxsender.core.scanner import FileScanner
from xlsxsender.core.session import SenderSession, human_size
from xlsxsender.core.status_store import StatusStore
from xlsxsender.core.transfer import TransferService
from xlsxsender.shared.constants import CLICommands, CLIDefaults, FolderPurpose, StatusFile
from xlsxsender.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
    FolderSelectionCancelled,
    create_folder_access_error,
)

logger = logging.getLogger(__name__)

console = Console()


def current_settings() -> Settings:
    """Settings from --config when given, otherwise the global settings."""
    context = get_cli_context()
    if context.config_path is not None:
        return load_settings(context.config_path)
    return get_config()


def build_session(
    settings: Settings,
    source: Path | None = None,
    destination: Path | None = None,
) -> SenderSession:
    """Wire a session from settings; folders not given are prompted for."""
    atomic = settings.transfer.atomic_writes
    picker = StaticFolderPicker(
        {FolderPurpose.SOURCE: source, FolderPurpose.DESTINATION: destination},
        fallback=PromptFolderPicker(atomic_writes=atomic),
        atomic_writes=atomic,
    )
    store = StatusStore(settings.scan.status_filename)
    scanner = FileScanner(
        store,
        settings.scan.target_extension,
        extract_metadata=settings.scan.extract_metadata,
    )
    transfer = TransferService(
        store,
        mark_failed_as_sent=settings.transfer.mark_failed_as_sent,
    )
    return SenderSession(picker, scanner, transfer)


def open_source(session: SenderSession) -> None:
    """Pick and scan the source folder.

    Raises:
        FolderSelectionCancelled: If the user cancelled the prompt
        FolderAccessError: If the folder could not be opened or listed
    """
    if session.pick_source():
        return
    if session.error_message is None:
        raise FolderSelectionCancelled(FolderPurpose.SOURCE)
    raise create_folder_access_error(
        session.picked_folder_name or FolderPurpose.SOURCE,
        session.error_message,
        operation="open_source",
    )


def apply_selection(
    session: SenderSession,
    names: Sequence[str] | None,
    select_all: bool,
) -> list[str]:
    """Select files by name (or all of them).

    Returns:
        Requested names that are not in the listing.

    Raises:
        DomainError: If nothing ends up selected.
    """
    unknown: list[str] = []
    if select_all:
        session.select_all()
    else:
        listed = {entry.name for entry in session.files}
        for name in names or []:
            if name in listed:
                session.toggle(name, True)
            else:
                unknown.append(name)

    if session.selected_count == 0:
        raise DomainError(
            ErrorCode.EMPTY_SELECTION,
            "No pending file selected. Use --file NAME or --all.",
            ErrorContext(
                operation="apply_selection",
                additional_data={"unknown": ", ".join(unknown)} if unknown else None,
            ),
        )
    return unknown


def entry_to_dict(entry: FileEntry) -> dict[str, Any]:
    data = entry.model_dump()
    data["identity_key"] = entry.identity_key
    data["last_modified"] = entry.last_modified.isoformat()
    return data


def render_entries(entries: Sequence[FileEntry], folder_name: str | None) -> None:
    if not entries:
        console.print(f"[green]No pending files in {folder_name}.[/green]")
        return

    table = Table(title=f"Pending files in {folder_name} ({len(entries)})")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Modified")
    table.add_column("Last saved by")
    for entry in entries:
        table.add_row(
            entry.name,
            human_size(entry.size),
            entry.last_modified.astimezone().strftime("%Y-%m-%d %H:%M"),
            entry.last_saved_by or "-",
        )
    console.print(table)


def _warn_unknown(unknown: Sequence[str]) -> list[str]:
    warnings = [f"Not a pending file: {name}" for name in unknown]
    if not get_cli_context().is_json_output_enabled():
        for warning in warnings:
            console.print(f"[yellow]{warning}[/yellow]")
    return warnings


def _confirm(message: str, yes: bool) -> bool:
    if yes or get_cli_context().is_json_output_enabled():
        return True
    return typer.confirm(message, default=False)


@handle_cli_errors(operation="handle_scan", command_name=CLICommands.SCAN)
def handle_scan(source: Path | None) -> int:
    """List the pending workbooks of a source folder."""
    session = build_session(current_settings(), source)
    open_source(session)

    if get_cli_context().is_json_output_enabled():
        write_json_output(
            format_json_output(
                True,
                CLICommands.SCAN,
                data={
                    "folder": session.picked_folder_name,
                    "total_files": session.total_files,
                    "files": [entry_to_dict(entry) for entry in session.files],
                },
            )
        )
    else:
        render_entries(session.files, session.picked_folder_name)
    return CLIDefaults.EXIT_SUCCESS


@handle_cli_errors(operation="handle_send", command_name=CLICommands.SEND)
def handle_send(
    source: Path | None,
    destination: Path | None,
    names: Sequence[str] | None,
    select_all: bool,
    yes: bool,
) -> int:
    """Copy the selected workbooks to a destination and mark them sent."""
    session = build_session(current_settings(), source, destination)
    open_source(session)
    warnings = _warn_unknown(apply_selection(session, names, select_all))

    if not _confirm(f"Send {session.selected_count} file(s)?", yes):
        return CLIDefaults.EXIT_SUCCESS

    result = session.send_selected()
    if result is None:
        if session.error_message is None:
            # Destination prompt was cancelled
            return CLIDefaults.EXIT_SUCCESS
        raise create_folder_access_error(
            FolderPurpose.DESTINATION,
            session.error_message,
            operation="send",
        )

    if not result.status_persisted:
        warnings.append(result.status_error or "Status not persisted")

    if get_cli_context().is_json_output_enabled():
        data = result.model_dump()
        data.update(copied_count=result.copied_count, failed_count=result.failed_count)
        write_json_output(format_json_output(True, CLICommands.SEND, data=data, warnings=warnings))
    else:
        console.print(
            f"Done. Copied: [green]{result.copied_count}[/green], "
            f"failed: [red]{result.failed_count}[/red]."
        )
        for name in result.failed:
            console.print(f"  [red]failed[/red] {name}")
        if not result.status_persisted:
            console.print(f"[yellow]Warning:[/yellow] {result.status_error}")

    if not result.status_persisted:
        return CLIDefaults.EXIT_STATUS_NOT_PERSISTED
    return CLIDefaults.EXIT_SUCCESS if result.failed_count == 0 else CLIDefaults.EXIT_ERROR


@handle_cli_errors(operation="handle_discard", command_name=CLICommands.DISCARD)
def handle_discard(
    source: Path | None,
    names: Sequence[str] | None,
    select_all: bool,
    yes: bool,
) -> int:
    """Mark the selected workbooks as discarded."""
    session = build_session(current_settings(), source)
    open_source(session)
    warnings = _warn_unknown(apply_selection(session, names, select_all))

    if not _confirm(f"Discard {session.selected_count} file(s)?", yes):
        return CLIDefaults.EXIT_SUCCESS

    result = session.discard_selected()
    if result is None:
        return CLIDefaults.EXIT_SUCCESS

    if not result.status_persisted:
        warnings.append(result.status_error or "Status not persisted")

    if get_cli_context().is_json_output_enabled():
        data = result.model_dump()
        data["discarded_count"] = result.discarded_count
        write_json_output(format_json_output(True, CLICommands.DISCARD, data=data, warnings=warnings))
    else:
        console.print(f"Discarded [green]{result.discarded_count}[/green] file(s).")
        if not result.status_persisted:
            console.print(f"[yellow]Warning:[/yellow] {result.status_error}")

    if not result.status_persisted:
        return CLIDefaults.EXIT_STATUS_NOT_PERSISTED
    return CLIDefaults.EXIT_SUCCESS


@handle_cli_errors(operation="handle_status", command_name=CLICommands.STATUS)
def handle_status(source: Path | None) -> int:
    """Show what the status sidecar of a source folder records."""
    settings = current_settings()
    session = build_session(settings, source)
    folder = session.picker.choose_folder(FolderPurpose.SOURCE)
    status_map = session.scanner.status_store.load(folder)

    counts = {status.value: 0 for status in FileStatus}
    for status in status_map.values():
        counts[status.value] += 1

    if get_cli_context().is_json_output_enabled():
        write_json_output(
            format_json_output(
                True,
                CLICommands.STATUS,
                data={
                    "folder": folder.name,
                    "status_file": settings.scan.status_filename,
                    "counts": counts,
                    "entries": {key: value.value for key, value in status_map.items()},
                },
            )
        )
        return CLIDefaults.EXIT_SUCCESS

    if not status_map:
        console.print(f"No handled files recorded in {folder.name}.")
        return CLIDefaults.EXIT_SUCCESS

    table = Table(title=f"Handled files in {folder.name}")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Status")
    for key, status in sorted(status_map.items()):
        # Names may contain the separator; size and mtime never do
        parts = key.rsplit(StatusFile.KEY_SEPARATOR, 2)
        name, size = (parts[0], parts[1]) if len(parts) == 3 else (key, "?")
        table.add_row(name, size, status.value)
    console.print(table)
    console.print(f"sent: {counts['sent']}, discarded: {counts['discarded']}")
    return CLIDefaults.EXIT_SUCCESS
