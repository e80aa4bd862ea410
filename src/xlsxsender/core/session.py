"""Selection and lifecycle state for one sending session.

``SenderSession`` holds what a front end shows: the chosen source folder,
the pending files, the current selection and the last error. Front ends
read the plain attributes and subscribe to be told when they change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from xlsxsender.core.folders import FolderHandle, FolderPicker
from xlsxsender.core.models import DiscardResult, FileEntry, TransferResult
from xlsxsender.core.scanner import FileScanner
from xlsxsender.core.transfer import TransferService
from xlsxsender.shared.constants import FolderPurpose
from xlsxsender.shared.errors import (
    DestinationPermissionError,
    FolderSelectionCancelled,
    XlsxSenderError,
)

logger = logging.getLogger(__name__)

Listener = Callable[["SenderSession"], None]

_SIZE_UNITS = ("KB", "MB", "GB", "TB")


def human_size(num_bytes: int) -> str:
    """Format a byte count for display.

    Example:
        >>> human_size(512)
        '512 B'
        >>> human_size(1536)
        '1.5 KB'
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"
    value = num_bytes / 1024
    index = 0
    while value >= 1024 and index < len(_SIZE_UNITS) - 1:
        value /= 1024
        index += 1
    return f"{value:.1f} {_SIZE_UNITS[index]}"


class SenderSession:
    """Pending files and selection for one source folder.

    Attributes:
        source_folder: Folder chosen by the last successful pick, if any
        files: Pending entries of the source folder, most recent first
        selected: Names of the selected entries
        error_message: Last error to display, or None
        scanning: True while a scan is in progress
    """

    def __init__(
        self,
        picker: FolderPicker,
        scanner: FileScanner | None = None,
        transfer: TransferService | None = None,
    ) -> None:
        self.picker = picker
        self.scanner = scanner or FileScanner()
        self.transfer = transfer or TransferService(self.scanner.status_store)

        self.source_folder: FolderHandle | None = None
        self.files: list[FileEntry] = []
        self.selected: set[str] = set()
        self.error_message: str | None = None
        self.scanning = False
        self._listeners: list[Listener] = []

    # ===== Observers =====
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ===== Derived state =====
    @property
    def total_files(self) -> int:
        return len(self.files)

    @property
    def selected_count(self) -> int:
        return len(self.selected)

    @property
    def picked_folder_name(self) -> str | None:
        return self.source_folder.name if self.source_folder is not None else None

    def selected_entries(self) -> list[FileEntry]:
        """Entries of the current listing that are selected, in listing order."""
        return [entry for entry in self.files if entry.name in self.selected]

    # ===== Selection =====
    def is_selected(self, name: str) -> bool:
        return name in self.selected

    def toggle(self, name: str, checked: bool) -> None:
        if checked:
            self.selected.add(name)
        else:
            self.selected.discard(name)
        self._notify()

    def select_all(self) -> None:
        self.selected = {entry.name for entry in self.files}
        self._notify()

    def clear_selection(self) -> None:
        self.selected = set()
        self._notify()

    # ===== Operations =====
    def pick_source(self) -> bool:
        """Ask for a source folder and list its pending files.

        A cancelled prompt leaves the session unchanged. Any other failure
        is stored in ``error_message``.

        Returns:
            True if a folder was picked and scanned.
        """
        try:
            folder = self.picker.choose_folder(FolderPurpose.SOURCE)
        except FolderSelectionCancelled:
            logger.debug("Source folder selection cancelled")
            return False
        except XlsxSenderError as e:
            self.error_message = e.message
            self._notify()
            return False

        return self.load_folder(folder)

    def load_folder(self, folder: FolderHandle) -> bool:
        """Make ``folder`` the source folder and scan it."""
        self.error_message = None
        self.files = []
        self.selected = set()
        self.source_folder = folder
        self.scanning = True
        self._notify()

        try:
            self.files = self.scanner.scan(folder)
        except XlsxSenderError as e:
            self.error_message = e.message
            return False
        finally:
            self.scanning = False
            self._notify()

        return True

    def send_selected(self) -> TransferResult | None:
        """Send the selected files to a destination folder chosen now.

        A denied destination or a failed prompt is stored in
        ``error_message`` and nothing is copied or marked.

        Returns:
            The transfer result, or None when nothing was sent (empty
            selection, no source folder, cancelled or failed destination).
        """
        selected = self._selection_for("send")
        if not selected:
            return None

        try:
            destination = self.picker.choose_folder(FolderPurpose.DESTINATION)
        except FolderSelectionCancelled:
            logger.warning("Send cancelled by the user")
            return None
        except XlsxSenderError as e:
            self.error_message = e.message
            self._notify()
            return None

        try:
            result = self.transfer.send(selected, self.source_folder, destination)
        except DestinationPermissionError as e:
            self.error_message = e.message
            self._notify()
            return None

        self.error_message = result.status_error
        self._remove_handled(selected)
        return result

    def discard_selected(self) -> DiscardResult | None:
        """Mark the selected files as discarded.

        Returns:
            The discard result, or None when nothing was selected.
        """
        selected = self._selection_for("discard")
        if not selected:
            return None

        result = self.transfer.discard(selected, self.source_folder)
        self.error_message = result.status_error
        self._remove_handled(selected)
        return result

    def _selection_for(self, action: str) -> list[FileEntry]:
        if not self.selected:
            logger.warning("No file selected to %s", action)
            return []
        if self.source_folder is None:
            logger.warning("No source folder chosen; cannot %s", action)
            return []

        selected = self.selected_entries()
        if not selected:
            logger.warning("Selection does not match the current listing")
        return selected

    def _remove_handled(self, handled: list[FileEntry]) -> None:
        names = {entry.name for entry in handled}
        self.files = [entry for entry in self.files if entry.name not in names]
        self.selected = set()
        self._notify()


__all__ = ["SenderSession", "human_size"]
