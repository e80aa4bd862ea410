"""Folder scanning for pending workbooks.

A scan lists the direct children of a source folder, keeps the files with
the target extension, drops those already recorded in the status sidecar
and returns the rest, most recently modified first.
"""

from __future__ import annotations

import logging

from xlsxsender.core.folders import EntryKind, FolderEntry, FolderHandle
from xlsxsender.core.metadata import extract_last_saved_by
from xlsxsender.core.models import FileEntry, FileStatus, StatusMap, make_identity_key
from xlsxsender.core.status_store import StatusStore
from xlsxsender.shared.constants import Workbook
from xlsxsender.shared.errors import create_folder_access_error

logger = logging.getLogger(__name__)

_HANDLED = frozenset(FileStatus)


def is_target_file(filename: str, extension: str = Workbook.TARGET_EXTENSION) -> bool:
    """Check if a file name ends with ``extension``, ignoring case.

    Example:
        >>> is_target_file("Report.XLSX")
        True
        >>> is_target_file("notes.txt")
        False
    """
    return filename.lower().endswith(extension.lower())


class FileScanner:
    """Lists the unhandled workbooks of a folder."""

    def __init__(
        self,
        status_store: StatusStore | None = None,
        extension: str = Workbook.TARGET_EXTENSION,
        *,
        extract_metadata: bool = True,
    ) -> None:
        self.status_store = status_store or StatusStore()
        self.extension = extension
        self.extract_metadata = extract_metadata

    def scan(self, folder: FolderHandle) -> list[FileEntry]:
        """Scan ``folder`` and return its pending workbooks.

        Args:
            folder: Source folder to scan. Subfolders are not visited.

        Returns:
            Entries sorted by modification time, most recent first.

        Raises:
            FolderAccessError: If the folder itself cannot be enumerated.
        """
        status_map = self.status_store.load(folder)

        try:
            children = list(folder.entries())
        except OSError as e:
            logger.error("Cannot enumerate folder %s: %s", folder.name, e)
            raise create_folder_access_error(
                folder.name,
                f"Cannot read folder '{folder.name}': {e.strerror or e}",
                operation="scan",
                original_error=e,
            ) from e

        results: list[FileEntry] = []
        skipped = 0
        for child in children:
            if child.kind != EntryKind.FILE or not is_target_file(child.name, self.extension):
                continue

            entry = self._build_entry(child, status_map)
            if entry is None:
                skipped += 1
                continue
            results.append(entry)

        results.sort(key=lambda e: e.last_modified_ms, reverse=True)
        logger.info(
            "Scanned %s: %d pending, %d already handled or unreadable",
            folder.name,
            len(results),
            skipped,
        )
        return results

    def _build_entry(self, child: FolderEntry, status_map: StatusMap) -> FileEntry | None:
        try:
            stat = child.handle.stat()
        except OSError as e:
            logger.warning("Skipping %s: cannot read its size or date: %s", child.name, e)
            return None

        key = make_identity_key(child.name, stat.size, stat.last_modified_ms)
        if status_map.get(key) in _HANDLED:
            logger.debug("Skipping %s: already %s", child.name, status_map[key].value)
            return None

        return FileEntry(
            name=child.name,
            size=stat.size,
            last_modified_ms=stat.last_modified_ms,
            last_saved_by=self._read_last_saved_by(child) if self.extract_metadata else None,
            handle=child.handle,
        )

    def _read_last_saved_by(self, child: FolderEntry) -> str | None:
        try:
            data = child.handle.read_all()
        except OSError as e:
            logger.warning("Cannot read %s for metadata: %s", child.name, e)
            return None
        return extract_last_saved_by(data)


__all__ = ["FileScanner", "is_target_file"]
