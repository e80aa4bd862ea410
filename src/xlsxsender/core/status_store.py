"""
Status sidecar management for xlsx-sender.

The sidecar is a small JSON object stored at the root of the source folder,
mapping each handled file's identity key to ``"sent"`` or ``"discarded"``.
It is the only record of what has already been handled.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable

from xlsxsender.core.folders import FolderHandle
from xlsxsender.core.models import FileEntry, FileStatus, StatusMap
from xlsxsender.shared.constants import StatusFile
from xlsxsender.shared.errors import create_status_not_persisted_error

logger = logging.getLogger(__name__)


def parse_status_map(text: str) -> StatusMap:
    """Parse sidecar content into a status map.

    Entries whose value is not a known status are dropped. Content that is
    not a JSON object yields an empty map.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
    """
    data = json.loads(text)
    if not isinstance(data, dict):
        logger.warning("Status file does not hold a JSON object; ignoring it")
        return {}

    status_map: StatusMap = {}
    for key, value in data.items():
        try:
            status_map[str(key)] = FileStatus(value)
        except ValueError:
            logger.warning("Ignoring unknown status %r for %s", value, key)
    return status_map


def dump_status_map(status_map: StatusMap) -> str:
    """Serialize a status map to indented, human-readable JSON."""
    plain = {key: FileStatus(value).value for key, value in status_map.items()}
    return json.dumps(plain, indent=StatusFile.INDENT, ensure_ascii=False)


class StatusStore:
    """
    Reads and writes the status sidecar of a source folder.

    Loading never fails: a missing, unreadable or malformed sidecar is an
    empty map. Saving fully overwrites the sidecar and reports failures as
    ``StatusNotPersistedError``.
    """

    def __init__(self, filename: str = StatusFile.FILENAME) -> None:
        """
        Initialize the StatusStore.

        Args:
            filename: Name of the sidecar file at the root of the source folder.
        """
        self.filename = filename

    def load(self, folder: FolderHandle) -> StatusMap:
        """
        Load the status map stored in ``folder``.

        Args:
            folder: Source folder holding the sidecar.

        Returns:
            The status map, or an empty map when the sidecar is absent or invalid.
        """
        try:
            handle = folder.get_file(self.filename, create=False)
            text = handle.read_all().decode(StatusFile.ENCODING)
            return parse_status_map(text)
        except FileNotFoundError:
            logger.debug("No status file in %s; starting with an empty map", folder.name)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Unreadable status file in %s, treating as empty: %s", folder.name, e)
        return {}

    def save(self, folder: FolderHandle, status_map: StatusMap) -> None:
        """
        Write ``status_map`` to the sidecar in ``folder``.

        The sidecar is created if absent and its prior content fully replaced.

        Raises:
            StatusNotPersistedError: If the sidecar could not be written.
        """
        location = f"{folder.name}/{self.filename}"
        try:
            payload = dump_status_map(status_map).encode(StatusFile.ENCODING)
            handle = folder.get_file(self.filename, create=True)
            with handle.open_writer() as writer:
                writer.write_all(payload)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save status file %s: %s", location, e)
            raise create_status_not_persisted_error(location, original_error=e) from e

        logger.debug("Saved %d status entries to %s", len(status_map), location)

    def mark(
        self,
        folder: FolderHandle,
        entries: Iterable[FileEntry],
        status: FileStatus,
    ) -> StatusMap:
        """
        Record ``status`` for every entry and persist the map in one save.

        The current sidecar is re-read first so entries recorded since the
        last scan are kept.

        Returns:
            The updated status map.

        Raises:
            StatusNotPersistedError: If the sidecar could not be written.
        """
        status_map = self.load(folder)
        for entry in entries:
            # key captured at scan time; not re-read from the file
            status_map[entry.identity_key] = status
        self.save(folder, status_map)
        return status_map


__all__ = ["StatusStore", "dump_status_map", "parse_status_map"]
