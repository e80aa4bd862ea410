"""Send and discard operations.

Sending copies each selected workbook, by content, into a destination
folder and records it as ``sent``; discarding only records ``discarded``.
Either way the status sidecar of the source folder is saved once per batch.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from xlsxsender.core.folders import FolderHandle, PermissionState
from xlsxsender.core.models import DiscardResult, FileEntry, FileStatus, TransferResult
from xlsxsender.core.status_store import StatusStore
from xlsxsender.shared.constants import PermissionMode
from xlsxsender.shared.errors import StatusNotPersistedError, create_permission_denied_error

logger = logging.getLogger(__name__)


class TransferService:
    """Executes send and discard batches for one selection at a time.

    Attributes:
        status_store: Store used to record handled files
        mark_failed_as_sent: When True (the default), every attempted file is
            recorded as sent, including files whose copy failed. When False,
            only successfully copied files are recorded.
    """

    def __init__(
        self,
        status_store: StatusStore | None = None,
        *,
        mark_failed_as_sent: bool = True,
    ) -> None:
        self.status_store = status_store or StatusStore()
        self.mark_failed_as_sent = mark_failed_as_sent

    def send(
        self,
        entries: Sequence[FileEntry],
        source: FolderHandle,
        destination: FolderHandle,
    ) -> TransferResult:
        """Copy ``entries`` into ``destination`` and mark them as sent.

        One file's failure does not stop the others. A failed status save is
        reported through ``status_persisted`` rather than raised, since the
        copies have already happened.

        Raises:
            DestinationPermissionError: If write access to ``destination`` is
                denied. Nothing is copied in that case.
        """
        result = TransferResult()
        if not entries:
            logger.warning("Nothing selected to send")
            return result

        if destination.request_permission(PermissionMode.READ_WRITE) == PermissionState.DENIED:
            logger.error("Write permission denied for destination %s", destination.name)
            raise create_permission_denied_error(destination.name, operation="send")

        for entry in entries:
            try:
                self._copy(entry, destination)
            except OSError as e:
                result.failed.append(entry.name)
                logger.error("Failed to copy %s: %s", entry.name, e)
            except Exception:
                # folder handles may come from the host; keep going with the batch
                result.failed.append(entry.name)
                logger.exception("Unexpected error copying %s", entry.name)
            else:
                result.copied.append(entry.name)
                logger.info("Copied %s to %s", entry.name, destination.name)

        logger.info(
            "Send finished. Copied: %d, failed: %d",
            result.copied_count,
            result.failed_count,
        )

        if self.mark_failed_as_sent:
            to_mark = list(entries)
        else:
            copied = set(result.copied)
            to_mark = [entry for entry in entries if entry.name in copied]

        if to_mark:
            try:
                self.status_store.mark(source, to_mark, FileStatus.SENT)
            except StatusNotPersistedError as e:
                result.status_persisted = False
                result.status_error = e.message
            else:
                result.marked = [entry.name for entry in to_mark]

        return result

    def discard(self, entries: Sequence[FileEntry], source: FolderHandle) -> DiscardResult:
        """Mark ``entries`` as discarded without copying anything.

        Discarding an entry that is already discarded leaves it discarded.
        """
        result = DiscardResult()
        if not entries:
            logger.warning("Nothing selected to discard")
            return result

        result.discarded = [entry.name for entry in entries]
        try:
            self.status_store.mark(source, entries, FileStatus.DISCARDED)
        except StatusNotPersistedError as e:
            result.status_persisted = False
            result.status_error = e.message
        else:
            logger.info("Discarded %d file(s) from %s", len(entries), source.name)

        return result

    @staticmethod
    def _copy(entry: FileEntry, destination: FolderHandle) -> None:
        if entry.handle is None:
            msg = f"No content handle for {entry.name}"
            raise FileNotFoundError(msg)
        data = entry.handle.read_all()
        target = destination.get_file(entry.name, create=True)
        with target.open_writer() as writer:
            writer.write_all(data)


__all__ = ["TransferService"]
