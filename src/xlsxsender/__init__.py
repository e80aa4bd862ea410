"""
xlsx-sender - pending spreadsheet sender

Lists the ``.xlsx`` files of a source folder that were not handled yet,
copies a selection to a destination folder or discards it, and remembers
what was handled in a JSON status file kept in the source folder.
"""

__version__ = "0.1.0"

from .core import (
    FileEntry,
    FileScanner,
    FileStatus,
    SenderSession,
    StatusStore,
    TransferService,
    make_identity_key,
)

__all__ = [
    "FileEntry",
    "FileScanner",
    "FileStatus",
    "SenderSession",
    "StatusStore",
    "TransferService",
    "make_identity_key",
]
