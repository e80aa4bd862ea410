"""Core operations: status store, scanner, transfer and session state."""

from .folders import (
    EntryKind,
    FileHandle,
    FolderEntry,
    FolderHandle,
    FolderPicker,
    LocalFile,
    LocalFolder,
    PermissionState,
    StaticFolderPicker,
    open_local_folder,
)
from .metadata import extract_last_saved_by
from .models import (
    DiscardResult,
    FileEntry,
    FileStat,
    FileStatus,
    StatusMap,
    TransferResult,
    make_identity_key,
)
from .scanner import FileScanner, is_target_file
from .session import SenderSession, human_size
from .status_store import StatusStore
from .transfer import TransferService

__all__ = [
    "DiscardResult",
    "EntryKind",
    "FileEntry",
    "FileHandle",
    "FileScanner",
    "FileStat",
    "FileStatus",
    "FolderEntry",
    "FolderHandle",
    "FolderPicker",
    "LocalFile",
    "LocalFolder",
    "PermissionState",
    "SenderSession",
    "StaticFolderPicker",
    "StatusMap",
    "StatusStore",
    "TransferResult",
    "TransferService",
    "extract_last_saved_by",
    "human_size",
    "is_target_file",
    "make_identity_key",
    "open_local_folder",
]
