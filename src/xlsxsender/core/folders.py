"""Folder and file capabilities.

The scanner and the transfer operations never touch paths directly: they
work against the small protocols below, so any host that can list a folder,
read a file and write a file can drive them. ``LocalFolder`` and
``LocalFile`` implement the protocols on top of the local file system.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Iterator, Mapping
from enum import Enum
from pathlib import Path
from typing import NamedTuple, Protocol, Union

from xlsxsender.core.models import FileStat
from xlsxsender.shared.constants import PermissionMode
from xlsxsender.shared.errors import FolderSelectionCancelled, create_folder_access_error

logger = logging.getLogger(__name__)


class EntryKind(str, Enum):
    """Kind of a folder child."""

    FILE = "file"
    DIRECTORY = "directory"


class PermissionState(str, Enum):
    """Answer to a permission request on a folder."""

    GRANTED = "granted"
    DENIED = "denied"


class FileWriter(Protocol):
    """Destination stream obtained from ``FileHandle.open_writer``."""

    def write_all(self, data: bytes) -> None:
        """Write the full content of the file."""


class FileHandle(Protocol):
    """Readable (and, once created, writable) file capability."""

    @property
    def name(self) -> str: ...

    def stat(self) -> FileStat:
        """Return the size and modification time of the file."""

    def read_all(self) -> bytes:
        """Return the full content of the file."""

    def open_writer(self) -> contextlib.AbstractContextManager[FileWriter]:
        """Open the file for writing, replacing any prior content.

        The stream is closed on both the success and the failure path.
        """


class FolderEntry(NamedTuple):
    """A direct child of a folder."""

    name: str
    kind: EntryKind
    handle: Union[FileHandle, "FolderHandle"]


class FolderHandle(Protocol):
    """Folder capability: list children, open files, ask for permission."""

    @property
    def name(self) -> str: ...

    def entries(self) -> Iterator[FolderEntry]:
        """Yield the direct children of the folder (no recursion)."""

    def get_file(self, name: str, *, create: bool = False) -> FileHandle:
        """Return a handle on the named child file.

        Raises:
            FileNotFoundError: If the file does not exist and ``create`` is False
        """

    def request_permission(self, mode: str) -> PermissionState:
        """Ask for ``read`` or ``readwrite`` access to the folder."""


class FolderPicker(Protocol):
    """Lets the user choose a folder.

    Implementations raise ``FolderSelectionCancelled`` when the user aborts
    and ``FolderAccessError`` for every other failure.
    """

    def choose_folder(self, purpose: str) -> FolderHandle: ...


class _StreamWriter:
    def __init__(self, stream) -> None:
        self._stream = stream

    def write_all(self, data: bytes) -> None:
        self._stream.write(data)


class LocalFile:
    """``FileHandle`` backed by a path on the local file system."""

    def __init__(self, path: str | Path, *, atomic: bool = False) -> None:
        self.path = Path(path)
        self.atomic = atomic

    @property
    def name(self) -> str:
        return self.path.name

    def stat(self) -> FileStat:
        st = self.path.stat()
        return FileStat(size=st.st_size, last_modified_ms=st.st_mtime_ns // 1_000_000)

    def read_all(self) -> bytes:
        return self.path.read_bytes()

    @contextlib.contextmanager
    def open_writer(self) -> Iterator[FileWriter]:
        if not self.atomic:
            with self.path.open("wb") as stream:
                yield _StreamWriter(stream)
            return

        # Write next to the target, then swap it in with a single rename
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.",
            suffix=".tmp",
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as stream:
                yield _StreamWriter(stream)
                stream.flush()
                os.fsync(stream.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

    def __repr__(self) -> str:
        return f"LocalFile({str(self.path)!r})"


class LocalFolder:
    """``FolderHandle`` backed by a directory on the local file system."""

    def __init__(self, path: str | Path, *, atomic_writes: bool = False) -> None:
        self.path = Path(path)
        self.atomic_writes = atomic_writes

    @property
    def name(self) -> str:
        return self.path.name or str(self.path)

    def entries(self) -> Iterator[FolderEntry]:
        with os.scandir(self.path) as entries:
            for entry in entries:
                if entry.is_dir(follow_symlinks=False):
                    yield FolderEntry(entry.name, EntryKind.DIRECTORY, LocalFolder(entry.path))
                elif entry.is_file():
                    yield FolderEntry(entry.name, EntryKind.FILE, LocalFile(entry.path))

    def get_file(self, name: str, *, create: bool = False) -> LocalFile:
        path = self.path / name
        if path.is_dir():
            msg = f"Not a file: {path}"
            raise IsADirectoryError(msg)
        if not create and not path.is_file():
            msg = f"File not found: {path}"
            raise FileNotFoundError(msg)
        return LocalFile(path, atomic=self.atomic_writes)

    def request_permission(self, mode: str) -> PermissionState:
        flags = os.R_OK
        if mode == PermissionMode.READ_WRITE:
            flags |= os.W_OK
        granted = self.path.is_dir() and os.access(self.path, flags)
        return PermissionState.GRANTED if granted else PermissionState.DENIED

    def __repr__(self) -> str:
        return f"LocalFolder({str(self.path)!r})"


def open_local_folder(path: str | Path, *, atomic_writes: bool = False) -> LocalFolder:
    """Open a local directory as a folder handle.

    Raises:
        FolderAccessError: If the path does not exist or is not a directory
    """
    folder_path = Path(path).expanduser()

    if not folder_path.exists():
        raise create_folder_access_error(
            str(folder_path),
            f"Folder does not exist: {folder_path}",
            operation="open_folder",
        )

    if not folder_path.is_dir():
        raise create_folder_access_error(
            str(folder_path),
            f"Path is not a folder: {folder_path}",
            operation="open_folder",
        )

    return LocalFolder(folder_path, atomic_writes=atomic_writes)


class StaticFolderPicker:
    """Picker answering with folders chosen up front (e.g. CLI arguments).

    Purposes without a preset path are delegated to ``fallback``; without a
    fallback they count as cancelled.
    """

    def __init__(
        self,
        paths: Mapping[str, str | Path | None],
        fallback: FolderPicker | None = None,
        *,
        atomic_writes: bool = False,
    ) -> None:
        self.paths = {purpose: path for purpose, path in paths.items() if path}
        self.fallback = fallback
        self.atomic_writes = atomic_writes

    def choose_folder(self, purpose: str) -> FolderHandle:
        path = self.paths.get(purpose)
        if path is not None:
            logger.debug("Using preset %s folder: %s", purpose, path)
            return open_local_folder(path, atomic_writes=self.atomic_writes)
        if self.fallback is not None:
            return self.fallback.choose_folder(purpose)
        raise FolderSelectionCancelled(purpose)


__all__ = [
    "EntryKind",
    "FileHandle",
    "FileWriter",
    "FolderEntry",
    "FolderHandle",
    "FolderPicker",
    "LocalFile",
    "LocalFolder",
    "PermissionState",
    "StaticFolderPicker",
    "open_local_folder",
]
