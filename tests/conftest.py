"""
Pytest configuration and shared fixtures for xlsx-sender tests.
"""

from __future__ import annotations

import io
import logging
import os
import struct
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

from xlsxsender.cli.common.context import clear_cli_context
from xlsxsender.config import loader
from xlsxsender.core.folders import LocalFolder

# 2023-01-01, 2023-06-01 and 2022-01-01 at 00:00 UTC, in epoch milliseconds
T1 = 1672531200000
T2 = 1685577600000
T3 = 1640995200000

CORE_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
 xmlns:dc="http://purl.org/dc/elements/1.1/">
<dc:creator>Ana</dc:creator>{last_modified_by}
</cp:coreProperties>"""


def workbook_bytes(author: str | None = None, *, with_core: bool = True) -> bytes:
    """Build a minimal zip container shaped like an .xlsx file."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr("xl/workbook.xml", "<workbook/>")
        if with_core:
            element = "" if author is None else f"<cp:lastModifiedBy>{author}</cp:lastModifiedBy>"
            archive.writestr("docProps/core.xml", CORE_XML.format(last_modified_by=element))
    return buffer.getvalue()


def damaged_workbook_bytes(damage: str) -> bytes:
    """Build a workbook whose deflated core properties part cannot be read.

    ``damage`` is ``"payload"`` to overwrite the start of the compressed data,
    or ``"method"`` to declare an unsupported compression method (99).
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        archive.writestr("[Content_Types].xml", "<Types/>")
        archive.writestr(
            "docProps/core.xml",
            CORE_XML.format(last_modified_by="<cp:lastModifiedBy>Bruno</cp:lastModifiedBy>"),
            compress_type=zipfile.ZIP_DEFLATED,
        )
    data = bytearray(buffer.getvalue())
    with zipfile.ZipFile(io.BytesIO(bytes(data))) as archive:
        local = archive.getinfo("docProps/core.xml").header_offset

    if damage == "payload":
        name_len, extra_len = struct.unpack("<HH", data[local + 26 : local + 30])
        start = local + 30 + name_len + extra_len
        data[start : start + 8] = b"\xff" * 8
    elif damage == "method":
        # core.xml is the last entry, so its central header is the last one
        central = data.rindex(b"PK\x01\x02")
        data[local + 8 : local + 10] = struct.pack("<H", 99)
        data[central + 10 : central + 12] = struct.pack("<H", 99)
    else:
        raise ValueError(damage)
    return bytes(data)


def set_mtime(path: Path, epoch_ms: int) -> None:
    ns = epoch_ms * 1_000_000
    os.utime(path, ns=(ns, ns))


@pytest.fixture(autouse=True)
def _isolate(
    tmp_path: Path, tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch
):
    """Run every test in its own working directory with fresh global state."""
    work_dir = tmp_path_factory.mktemp("cwd")
    monkeypatch.chdir(work_dir)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setattr(loader, "_loader", loader.SettingsLoader())
    clear_cli_context()
    root = logging.getLogger()
    level = root.level
    yield
    clear_cli_context()
    root.setLevel(level)
    for handler in list(root.handlers):
        if getattr(handler, "_xlsxsender_handler", False):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    path = tmp_path / "dest"
    path.mkdir()
    return path


@pytest.fixture
def source_folder(source_dir: Path) -> LocalFolder:
    return LocalFolder(source_dir)


@pytest.fixture
def dest_folder(dest_dir: Path) -> LocalFolder:
    return LocalFolder(dest_dir)


@pytest.fixture
def make_workbook(source_dir: Path) -> Callable[..., Path]:
    """Factory creating a workbook in the source folder.

    Args of the returned callable:
        name: File name
        mtime_ms: Modification time in epoch milliseconds
        author: lastModifiedBy value, or None to omit the element
        data: Raw content overriding the generated workbook
    """

    def _make(
        name: str,
        mtime_ms: int = T1,
        author: str | None = "Bruno",
        data: bytes | None = None,
    ) -> Path:
        path = source_dir / name
        path.write_bytes(workbook_bytes(author) if data is None else data)
        set_mtime(path, mtime_ms)
        return path

    return _make


@pytest.fixture
def xlsx_bytes() -> Callable[..., bytes]:
    """Expose ``workbook_bytes`` to tests."""
    return workbook_bytes


@pytest.fixture
def damaged_xlsx_bytes() -> Callable[[str], bytes]:
    """Expose ``damaged_workbook_bytes`` to tests."""
    return damaged_workbook_bytes
