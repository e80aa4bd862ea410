"""Workbook metadata extraction.

An ``.xlsx`` file is a zip container; its document properties live in
``docProps/core.xml``. Only the last-modified-by author is read, with a
plain pattern match rather than a full XML parse.
"""

from __future__ import annotations

import io
import logging
import re
import zipfile
import zlib

from xlsxsender.shared.constants import Workbook

logger = logging.getLogger(__name__)

_LAST_MODIFIED_BY = re.compile(Workbook.LAST_MODIFIED_BY_PATTERN)


def extract_last_saved_by(data: bytes) -> str | None:
    """Return the author who last saved the workbook, if it can be read.

    Args:
        data: Raw bytes of the workbook.

    Returns:
        The trimmed author name, or None when the bytes are not a zip
        archive, the properties part is missing or cannot be decompressed
        (damaged data, unsupported compression, encryption), or the element
        is absent or empty.
    """
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as archive:
            try:
                raw = archive.read(Workbook.CORE_PROPERTIES_PATH)
            except KeyError:
                return None
    except (
        zipfile.BadZipFile,
        zipfile.LargeZipFile,
        zlib.error,
        EOFError,
        NotImplementedError,
        RuntimeError,
        OSError,
        ValueError,
    ) as e:
        logger.debug("Not a readable workbook archive: %s", e)
        return None

    core_xml = raw.decode("utf-8", errors="replace")
    match = _LAST_MODIFIED_BY.search(core_xml)
    if match is None:
        return None

    author = match.group(1).strip()
    return author or None


__all__ = ["extract_last_saved_by"]
