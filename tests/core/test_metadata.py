"""Tests for workbook metadata extraction."""

import io
import zipfile

import pytest

from xlsxsender.core.metadata import extract_last_saved_by


class TestExtractLastSavedBy:
    """Test extract_last_saved_by."""

    def test_reads_author(self, xlsx_bytes):
        assert extract_last_saved_by(xlsx_bytes("Bruno")) == "Bruno"

    def test_trims_whitespace(self, xlsx_bytes):
        assert extract_last_saved_by(xlsx_bytes("  Carla Dias \n")) == "Carla Dias"

    def test_empty_element_is_none(self, xlsx_bytes):
        assert extract_last_saved_by(xlsx_bytes("   ")) is None

    def test_missing_element_is_none(self, xlsx_bytes):
        assert extract_last_saved_by(xlsx_bytes(None)) is None

    def test_missing_core_part_is_none(self, xlsx_bytes):
        assert extract_last_saved_by(xlsx_bytes("Bruno", with_core=False)) is None

    def test_not_a_zip_is_none(self):
        assert extract_last_saved_by(b"plain text, not a workbook") is None

    def test_empty_bytes_is_none(self):
        assert extract_last_saved_by(b"") is None

    def test_non_ascii_author(self):
        """Test UTF-8 author names survive extraction."""
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            archive.writestr(
                "docProps/core.xml",
                "<cp:coreProperties><cp:lastModifiedBy>João Ñúñez</cp:lastModifiedBy>"
                "</cp:coreProperties>".encode(),
            )
        assert extract_last_saved_by(buffer.getvalue()) == "João Ñúñez"

    @pytest.mark.parametrize("damage", ["payload", "method"])
    def test_undecompressable_core_part_is_none(self, damaged_xlsx_bytes, damage):
        """Test damaged deflate data and unknown compression give no author."""
        assert extract_last_saved_by(damaged_xlsx_bytes(damage)) is None

    def test_encrypted_core_part_is_none(self, xlsx_bytes, mocker):
        mocker.patch.object(
            zipfile.ZipFile,
            "read",
            side_effect=RuntimeError("File is encrypted, password required for extraction"),
        )
        assert extract_last_saved_by(xlsx_bytes("Bruno")) is None

    def test_truncated_core_part_is_none(self, xlsx_bytes, mocker):
        mocker.patch.object(zipfile.ZipFile, "read", side_effect=EOFError)
        assert extract_last_saved_by(xlsx_bytes("Bruno")) is None
