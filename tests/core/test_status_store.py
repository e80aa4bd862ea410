"""
Unit tests for StatusStore.

Covers loading tolerance (missing, malformed and foreign sidecars), the
on-disk format and failure reporting on save.
"""

import json
from pathlib import Path

import pytest

from xlsxsender.core.folders import LocalFolder
from xlsxsender.core.models import FileEntry, FileStatus
from xlsxsender.core.status_store import StatusStore, dump_status_map, parse_status_map
from xlsxsender.shared.constants import StatusFile
from xlsxsender.shared.errors import ErrorCode, StatusNotPersistedError


def _entry(name: str, size: int = 10, mtime: int = 1000) -> FileEntry:
    return FileEntry(name=name, size=size, last_modified_ms=mtime)


class TestParseStatusMap:
    """Test sidecar parsing."""

    def test_parses_known_statuses(self):
        text = '{"a.xlsx|1|2": "sent", "b.xlsx|3|4": "discarded"}'
        assert parse_status_map(text) == {
            "a.xlsx|1|2": FileStatus.SENT,
            "b.xlsx|3|4": FileStatus.DISCARDED,
        }

    def test_drops_unknown_values(self):
        """Test values other than sent/discarded are ignored."""
        assert parse_status_map('{"a|1|2": "pending", "b|1|2": "sent"}') == {
            "b|1|2": FileStatus.SENT,
        }

    def test_non_object_is_empty(self):
        assert parse_status_map("[1, 2, 3]") == {}

    def test_invalid_json_raises(self):
        with pytest.raises(ValueError):
            parse_status_map("{not json")

    def test_dump_is_indented_json(self):
        """Test the sidecar is pretty-printed with two-space indentation."""
        text = dump_status_map({"a|1|2": FileStatus.SENT})
        assert text == '{\n  "a|1|2": "sent"\n}'


class TestStatusStoreLoad:
    """Test StatusStore.load never fails."""

    def test_missing_sidecar_is_empty(self, source_folder):
        assert StatusStore().load(source_folder) == {}

    def test_malformed_sidecar_is_empty(self, source_dir, source_folder):
        (source_dir / StatusFile.FILENAME).write_text("{broken", encoding="utf-8")
        assert StatusStore().load(source_folder) == {}

    def test_undecodable_sidecar_is_empty(self, source_dir, source_folder):
        (source_dir / StatusFile.FILENAME).write_bytes(b"\xff\xfe\x00garbage")
        assert StatusStore().load(source_folder) == {}

    def test_sidecar_directory_is_empty(self, source_dir, source_folder):
        """Test a directory named like the sidecar reads as an empty map."""
        (source_dir / StatusFile.FILENAME).mkdir()
        assert StatusStore().load(source_folder) == {}

    def test_custom_filename(self, source_dir, source_folder):
        (source_dir / "handled.json").write_text('{"a|1|2": "sent"}', encoding="utf-8")
        assert StatusStore("handled.json").load(source_folder) == {"a|1|2": FileStatus.SENT}
        assert StatusStore().load(source_folder) == {}


class TestStatusStoreSave:
    """Test StatusStore.save and mark."""

    def test_save_then_load(self, source_folder):
        store = StatusStore()
        status_map = {"a|1|2": FileStatus.SENT, "b|3|4": FileStatus.DISCARDED}

        store.save(source_folder, status_map)

        assert store.load(source_folder) == status_map

    def test_save_replaces_prior_content(self, source_dir, source_folder):
        store = StatusStore()
        store.save(source_folder, {"a|1|2": FileStatus.SENT})
        store.save(source_folder, {"b|3|4": FileStatus.DISCARDED})

        on_disk = json.loads((source_dir / StatusFile.FILENAME).read_text(encoding="utf-8"))
        assert on_disk == {"b|3|4": "discarded"}

    def test_save_atomic(self, source_dir):
        """Test atomic writes leave only the sidecar behind."""
        folder = LocalFolder(source_dir, atomic_writes=True)
        StatusStore().save(folder, {"a|1|2": FileStatus.SENT})

        assert sorted(p.name for p in source_dir.iterdir()) == [StatusFile.FILENAME]
        assert StatusStore().load(folder) == {"a|1|2": FileStatus.SENT}

    def test_save_failure_raises(self, source_dir, source_folder):
        """Test an unwritable sidecar raises StatusNotPersistedError."""
        (source_dir / StatusFile.FILENAME).mkdir()

        with pytest.raises(StatusNotPersistedError) as exc_info:
            StatusStore().save(source_folder, {"a|1|2": FileStatus.SENT})

        assert exc_info.value.code == ErrorCode.STATUS_NOT_PERSISTED
        assert StatusFile.FILENAME in exc_info.value.message

    def test_save_failure_in_writer(self, mocker):
        """Test write errors raised by the stream are reported too."""
        writer = mocker.MagicMock()
        writer.__enter__.return_value.write_all.side_effect = OSError("disk full")
        folder = mocker.Mock()
        folder.name = "src"
        folder.get_file.return_value.open_writer.return_value = writer

        with pytest.raises(StatusNotPersistedError):
            StatusStore().save(folder, {"a|1|2": FileStatus.SENT})

    def test_mark_merges_with_existing(self, source_folder):
        store = StatusStore()
        store.save(source_folder, {"old|1|2": FileStatus.SENT})

        updated = store.mark(source_folder, [_entry("a.xlsx")], FileStatus.DISCARDED)

        assert updated == {
            "old|1|2": FileStatus.SENT,
            "a.xlsx|10|1000": FileStatus.DISCARDED,
        }
        assert store.load(source_folder) == updated

    def test_mark_is_idempotent(self, source_folder):
        store = StatusStore()
        entries = [_entry("a.xlsx")]
        first = store.mark(source_folder, entries, FileStatus.DISCARDED)
        second = store.mark(source_folder, entries, FileStatus.DISCARDED)
        assert first == second == {"a.xlsx|10|1000": FileStatus.DISCARDED}

    def test_mark_saves_once(self, source_folder, mocker):
        store = StatusStore()
        save = mocker.spy(store, "save")

        store.mark(source_folder, [_entry("a.xlsx"), _entry("b.xlsx")], FileStatus.SENT)

        assert save.call_count == 1

    def test_sidecar_written_at_folder_root(self, source_dir: Path, source_folder):
        StatusStore().mark(source_folder, [_entry("a.xlsx")], FileStatus.SENT)
        assert (source_dir / StatusFile.FILENAME).is_file()
