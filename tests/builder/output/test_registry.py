"""
Unit Tests for the Paper Registry

Artifact directories, the locked JSONL index, listing and retention.
"""

import json
from datetime import datetime, timedelta

import pytest

from cia_toolkit.builder.output.registry import (
    PaperRecord,
    PaperRegistry,
    RegistryError,
    append_index_record,
    make_paper_id,
)

NOW = datetime(2026, 2, 18, 10, 30, 45)


def _save(registry, header, now, name="CCS336_CIAII"):
    paper_id = registry.allocate_id(header, now)
    return registry.save(paper_id, header, name, b"%PDF-1.4", b"PK\x03\x04", {"paper_id": paper_id}, now=now)


class TestMakePaperId:
    """Tests for make_paper_id()."""

    def test_id_when_header_then_timestamp_course_and_index(self, header):
        assert make_paper_id(header, NOW) == "20260218-103045__ccs336__cia2"

    def test_id_when_code_has_punctuation_then_slugged(self, header):
        from dataclasses import replace
        odd = replace(header, course_code="CS 3.36/A", assessment_index="")
        assert make_paper_id(odd, NOW) == "20260218-103045__cs_3_36_a__ciapaper"


class TestPaperRegistrySave:
    """Tests for PaperRegistry.allocate_id() and save()."""

    def test_save_when_called_then_artifacts_written(self, tmp_path, header):
        record = _save(PaperRegistry(tmp_path), header, NOW)
        folder = tmp_path / record.paper_id
        assert record.pdf_path == folder / "CCS336_CIAII.pdf"
        assert record.pdf_path.read_bytes() == b"%PDF-1.4"
        assert record.docx_path.read_bytes() == b"PK\x03\x04"
        assert json.loads((folder / "paper.json").read_text(encoding="utf-8")) == {"paper_id": record.paper_id}

    def test_save_when_called_then_index_line_appended(self, tmp_path, header):
        registry = PaperRegistry(tmp_path)
        record = _save(registry, header, NOW)
        lines = registry.index_path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 1
        assert PaperRecord.from_dict(json.loads(lines[0])) == record

    def test_save_when_called_then_no_staging_left(self, tmp_path, header):
        _save(PaperRegistry(tmp_path), header, NOW)
        assert not list(tmp_path.glob(".*.partial"))

    def test_allocate_when_same_second_then_counter_suffix(self, tmp_path, header):
        registry = PaperRegistry(tmp_path)
        first = _save(registry, header, NOW)
        second = _save(registry, header, NOW)
        third = _save(registry, header, NOW)
        assert second.paper_id == f"{first.paper_id}(1)"
        assert third.paper_id == f"{first.paper_id}(2)"

    def test_save_when_directory_exists_then_raises(self, tmp_path, header):
        registry = PaperRegistry(tmp_path)
        record = _save(registry, header, NOW)
        with pytest.raises(RegistryError, match="already exists"):
            registry.save(record.paper_id, header, "x", b"", b"", {}, now=NOW)


class TestPaperRegistryIndex:
    """Tests for list_papers() and purge_expired()."""

    def test_list_when_no_index_then_empty(self, tmp_path):
        assert PaperRegistry(tmp_path).list_papers() == []

    def test_list_when_several_then_newest_first(self, tmp_path, header):
        registry = PaperRegistry(tmp_path)
        older = _save(registry, header, NOW - timedelta(hours=2))
        newer = _save(registry, header, NOW)
        assert [p.paper_id for p in registry.list_papers()] == [newer.paper_id, older.paper_id]

    def test_list_when_corrupt_line_then_skipped(self, tmp_path, header, caplog):
        registry = PaperRegistry(tmp_path)
        record = _save(registry, header, NOW)
        with open(registry.index_path, "a", encoding="utf-8") as f:
            f.write("{truncated\n")
        assert [p.paper_id for p in registry.list_papers()] == [record.paper_id]
        assert "Skipping corrupt line 2" in caplog.text

    def test_purge_when_older_than_retention_then_removed(self, tmp_path, header):
        registry = PaperRegistry(tmp_path)
        old = _save(registry, header, NOW - timedelta(days=3))
        fresh = _save(registry, header, NOW - timedelta(hours=1))

        removed = registry.purge_expired(timedelta(hours=24), now=NOW)

        assert removed == [old.paper_id]
        assert not (tmp_path / old.paper_id).exists()
        assert (tmp_path / fresh.paper_id).exists()
        assert [p.paper_id for p in registry.list_papers()] == [fresh.paper_id]

    def test_purge_when_nothing_expired_then_index_untouched(self, tmp_path, header):
        registry = PaperRegistry(tmp_path)
        _save(registry, header, NOW)
        before = registry.index_path.read_text(encoding="utf-8")
        assert registry.purge_expired(timedelta(hours=1), now=NOW) == []
        assert registry.index_path.read_text(encoding="utf-8") == before

    def test_purge_when_no_index_then_nothing_removed(self, tmp_path):
        assert PaperRegistry(tmp_path).purge_expired(timedelta(0), now=NOW) == []


class TestAppendIndexRecord:
    """Tests for append_index_record()."""

    def test_append_when_missing_parent_then_created(self, tmp_path):
        path = tmp_path / "nested" / "index.jsonl"
        append_index_record(path, {"a": 1})
        append_index_record(path, {"b": "β"})
        assert [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()] == [{"a": 1}, {"b": "β"}]
