"""Tests for JSON and JSONL persistence utilities."""

from pathlib import Path

import pytest

from perfgate.common.models import BuildRecord, Outcome, Report
from perfgate.common.persistence import (
    read_json_model,
    read_jsonl,
    write_json_model,
    write_jsonl,
)


class TestReadJsonl:
    """Tests for read_jsonl function."""

    def test_raises_file_not_found_for_nonexistent_file(self, tmp_path: Path) -> None:
        file_path = tmp_path / "nonexistent.jsonl"

        with pytest.raises(FileNotFoundError) as exc_info:
            read_jsonl(file_path, Report)

        assert str(file_path) in str(exc_info.value)

    def test_skips_empty_lines(self, tmp_path: Path) -> None:
        file_path = tmp_path / "reports.jsonl"
        a = Report(report_file_name="a.xml").model_dump_json()
        b = Report(report_file_name="b.xml").model_dump_json()
        file_path.write_text(f"{a}\n\n\n{b}\n")

        result = read_jsonl(file_path, Report)

        assert [r.report_file_name for r in result] == ["a.xml", "b.xml"]


class TestWriteJsonl:
    """Tests for write_jsonl function."""

    def test_replaces_content(self, tmp_path: Path) -> None:
        file_path = tmp_path / "reports.jsonl"
        write_jsonl(file_path, [Report(report_file_name="old.xml")])

        write_jsonl(file_path, [Report(report_file_name="new.xml", average_response_time=3.5)])

        [report] = read_jsonl(file_path, Report)
        assert report.report_file_name == "new.xml"
        assert report.average_response_time == 3.5

    def test_leaves_no_temp_files(self, tmp_path: Path) -> None:
        file_path = tmp_path / "reports.jsonl"

        write_jsonl(file_path, [Report(report_file_name="a.xml")])

        assert not list(tmp_path.glob(".reports.jsonl.*.tmp"))

    def test_empty_list(self, tmp_path: Path) -> None:
        file_path = tmp_path / "reports.jsonl"

        write_jsonl(file_path, [])

        assert read_jsonl(file_path, Report) == []


class TestJsonModel:
    """Tests for single-document persistence."""

    def test_write_and_read(self, tmp_path: Path) -> None:
        file_path = tmp_path / "build" / "build.json"
        record = BuildRecord(number=4, outcome=Outcome.UNSTABLE, has_performance_data=True)

        write_json_model(file_path, record)
        result = read_json_model(file_path, BuildRecord)

        assert result == record

    def test_read_missing_returns_none(self, tmp_path: Path) -> None:
        assert read_json_model(tmp_path / "absent.json", BuildRecord) is None
