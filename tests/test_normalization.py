from datetime import datetime, timezone

import pytest

from activity_engine import normalization
from activity_engine.adapters.sheet_fetcher import FetchError
from activity_engine.normalization import (
    fetch_and_normalize_data,
    normalize_csv_file,
    normalize_csv_text,
    resolve_source_url,
)

HEADER = "Date,start_time,end_date,end_time,Employee,Project,Task,Description,duration\n"


class FakeFetcher:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.urls = []

    def fetch(self, url):
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.text


def test_valid_row_becomes_record():
    result = normalize_csv_text(
        HEADER + "2025-11-03,09:00,2025-11-03,10:30,Sari,Data Platform,Development,Implement pipeline,\n"
    )
    assert result.errors == []
    assert result.total_rows == 1
    record = result.records[0]
    assert record.start == datetime(2025, 11, 3, 9, 0, tzinfo=timezone.utc)
    assert record.duration_minutes == 90
    assert record.employee == "Sari"
    assert record.category == "Development"
    assert record.task == "Development"
    assert record.id == f"0-Sari-{int(record.start.timestamp() * 1000)}"


def test_unparseable_start_is_a_row_error():
    result = normalize_csv_text(HEADER + "garbage,09:00,,,Sari,Data,,Something,\n")
    assert result.records == []
    assert len(result.errors) == 1
    assert result.errors[0].row == 2
    assert result.errors[0].message == "Missing or invalid start date"
    assert result.errors[0].data["Employee"] == "Sari"


def test_bad_row_does_not_abort_batch():
    result = normalize_csv_text(
        HEADER
        + "2025-11-03,09:00,,10:00,Sari,Data,,Standup,\n"
        + ",09:00,,10:00,Sari,Data,,No date,\n"
        + "2025-11-03,10:00,,11:00,Sari,Data,,Audit,\n"
    )
    assert len(result.records) == 2
    assert [error.row for error in result.errors] == [3]
    assert result.total_rows == 3


def test_end_date_defaults_to_start_date():
    result = normalize_csv_text(HEADER + "3-Nov-25,8:00:00 AM,,9:30:00 AM,Sari,Data,,Standup,\n")
    assert result.records[0].duration_minutes == 90


def test_missing_end_uses_duration_hours():
    result = normalize_csv_text(HEADER + "2025-11-03,09:00,,,Sari,Data,,Write README,1.5\n")
    assert result.records[0].duration_minutes == 90


def test_missing_end_and_duration_gives_zero_length():
    result = normalize_csv_text(HEADER + "2025-11-03,09:00,,,Sari,Data,,Write README,n/a\n")
    record = result.records[0]
    assert record.end == record.start
    assert record.duration_minutes == 0


def test_start_without_a_real_date_is_a_row_error():
    result = normalize_csv_text(
        HEADER
        + "-,,,,Sari,Data,,Standup,\n"
        + "Monday,,,,Sari,Data,,Standup,\n"
        + "2025-11-03T09:00:00,,,,Sari,Data,,Standup,\n"
    )
    assert [error.row for error in result.errors] == [2, 3]
    assert [record.start for record in result.records] == [datetime(2025, 11, 3, 9, 0, tzinfo=timezone.utc)]


def test_end_date_without_end_time_uses_duration_hours():
    result = normalize_csv_text(HEADER + "2025-11-03,09:00,2025-11-03,,Sari,Data,,Write README,1.5\n")
    assert result.records[0].duration_minutes == 90


def test_end_date_without_end_time_or_duration_means_midnight():
    result = normalize_csv_text(HEADER + "2025-11-03,22:00,2025-11-04,,Sari,Data,,Deploy release,\n")
    assert result.records[0].end == datetime(2025, 11, 4, tzinfo=timezone.utc)
    assert result.records[0].duration_minutes == 120


def test_end_before_start_is_clamped():
    result = normalize_csv_text(HEADER + "2025-11-03,10:00,2025-11-03,09:00,Sari,Data,,Standup,\n")
    assert result.records[0].duration_minutes == 0


def test_defaults_and_category_derivation():
    result = normalize_csv_text(HEADER + "2025-11-03,09:00,,10:00,,,,Investigate churn,\n")
    record = result.records[0]
    assert record.employee == "Unknown"
    assert record.project == "Unassigned"
    assert record.category == "Analysis"
    assert record.task == "Unspecified Task"


def test_generic_category_is_reclassified():
    result = normalize_csv_text(HEADER + "2025-11-03,09:00,,10:00,Sari,Data,General,Morning sync,\n")
    assert result.records[0].category == "Meeting"
    assert result.records[0].task == "General"


def test_column_aliases():
    text = "start_date,start_time,end_time,Owner,Category,Activity\n2025-11-03,09:00,09:45,Budi,Finance,Ledger audit\n"
    record = normalize_csv_text(text).records[0]
    assert record.employee == "Budi"
    assert record.category == "Finance"
    assert record.description == "Ledger audit"
    assert record.duration_minutes == 45


def test_schema_failure_is_a_row_error(monkeypatch):
    monkeypatch.setattr(normalization, "duration_between", lambda start, end: -1)
    result = normalize_csv_text(HEADER + "2025-11-03,09:00,,10:00,Sari,Data,,Standup,\n")
    assert result.records == []
    assert result.errors[0].message.startswith("Schema validation failed")


def test_malformed_csv_returns_single_synthetic_error():
    result = normalize_csv_text('Date,Employee\n"2025-11-03,Sari\n')
    assert result.records == []
    assert result.total_rows == 0
    assert len(result.errors) == 1
    assert result.errors[0].row == 0
    assert result.errors[0].message.startswith("CSV Parsing Error")


def test_preview_is_capped_at_twenty_rows():
    rows = "".join(f"2025-11-03,09:{i:02d},,10:00,Sari,Data,,Standup,\n" for i in range(25))
    result = normalize_csv_text(HEADER + rows)
    assert result.total_rows == 25
    assert len(result.raw_rows) == 20
    assert result.detected_columns[0] == "Date"


def test_normalize_csv_file(tmp_path):
    path = tmp_path / "log.csv"
    path.write_text(HEADER + "2025-11-03,09:00,,10:00,Sari,Data,,Standup,\n", encoding="utf-8")
    assert len(normalize_csv_file(str(path)).records) == 1


def test_resolve_source_url():
    assert resolve_source_url("https://example.com/x.csv") == "https://example.com/x.csv"
    assert resolve_source_url("abc123") == "https://docs.google.com/spreadsheets/d/abc123/export?format=csv&gid=0"


def test_fetch_and_normalize_data_uses_fetcher():
    fetcher = FakeFetcher(HEADER + "2025-11-03,09:00,,10:00,Sari,Data,,Standup,\n")
    result = fetch_and_normalize_data("abc123", fetcher=fetcher)
    assert len(result.records) == 1
    assert fetcher.urls == [resolve_source_url("abc123")]


def test_fetch_failure_propagates():
    with pytest.raises(FetchError):
        fetch_and_normalize_data("https://example.com/x.csv", fetcher=FakeFetcher(error=FetchError("down")))
