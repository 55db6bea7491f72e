from datetime import date, datetime, timedelta, timezone

from activity_engine.dashboard import build_dashboard
from activity_engine.filters import filter_records
from activity_engine.schema import ActivityRecord


def make_record(start_iso, employee, project, description, task="Task"):
    start = datetime.fromisoformat(start_iso).replace(tzinfo=timezone.utc)
    return ActivityRecord(
        f"{employee}-{start_iso}", start, start + timedelta(minutes=30), 30, employee, project, "General", description, task
    )


def sample_records():
    return [
        make_record("2024-10-01T02:00:00", "Alice", "Data", "Morning sync"),
        make_record("2024-10-01T20:00:00", "Bob", "Finance", "Ledger audit"),
        make_record("2024-10-03T02:00:00", "Alice", "Finance", "Write README", task="Docs"),
    ]


def ids(records):
    return [r.employee + ":" + r.description for r in records]


def test_no_filters_returns_everything():
    assert len(filter_records(sample_records())) == 3


def test_employee_and_project_filters():
    assert ids(filter_records(sample_records(), employees=["Alice"], projects=["Finance"])) == ["Alice:Write README"]


def test_category_filter_uses_classifier():
    assert ids(filter_records(sample_records(), categories=["Analysis"])) == ["Bob:Ledger audit"]


def test_date_range_uses_jakarta_calendar_day():
    # 2024-10-01T20:00Z is 2024-10-02 in Jakarta
    selected = filter_records(sample_records(), start_date=date(2024, 10, 2), end_date=date(2024, 10, 2))
    assert ids(selected) == ["Bob:Ledger audit"]


def test_search_matches_description_task_and_project():
    assert ids(filter_records(sample_records(), search="docs")) == ["Alice:Write README"]
    assert len(filter_records(sample_records(), search="FINANCE")) == 2


def test_dashboard_bundle_on_empty_input():
    dashboard = build_dashboard([])
    assert dashboard["volume"]["total_count"] == 0
    assert len(dashboard["heatmap"]) == 168
    assert dashboard["project_performance"] == []
