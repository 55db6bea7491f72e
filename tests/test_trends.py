from datetime import datetime, timedelta, timezone

from activity_engine.schema import ActivityRecord
from activity_engine.trends import (
    calculate_duration_distribution,
    calculate_fragmentation_trend,
    calculate_heatmap_data,
    calculate_weekly_trend,
)


def make_record(start_iso, minutes):
    start = datetime.fromisoformat(start_iso).replace(tzinfo=timezone.utc)
    return ActivityRecord(
        start_iso, start, start + timedelta(minutes=minutes), minutes, "Alice", "Project", "General", "Work", "Task"
    )


def test_heatmap_grid_uses_jakarta_time():
    points = calculate_heatmap_data(
        [make_record("2024-10-01T09:00:00", 60), make_record("2024-10-06T03:00:00", 30)]
    )
    assert len(points) == 7 * 24
    lookup = {(p["day_of_week"], p["hour_of_day"]): p["value"] for p in points}
    assert lookup[(2, 16)] == 1  # Tuesday 16:00
    assert lookup[(0, 10)] == 1  # Sunday 10:00
    assert sum(lookup.values()) == 2


def test_weekly_trend_is_sorted_and_sunday_based():
    records = [
        make_record("2024-10-07T02:00:00", 120),
        make_record("2024-10-01T02:00:00", 60),
        make_record("2024-10-02T02:00:00", 30),
    ]
    assert calculate_weekly_trend(records) == [
        {"week": "Sep 29", "hours": 1.5},
        {"week": "Oct 6", "hours": 2.0},
    ]


def test_weekly_trend_uses_unshifted_day():
    # Saturday 20:00 UTC is already Sunday in Jakarta, but stays in the UTC week.
    assert calculate_weekly_trend([make_record("2024-10-05T20:00:00", 60)]) == [{"week": "Sep 29", "hours": 1.0}]


def test_fragmentation_trend():
    records = [
        make_record("2024-10-01T02:00:00", 15),
        make_record("2024-10-01T04:00:00", 60),
        make_record("2024-10-08T02:00:00", 30),
    ]
    assert calculate_fragmentation_trend(records) == [
        {"week": "Sep 29", "index": 0.5},
        {"week": "Oct 6", "index": 1.0},
    ]


def test_duration_distribution_upper_bounds_are_inclusive():
    records = [make_record("2024-10-01T02:00:00", m) for m in (0, 15, 16, 30, 31, 60, 61, 120, 121)]
    assert calculate_duration_distribution(records) == [
        {"bin": "0-15m", "count": 2},
        {"bin": "15-30m", "count": 2},
        {"bin": "30-60m", "count": 2},
        {"bin": "1-2h", "count": 2},
        {"bin": "2h+", "count": 1},
    ]


def test_empty_input_is_safe():
    assert all(p["value"] == 0 for p in calculate_heatmap_data([]))
    assert calculate_weekly_trend([]) == []
    assert calculate_fragmentation_trend([]) == []
    assert [b["count"] for b in calculate_duration_distribution([])] == [0, 0, 0, 0, 0]
