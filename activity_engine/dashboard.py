"""Full metric bundle for the dashboard."""

from __future__ import annotations

from activity_engine.drilldowns import (
    calculate_daily_behavior_series,
    calculate_project_performance,
)
from activity_engine.metrics import (
    calculate_behavior_metrics,
    calculate_time_metrics,
    calculate_volume_metrics,
)
from activity_engine.schema import ActivityRecord
from activity_engine.trends import (
    calculate_duration_distribution,
    calculate_fragmentation_trend,
    calculate_heatmap_data,
    calculate_weekly_trend,
)


def build_dashboard(records: list[ActivityRecord]) -> dict:
    """Compute every dashboard-level metric over the given records."""

    return {
        "volume": calculate_volume_metrics(records),
        "time": calculate_time_metrics(records),
        "behavior": calculate_behavior_metrics(records),
        "heatmap": calculate_heatmap_data(records),
        "weekly_trend": calculate_weekly_trend(records),
        "fragmentation_trend": calculate_fragmentation_trend(records),
        "daily_behavior": calculate_daily_behavior_series(records),
        "duration_distribution": calculate_duration_distribution(records),
        "project_performance": calculate_project_performance(records),
    }
