"""Streamlit demo UI for activity-engine."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from activity_engine.adapters.sheet_fetcher import FetchError, SheetFetcher, TTLCache
from activity_engine.config import DEFAULT_DATA_SOURCE
from activity_engine.dashboard import build_dashboard
from activity_engine.drilldowns import calculate_employee_daily_timeline, calculate_project_stats
from activity_engine.filters import filter_records
from activity_engine.log import setup_logging
from activity_engine.normalization import fetch_and_normalize_data, normalize_csv_file, normalize_csv_text
from activity_engine.schema import ParsingResult

DEMO_DATASET = "examples/sample_activity.csv"
DAY_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

FETCHER_STATE_KEY = "sheet_fetcher"


def get_fetcher(state) -> SheetFetcher:
    """Return the fetcher kept in the session state, creating it on first use.

    Streamlit re-executes the script on every interaction; the state mapping
    outlives those reruns, so the fetch cache does too.
    """

    if FETCHER_STATE_KEY not in state:
        state[FETCHER_STATE_KEY] = SheetFetcher(cache=TTLCache())
    return state[FETCHER_STATE_KEY]


def _fmt_hour(value: float) -> str:
    hours, minutes = divmod(int(round(value * 60)), 60)
    return f"{hours:02d}:{minutes:02d}"


def _heatmap_table(points: list[dict]) -> list[dict[str, Any]]:
    rows = []
    for day, name in enumerate(DAY_NAMES):
        row: dict[str, Any] = {"day": name}
        row.update({f"{p['hour_of_day']:02d}": p["value"] for p in points if p["day_of_week"] == day})
        rows.append(row)
    return rows


def load_result(
    source: str, uploaded_file=None, use_demo: bool = False, fetcher: Optional[SheetFetcher] = None
) -> tuple[ParsingResult, str]:
    """Load and normalize from the demo file, an upload, or a sheet source."""

    if use_demo:
        return normalize_csv_file(DEMO_DATASET), f"demo dataset ({DEMO_DATASET})"
    if uploaded_file is not None:
        text = uploaded_file.getvalue().decode("utf-8")
        return normalize_csv_text(text), f"uploaded file ({uploaded_file.name})"
    return fetch_and_normalize_data(source, fetcher), source


def main() -> None:
    import streamlit as st

    setup_logging()
    st.set_page_config(page_title="Activity Engine Demo", layout="wide")
    st.title("Activity Engine - Streamlit Demo")

    with st.sidebar:
        st.header("Data")
        use_demo = st.checkbox("Load demo dataset", value=True)
        uploaded = st.file_uploader("Upload activity CSV", type=["csv"])
        source = st.text_input("Spreadsheet URL or id", value=DEFAULT_DATA_SOURCE)
        run = st.button("Load data", type="primary")

    if run:
        st.session_state["loaded"] = True
    if not st.session_state.get("loaded"):
        st.info("Choose a data source in the sidebar and click **Load data**.")
        return

    try:
        result, data_source = load_result(source, uploaded, use_demo, get_fetcher(st.session_state))
    except FetchError as exc:
        st.error(f"Failed to fetch data: {exc}")
        return

    st.success(f"Loaded {len(result.records)} of {result.total_rows} rows from {data_source}.")
    if result.errors:
        with st.expander(f"Issues ({len(result.errors)})"):
            st.table([asdict(error) for error in result.errors])

    if not result.records:
        st.error("No valid records were found in the selected input.")
        return

    with st.sidebar:
        st.header("Filters")
        employees = st.multiselect("Employees", sorted({r.employee for r in result.records}))
        projects = st.multiselect("Projects", sorted({r.project for r in result.records}))
        search = st.text_input("Search")

    records = filter_records(result.records, employees=employees, projects=projects, search=search)
    if not records:
        st.warning("No records match the current filters.")
        return
    metrics = build_dashboard(records)

    st.subheader("A) Overview")
    time_metrics = metrics["time"]
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Activities", metrics["volume"]["total_count"])
    c2.metric("Total hours", f"{time_metrics['total_hours']:.1f}")
    c3.metric("Overtime hours", f"{time_metrics['weekday_overtime_hours']:.1f}")
    c4.metric("Weekend hours", f"{time_metrics['weekend_work_hours']:.1f}")

    st.subheader("B) Time Allocation")
    st.bar_chart(time_metrics["hours_by_category"])
    p1, p2, p3 = st.columns(3)
    p1.metric("Deep work ratio", f"{time_metrics['deep_work_ratio']:.0%}")
    p2.metric("Fragmentation", f"{time_metrics['fragmentation_index']:.0%}")
    p3.metric("Strategic hours", f"{time_metrics['strategic_hours']:.1f}")

    st.subheader("C) Behavior")
    st.table(metrics["behavior"])
    daily = metrics["daily_behavior"]
    st.line_chart({"clock in": [d["clock_in"] for d in daily], "clock out": [d["clock_out"] for d in daily]})

    st.subheader("D) Trends")
    t1, t2 = st.columns(2)
    t1.bar_chart({w["week"]: w["hours"] for w in metrics["weekly_trend"]})
    t2.bar_chart({d["bin"]: d["count"] for d in metrics["duration_distribution"]})
    st.table(_heatmap_table(metrics["heatmap"]))

    st.subheader("E) Drilldowns")
    d1, d2 = st.columns(2)
    employee = d1.selectbox("Employee", sorted({r.employee for r in records}))
    timeline = calculate_employee_daily_timeline([r for r in records if r.employee == employee])
    d1.table(
        [{**row, "logged_hours": f"{row['logged_hours']:.2f}", "break_hours": _fmt_hour(row["break_hours"])}
         for row in timeline]
    )
    project = d2.selectbox("Project", [p["name"] for p in metrics["project_performance"]])
    stats = calculate_project_stats([r for r in records if r.project == project])
    d2.table(stats["contributors"])
    d2.table(stats["top_descriptions"][:10])


if __name__ == "__main__":
    main()
