"""Demo script for activity-engine."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from activity_engine.metrics import calculate_time_metrics, calculate_volume_metrics
from activity_engine.normalization import normalize_csv_file


def main() -> None:
    result = normalize_csv_file("examples/sample_activity.csv")
    print(f"Records: {len(result.records)} of {result.total_rows} rows")
    for error in result.errors:
        print(f"Row {error.row}: {error.message}")
    print("Volume:", calculate_volume_metrics(result.records))
    print("Time:", calculate_time_metrics(result.records))


if __name__ == "__main__":
    main()
