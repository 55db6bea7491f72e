"""Compute dashboard metrics from a CSV export or spreadsheet source."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from activity_engine.adapters.sheet_fetcher import FetchError, SheetFetcher, TTLCache
from activity_engine.config import DEFAULT_DATA_SOURCE
from activity_engine.dashboard import build_dashboard
from activity_engine.log import setup_logging
from activity_engine.normalization import fetch_and_normalize_data, normalize_csv_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Compute activity dashboard metrics")
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--data", help="Path to a local CSV export")
    source.add_argument("--source", help="Spreadsheet URL or id (defaults to ACTIVITY_DATA_SOURCE)")
    parser.add_argument("--out", help="Optional path to write the JSON report")
    parser.add_argument("--log-level", default=None, help="Logging level, e.g. DEBUG")
    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.data:
        result = normalize_csv_file(args.data)
    else:
        try:
            result = fetch_and_normalize_data(args.source or DEFAULT_DATA_SOURCE, SheetFetcher(cache=TTLCache()))
        except FetchError as exc:
            print(f"Failed to fetch data: {exc}", file=sys.stderr)
            sys.exit(1)

    report = {
        "meta": {
            "total_rows": result.total_rows,
            "valid_count": len(result.records),
            "error_count": len(result.errors),
            "detected_columns": result.detected_columns,
        },
        "errors": [asdict(error) for error in result.errors],
        "metrics": build_dashboard(result.records),
    }

    print(json.dumps(report, indent=2, default=str))

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(report, indent=2, default=str), encoding="utf-8")
        print(f"Saved metrics report to {out_path}", file=sys.stderr)


if __name__ == "__main__":
    main()
