"""CSV reading for spreadsheet-exported activity logs."""

from __future__ import annotations

import csv
import io

EXTRA_FIELDS_KEY = "_extra"


def read_rows(text: str) -> tuple[list[str], list[dict]]:
    """Split CSV text into its header and data rows.

    Blank lines and rows whose cells are all empty are skipped. Raises
    csv.Error on malformed input and ValueError when there is no header.
    """

    reader = csv.DictReader(io.StringIO(text.lstrip("\ufeff")), restkey=EXTRA_FIELDS_KEY, strict=True)
    if not reader.fieldnames:
        raise ValueError("missing header row")

    fieldnames = [name.strip() for name in reader.fieldnames]
    reader.fieldnames = fieldnames

    rows: list[dict] = []
    for row in reader:
        values = [value for key, value in row.items() if key != EXTRA_FIELDS_KEY]
        if not any(value and str(value).strip() for value in values):
            continue
        rows.append(row)
    return fieldnames, rows


def read_file(file_path: str) -> str:
    with open(file_path, newline="", encoding="utf-8") as handle:
        return handle.read()
