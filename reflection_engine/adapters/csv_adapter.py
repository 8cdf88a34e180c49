"""CSV adapter for exported action records."""

from __future__ import annotations

import csv

from reflection_engine.adapters.fields import build_record
from reflection_engine.schema import ActionRecord


def parse(file_path: str) -> list[ActionRecord]:
    """Parse a CSV export with a header row into action records."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        records: list[ActionRecord] = []
        for row_number, row in enumerate(reader, start=2):
            records.append(build_record(row, f"Row {row_number}"))
        return records
