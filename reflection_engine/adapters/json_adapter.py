"""JSON adapter for exported action records."""

from __future__ import annotations

import json

from reflection_engine.adapters.fields import build_record
from reflection_engine.schema import ActionRecord


def parse(file_path: str) -> list[ActionRecord]:
    """Parse a JSON list of action objects."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    records = []
    for index, item in enumerate(payload, start=1):
        if not isinstance(item, dict):
            raise ValueError(f"Item {index}: expected an object")
        records.append(build_record(item, f"Item {index}"))
    return records
