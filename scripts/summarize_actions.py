"""Filter, sort and summarize actions from a CSV/JSON export."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reflection_engine import filtering, metrics, sorting
from reflection_engine.adapters import csv_adapter, json_adapter
from reflection_engine.filtering import FilterCriteria
from reflection_engine.log import setup_logging
from reflection_engine.schema import ActionPriority, CompletionStatus, SortOrder

logger = logging.getLogger("reflection_engine.scripts.summarize_actions")


def _load_records(path: Path):
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return csv_adapter.parse(str(path))
    if suffix == ".json":
        return json_adapter.parse(str(path))
    raise ValueError("Unsupported input format, expected .csv or .json")


def _criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    return FilterCriteria(
        completion_status=CompletionStatus(args.status),
        priorities=frozenset(ActionPriority(p) for p in args.priority),
        retrospective_id=args.retrospective,
        overdue_only=args.overdue,
        from_try_item_only=args.from_try,
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Summarize exported action records")
    parser.add_argument("--data", required=True, help="Path to CSV/JSON actions file")
    parser.add_argument("--status", choices=[s.value for s in CompletionStatus], default="all")
    parser.add_argument("--priority", action="append", choices=[p.value for p in ActionPriority], default=[])
    parser.add_argument("--retrospective", default=None, help="Only actions owned by this retrospective id")
    parser.add_argument("--overdue", action="store_true", help="Only overdue actions")
    parser.add_argument("--from-try", action="store_true", help="Only actions derived from Try entries")
    parser.add_argument("--sort", choices=[o.value for o in SortOrder], default=SortOrder.CREATED_DESCENDING.value)
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    setup_logging(level=args.log_level)

    records = _load_records(Path(args.data))
    criteria = _criteria_from_args(args)
    selected = sorting.apply(filtering.apply(records, criteria), SortOrder(args.sort))
    stats = metrics.summarize(selected)
    logger.info("selected %d of %d actions", len(selected), len(records))

    report = {
        "statistics": {
            "total": stats.total,
            "completed": stats.completed,
            "incomplete": stats.incomplete,
            "overdue": stats.overdue,
            "open_by_priority": {p.value: n for p, n in stats.count_by_priority.items()},
            "from_try": stats.from_try_count,
            "completion_rate": stats.completion_rate,
        },
        "actions": [
            {
                "id": record.id,
                "text": record.text,
                "priority": record.priority.value,
                "is_completed": record.is_completed,
                "deadline": record.deadline.isoformat() if record.deadline else None,
            }
            for record in selected
        ],
    }
    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
