"""Demo script for reflection-engine."""

import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from reflection_engine import filtering, metrics, sorting, wellness
from reflection_engine.adapters.json_adapter import parse
from reflection_engine.display import wellness_label
from reflection_engine.filtering import FilterCriteria
from reflection_engine.schema import HealthMetricsSample, SortOrder


def main() -> None:
    records = parse("examples/sample_actions.json")
    now = datetime(2025, 12, 1, 9, 0)
    open_actions = sorting.apply(filtering.apply(records, FilterCriteria.incomplete(), now), SortOrder.DEADLINE_ASCENDING)
    print("Open:", [record.text for record in open_actions])
    print("Statistics:", metrics.summarize(records, now))

    sample = HealthMetricsSample(
        period_start=datetime(2025, 11, 24),
        period_end=datetime(2025, 11, 30),
        avg_sleep_quality_score=80,
        avg_steps=5000,
    )
    score = wellness.score(sample)
    print("Wellness:", score, wellness_label(score) if score is not None else "insufficient data")


if __name__ == "__main__":
    main()
