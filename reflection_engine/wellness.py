"""Wellness score from whichever health metrics are available.

Each metric present on a sample is mapped to a 0-100 sub-score and blended
with a fixed weight. Missing metrics are skipped rather than counted as zero,
and the weights of the metrics that are present are renormalized to sum to 1.

    Sleep quality     as-is                       0.35
    Steps             steps / steps goal          0.25
    Exercise minutes  minutes / exercise goal     0.25
    Stand hours       hours / stand goal          0.15

A new metric only needs a row in the table returned by
``build_metric_table``.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Callable, Optional, Sequence

import numpy as np

from reflection_engine.config import settings
from reflection_engine.schema import HealthMetricsSample

logger = logging.getLogger(__name__)

SCORE_MIN = 0
SCORE_MAX = 100


@dataclass(frozen=True)
class WellnessMetric:
    """One row of the scoring table."""

    attribute: str
    normalizer: Callable[[float], float]
    weight: float


def _as_is(value: float) -> float:
    return float(value)


def _against_goal(goal: float) -> Callable[[float], float]:
    def normalize(value: float) -> float:
        return min(100.0, value * 100.0 / goal)

    return normalize


def build_metric_table(
    steps_goal: float | None = None,
    exercise_minutes_goal: float | None = None,
    stand_hours_goal: float | None = None,
) -> tuple[WellnessMetric, ...]:
    """Return the (metric, normalizer, weight) table, goals defaulting to settings."""

    return (
        WellnessMetric("avg_sleep_quality_score", _as_is, 0.35),
        WellnessMetric("avg_steps", _against_goal(steps_goal or settings.STEPS_GOAL), 0.25),
        WellnessMetric(
            "total_exercise_minutes",
            _against_goal(exercise_minutes_goal or settings.EXERCISE_MINUTES_GOAL),
            0.25,
        ),
        WellnessMetric("avg_stand_hours", _against_goal(stand_hours_goal or settings.STAND_HOURS_GOAL), 0.15),
    )


WELLNESS_METRICS = build_metric_table()


def _clamp(value: float) -> float:
    return max(float(SCORE_MIN), min(float(SCORE_MAX), value))


def weighted_partial_average(scored: Sequence[tuple[float, float]]) -> Optional[float]:
    """Weighted mean of ``(sub_score, weight)`` pairs with weights renormalized.

    Returns None when there is nothing to average or the weights sum to zero.
    """

    if not scored:
        return None

    scores = np.asarray([score for score, _ in scored], dtype=float)
    weights = np.asarray([weight for _, weight in scored], dtype=float)
    total_weight = weights.sum()
    if total_weight <= 0:
        return None

    return float(np.dot(weights / total_weight, scores))


def _round_half_up(value: float) -> int:
    # absorb float noise (67.49999999...) before rounding half up
    return int(math.floor(round(value, 6) + 0.5))


def score(
    sample: HealthMetricsSample,
    metrics: Sequence[WellnessMetric] = WELLNESS_METRICS,
) -> Optional[int]:
    """Return the wellness score in [0, 100], or None when no metric is present.

    ``sample.wellness_score`` is ignored; the score is always recomputed.
    """

    scored: list[tuple[float, float]] = []
    for metric in metrics:
        value = getattr(sample, metric.attribute, None)
        if value is None:
            continue
        scored.append((_clamp(metric.normalizer(value)), metric.weight))

    average = weighted_partial_average(scored)
    if average is None:
        logger.debug("wellness score unavailable: no metrics present")
        return None

    result = _round_half_up(average)
    assert SCORE_MIN <= result <= SCORE_MAX, f"wellness score out of range: {result}"
    logger.debug("wellness score=%d from %d/%d metrics", result, len(scored), len(metrics))
    return result


def with_wellness_score(sample: HealthMetricsSample) -> HealthMetricsSample:
    """Return a copy of ``sample`` with ``wellness_score`` recomputed."""

    return replace(sample, wellness_score=score(sample))


def format_sleep_duration(sample: HealthMetricsSample) -> Optional[str]:
    if sample.avg_sleep_minutes is None:
        return None
    hours, minutes = divmod(sample.avg_sleep_minutes, 60)
    return f"{hours}h {minutes}m"


def format_steps(sample: HealthMetricsSample) -> Optional[str]:
    if sample.avg_steps is None:
        return None
    return f"{sample.avg_steps:,}"
