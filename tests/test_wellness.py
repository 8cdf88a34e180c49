from datetime import datetime

import pytest

from reflection_engine import wellness
from reflection_engine.display import wellness_color, wellness_label
from reflection_engine.schema import HealthMetricsSample

START = datetime.fromisoformat("2025-11-24T00:00:00")
END = datetime.fromisoformat("2025-11-30T23:59:59")


def sample(**metrics):
    return HealthMetricsSample(period_start=START, period_end=END, **metrics)


def test_no_metrics_is_none():
    assert wellness.score(sample()) is None


def test_non_scoring_metrics_alone_are_none():
    assert wellness.score(sample(avg_sleep_minutes=420, avg_active_calories=500, total_workouts=3)) is None


def test_steps_only_renormalizes_to_full_weight():
    assert wellness.score(sample(avg_steps=10000)) == 100
    assert wellness.score(sample(avg_steps=25000)) == 100


def test_sleep_and_steps_blend():
    # 0.35/0.60 * 80 + 0.25/0.60 * 50 = 67.5
    assert wellness.score(sample(avg_sleep_quality_score=80, avg_steps=5000)) == 68


def test_all_metrics():
    result = wellness.score(
        sample(avg_sleep_quality_score=70, avg_steps=8000, total_exercise_minutes=15, avg_stand_hours=6)
    )
    # 0.35*70 + 0.25*80 + 0.25*50 + 0.15*50 = 64.5
    assert result == 65


def test_zero_values_count_as_present():
    assert wellness.score(sample(avg_steps=0)) == 0
    assert wellness.score(sample(avg_sleep_quality_score=100, avg_steps=0)) == 58


def test_stored_wellness_score_is_ignored():
    assert wellness.score(sample(wellness_score=99)) is None
    assert wellness.score(sample(avg_stand_hours=12, wellness_score=1)) == 100


def test_out_of_range_sub_scores_are_clamped():
    assert wellness.score(sample(avg_sleep_quality_score=150)) == 100
    assert wellness.score(sample(avg_steps=-500)) == 0


def test_weighted_partial_average():
    assert wellness.weighted_partial_average([]) is None
    assert wellness.weighted_partial_average([(40.0, 0.0)]) is None
    assert wellness.weighted_partial_average([(100.0, 0.25), (0.0, 0.75)]) == pytest.approx(25.0)
    assert wellness.weighted_partial_average([(60.0, 0.15)]) == pytest.approx(60.0)


def test_custom_goals_table():
    table = wellness.build_metric_table(steps_goal=5000)
    assert wellness.score(sample(avg_steps=5000), table) == 100
    assert [metric.weight for metric in table] == [0.35, 0.25, 0.25, 0.15]


def test_with_wellness_score_recomputes():
    updated = wellness.with_wellness_score(sample(total_exercise_minutes=15))
    assert updated.wellness_score == 50
    assert updated.total_exercise_minutes == 15


def test_formatting_helpers():
    assert wellness.format_sleep_duration(sample()) is None
    assert wellness.format_sleep_duration(sample(avg_sleep_minutes=450)) == "7h 30m"
    assert wellness.format_sleep_duration(sample(avg_sleep_minutes=0)) == "0h 0m"
    assert wellness.format_steps(sample(avg_steps=12345)) == "12,345"
    assert wellness.format_steps(sample(avg_steps=500)) == "500"


@pytest.mark.parametrize(
    "score,label,color",
    [
        (100, "Excellent", "green"),
        (80, "Excellent", "green"),
        (79, "Good", "green"),
        (70, "Good", "green"),
        (69, "Fair", "orange"),
        (50, "Fair", "orange"),
        (49, "Needs Attention", "red"),
        (30, "Needs Attention", "red"),
        (29, "Low", "red"),
        (0, "Low", "red"),
    ],
)
def test_wellness_bands(score, label, color):
    assert wellness_label(score) == label
    assert wellness_color(score) == color
