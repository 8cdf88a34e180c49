"""Write-path validation.

These checks run before a value is persisted. The read-side engines never
call them and assume their inputs already satisfy them.
"""

from __future__ import annotations

from reflection_engine.errors import ValidationError
from reflection_engine.schema import ActionRecord, HealthMetricsSample, KPTAItem, Retrospective

_COUNT_FIELDS = (
    "avg_sleep_minutes",
    "avg_steps",
    "total_exercise_minutes",
    "avg_stand_hours",
    "avg_active_calories",
    "total_workouts",
)


def _is_blank(text: str | None) -> bool:
    return not (text or "").strip()


def validate_retrospective(retrospective: Retrospective) -> list[str]:
    problems = []
    if _is_blank(retrospective.title):
        problems.append("title must not be blank")
    if retrospective.start_date > retrospective.end_date:
        problems.append("start_date must not be after end_date")
    return problems


def validate_retrospective_entries(items: list[KPTAItem]) -> list[str]:
    """A retrospective needs at least one non-blank entry to be saved."""

    if not any(not _is_blank(item.text) for item in items):
        return ["Please add at least one item to your retrospective."]
    return []


def validate_health_sample(sample: HealthMetricsSample) -> list[str]:
    problems = []
    if sample.period_start > sample.period_end:
        problems.append("period_start must not be after period_end")
    for name in ("avg_sleep_quality_score", "wellness_score"):
        value = getattr(sample, name)
        if value is not None and not 0 <= value <= 100:
            problems.append(f"{name} must be between 0 and 100, got {value}")
    for name in _COUNT_FIELDS:
        value = getattr(sample, name)
        if value is not None and value < 0:
            problems.append(f"{name} must not be negative, got {value}")
    return problems


def validate_action(action: ActionRecord) -> list[str]:
    problems = []
    if _is_blank(action.text):
        problems.append("text must not be blank")
    if action.is_completed != (action.completed_at is not None):
        problems.append("completed_at must be set exactly when the action is completed")
    return problems


def is_valid_retrospective(retrospective: Retrospective) -> bool:
    return not validate_retrospective(retrospective)


def is_valid_health_sample(sample: HealthMetricsSample) -> bool:
    return not validate_health_sample(sample)


def is_valid_action(action: ActionRecord) -> bool:
    return not validate_action(action)


def ensure_valid(problems: list[str]) -> None:
    """Raise ``ValidationError`` when ``problems`` is non-empty."""

    if problems:
        raise ValidationError(problems)
