"""Static display lookup tables keyed by the schema enums."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from reflection_engine.schema import ActionPriority, KPTACategory, RetrospectiveType


@dataclass(frozen=True)
class DisplayInfo:
    label: str
    icon: str
    color: Optional[str] = None


PRIORITY_DISPLAY = {
    ActionPriority.HIGH: DisplayInfo("High", "exclamationmark.3", "red"),
    ActionPriority.MEDIUM: DisplayInfo("Medium", "exclamationmark.2", "orange"),
    ActionPriority.LOW: DisplayInfo("Low", "exclamationmark", "blue"),
}

CATEGORY_DISPLAY = {
    KPTACategory.KEEP: DisplayInfo("Keep", "checkmark.circle.fill", "green"),
    KPTACategory.PROBLEM: DisplayInfo("Problem", "exclamationmark.triangle.fill", "red"),
    KPTACategory.TRY: DisplayInfo("Try", "lightbulb.fill", "purple"),
}

RETROSPECTIVE_TYPE_DISPLAY = {
    RetrospectiveType.DAILY: DisplayInfo("Daily", "sun.max"),
    RetrospectiveType.WEEKLY: DisplayInfo("Weekly", "calendar.badge.clock"),
    RetrospectiveType.MONTHLY: DisplayInfo("Monthly", "calendar"),
}

# (lower bound, label), checked from the top
WELLNESS_LABEL_BANDS = (
    (80, "Excellent"),
    (70, "Good"),
    (50, "Fair"),
    (30, "Needs Attention"),
    (0, "Low"),
)

WELLNESS_COLOR_BANDS = (
    (70, "green"),
    (50, "orange"),
    (0, "red"),
)


def _band(score: int, bands: tuple) -> str:
    for lower, value in bands:
        if score >= lower:
            return value
    return bands[-1][1]


def wellness_label(score: int) -> str:
    """Map a 0-100 wellness score to its band label."""

    return _band(score, WELLNESS_LABEL_BANDS)


def wellness_color(score: int) -> str:
    return _band(score, WELLNESS_COLOR_BANDS)
