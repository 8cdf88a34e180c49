"""Derived views over one retrospective's entries and actions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Union

from reflection_engine.metrics import completion_rate
from reflection_engine.schema import ActionRecord, KPTACategory, KPTAItem, Retrospective, RetrospectiveType

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]


@dataclass(frozen=True)
class KPTAViews:
    """Entries partitioned by category, each ascending by ``order_index``."""

    keep: list[KPTAItem] = field(default_factory=list)
    problem: list[KPTAItem] = field(default_factory=list)
    try_: list[KPTAItem] = field(default_factory=list)

    def for_category(self, category: KPTACategory) -> list[KPTAItem]:
        return {
            KPTACategory.KEEP: self.keep,
            KPTACategory.PROBLEM: self.problem,
            KPTACategory.TRY: self.try_,
        }[category]

    @property
    def total(self) -> int:
        return len(self.keep) + len(self.problem) + len(self.try_)


@dataclass(frozen=True)
class RetrospectiveSummary:
    views: KPTAViews
    pending_actions_count: int
    completed_actions_count: int
    action_completion_rate: float
    total_kpta_count: int
    period_days: int


def _display_order(item: KPTAItem) -> tuple:
    return (item.order_index, item.created_at)


def categorize(items: Iterable[KPTAItem]) -> KPTAViews:
    """Split entries into keep/problem/try lists.

    Each list is ascending by ``order_index``; equal indexes fall back to
    ``created_at``, so the input order does not matter.
    """

    buckets: dict[KPTACategory, list[KPTAItem]] = {category: [] for category in KPTACategory}
    for item in items:
        buckets[item.category].append(item)

    return KPTAViews(
        keep=sorted(buckets[KPTACategory.KEEP], key=_display_order),
        problem=sorted(buckets[KPTACategory.PROBLEM], key=_display_order),
        try_=sorted(buckets[KPTACategory.TRY], key=_display_order),
    )


def period_days(start: DateLike, end: DateLike) -> int:
    """Whole days elapsed from ``start`` to ``end``; 0 for a single-day period."""

    return (end - start).days


def summarize(
    retrospective: Retrospective,
    items: Iterable[KPTAItem],
    actions: Iterable[ActionRecord],
) -> RetrospectiveSummary:
    """Aggregate the resolved children of ``retrospective``."""

    views = categorize(items)
    actions = list(actions)
    completed = sum(1 for action in actions if action.is_completed)

    summary = RetrospectiveSummary(
        views=views,
        pending_actions_count=len(actions) - completed,
        completed_actions_count=completed,
        action_completion_rate=completion_rate(completed, len(actions)),
        total_kpta_count=views.total,
        period_days=period_days(retrospective.start_date, retrospective.end_date),
    )
    logger.debug(
        "retrospective %s: %d entries, %d/%d actions completed",
        retrospective.id,
        summary.total_kpta_count,
        completed,
        len(actions),
    )
    return summary


def generate_title(retro_type: RetrospectiveType, start: DateLike, end: DateLike) -> str:
    """Default title for a new retrospective, e.g. ``"Week of Nov 30"``."""

    if retro_type is RetrospectiveType.DAILY:
        return f"{start:%b} {start.day}, {start.year}"
    if retro_type is RetrospectiveType.WEEKLY:
        return f"Week of {start:%b} {start.day}"
    return f"{start:%B %Y}"


def format_date_range(start: DateLike, end: DateLike) -> str:
    return f"{start:%b} {start.day}, {start.year} - {end:%b} {end.day}, {end.year}"
