"""Aggregate statistics over action records."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from reflection_engine.schema import ActionPriority, ActionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionStatistics:
    """Counts and completion rate for one collection of action records.

    ``count_by_priority`` counts open records only.
    """

    total: int = 0
    completed: int = 0
    incomplete: int = 0
    overdue: int = 0
    count_by_priority: dict = field(default_factory=lambda: {priority: 0 for priority in ActionPriority})
    from_try_count: int = 0
    completion_rate: float = 0.0

    @property
    def high_priority(self) -> int:
        return self.count_by_priority.get(ActionPriority.HIGH, 0)

    @property
    def medium_priority(self) -> int:
        return self.count_by_priority.get(ActionPriority.MEDIUM, 0)

    @property
    def low_priority(self) -> int:
        return self.count_by_priority.get(ActionPriority.LOW, 0)

    @property
    def formatted_completion_rate(self) -> str:
        return f"{self.completion_rate * 100:.0f}%"


def completion_rate(completed: int, total: int) -> float:
    """Return ``completed / total``, or 0.0 for an empty collection."""

    if total == 0:
        return 0.0
    return completed / total


def summarize(records: Iterable[ActionRecord], now: Optional[datetime] = None) -> ActionStatistics:
    """Compute statistics over exactly the records given; no filtering is applied."""

    now = now or datetime.now()
    records = list(records)

    completed = 0
    overdue = 0
    from_try = 0
    open_by_priority = Counter()
    for record in records:
        if record.is_completed:
            completed += 1
        else:
            open_by_priority[record.priority] += 1
        overdue += 1 if record.is_overdue(now) else 0
        from_try += 1 if record.from_try_item else 0

    total = len(records)
    stats = ActionStatistics(
        total=total,
        completed=completed,
        incomplete=total - completed,
        overdue=overdue,
        count_by_priority={priority: open_by_priority[priority] for priority in ActionPriority},
        from_try_count=from_try,
        completion_rate=completion_rate(completed, total),
    )
    logger.debug("summarized %d records: %d completed, %d overdue", total, completed, overdue)
    return stats
