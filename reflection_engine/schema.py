"""Core data schema for reflections and their action records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from functools import total_ordering
from typing import Optional
from uuid import uuid4


def _new_id() -> str:
    return str(uuid4())


@total_ordering
class ActionPriority(Enum):
    """Priority of an action record; ``HIGH < MEDIUM < LOW``."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def sort_order(self) -> int:
        return _PRIORITY_RANK[self]

    def __lt__(self, other):
        if not isinstance(other, ActionPriority):
            return NotImplemented
        return self.sort_order < other.sort_order


_PRIORITY_RANK = {ActionPriority.HIGH: 0, ActionPriority.MEDIUM: 1, ActionPriority.LOW: 2}


class KPTACategory(Enum):
    KEEP = "keep"
    PROBLEM = "problem"
    TRY = "try"


class RetrospectiveType(Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class CompletionStatus(Enum):
    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


class SortOrder(Enum):
    CREATED_ASCENDING = "created_ascending"
    CREATED_DESCENDING = "created_descending"
    DEADLINE_ASCENDING = "deadline_ascending"
    DEADLINE_DESCENDING = "deadline_descending"
    PRIORITY_HIGH_FIRST = "priority_high_first"
    PRIORITY_LOW_FIRST = "priority_low_first"
    UPDATED_DESCENDING = "updated_descending"


@dataclass
class ActionRecord:
    """A trackable task, optionally derived from a Try entry of a retrospective.

    ``completed_at`` is set exactly when ``is_completed`` is true; the
    constructor repairs inputs that disagree. Every mutator refreshes
    ``updated_at``. Callers must serialize edits to a single record.
    """

    text: str
    id: str = field(default_factory=_new_id)
    is_completed: bool = False
    deadline: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    from_try_item: bool = False
    priority: ActionPriority = ActionPriority.MEDIUM
    notes: Optional[str] = None
    retrospective_id: Optional[str] = None
    source_item_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at
        if not self.is_completed:
            self.completed_at = None
        elif self.completed_at is None:
            self.completed_at = self.updated_at

    # Derived state

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """True for an open record whose deadline has already passed."""

        if self.deadline is None or self.is_completed:
            return False
        return self.deadline < (now or datetime.now())

    def is_due_soon(self, within_days: int = 3, now: Optional[datetime] = None) -> bool:
        """True for an open record due between ``now`` and ``now + within_days``."""

        if self.deadline is None or self.is_completed:
            return False
        now = now or datetime.now()
        return now <= self.deadline <= now + timedelta(days=within_days)

    @property
    def has_notes(self) -> bool:
        return bool(self.notes and self.notes.strip())

    # Mutation

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or datetime.now()

    def mark_completed(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.now()
        self.is_completed = True
        self.completed_at = now
        self.touch(now)

    def mark_incomplete(self, now: Optional[datetime] = None) -> None:
        self.is_completed = False
        self.completed_at = None
        self.touch(now)

    def toggle_completion(self, now: Optional[datetime] = None) -> None:
        if self.is_completed:
            self.mark_incomplete(now)
        else:
            self.mark_completed(now)

    def update_text(self, text: str, now: Optional[datetime] = None) -> None:
        self.text = text.strip()
        self.touch(now)

    def update_priority(self, priority: ActionPriority, now: Optional[datetime] = None) -> None:
        self.priority = priority
        self.touch(now)

    def update_notes(self, notes: Optional[str], now: Optional[datetime] = None) -> None:
        """Set trimmed notes; ``None`` or blank text clears them."""

        trimmed = notes.strip() if notes is not None else ""
        self.notes = trimmed or None
        self.touch(now)

    def update_deadline(self, deadline: Optional[datetime], now: Optional[datetime] = None) -> None:
        self.deadline = deadline
        self.touch(now)


@dataclass
class KPTAItem:
    """A single Keep, Problem or Try entry owned by one retrospective."""

    text: str
    category: KPTACategory
    order_index: int = 0
    id: str = field(default_factory=_new_id)
    retrospective_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class HealthMetricsSample:
    """Health metrics already aggregated over one period.

    ``wellness_score`` is derived output only; scoring always recomputes it
    from the raw metrics.
    """

    period_start: datetime
    period_end: datetime
    avg_sleep_minutes: Optional[int] = None
    avg_sleep_quality_score: Optional[int] = None  # 0-100
    avg_steps: Optional[int] = None
    total_exercise_minutes: Optional[int] = None
    avg_stand_hours: Optional[int] = None
    avg_active_calories: Optional[int] = None
    total_workouts: Optional[int] = None
    wellness_score: Optional[int] = None  # 0-100


@dataclass
class Retrospective:
    """A reflection over one period.

    Children are referenced by id only (``item_ids``, ``action_ids``); a
    record store resolves them. Deleting a retrospective deletes its children.
    """

    title: str
    type: RetrospectiveType
    start_date: datetime
    end_date: datetime
    id: str = field(default_factory=_new_id)
    item_ids: list[str] = field(default_factory=list)
    action_ids: list[str] = field(default_factory=list)
    health_sample: Optional[HealthMetricsSample] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if self.updated_at is None:
            self.updated_at = self.created_at

    def touch(self, now: Optional[datetime] = None) -> None:
        self.updated_at = now or datetime.now()
