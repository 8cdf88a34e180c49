"""Predicate-based filtering of action records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional

from reflection_engine.config import settings
from reflection_engine.schema import ActionPriority, ActionRecord, CompletionStatus

logger = logging.getLogger(__name__)

Predicate = Callable[[ActionRecord], bool]


@dataclass(frozen=True)
class FilterCriteria:
    """Independent, optional constraints combined with AND.

    Every field defaults to "unconstrained"; an unset field never excludes a
    record.
    """

    completion_status: CompletionStatus = CompletionStatus.ALL
    deadline_start: Optional[datetime] = None
    deadline_end: Optional[datetime] = None
    created_start: Optional[datetime] = None
    created_end: Optional[datetime] = None
    priorities: frozenset = frozenset()
    retrospective_id: Optional[str] = None
    overdue_only: bool = False
    from_try_item_only: bool = False

    def __post_init__(self) -> None:
        # accept any iterable of priorities, store a frozenset
        if not isinstance(self.priorities, frozenset):
            object.__setattr__(self, "priorities", frozenset(self.priorities))

    @classmethod
    def incomplete(cls) -> "FilterCriteria":
        return cls(completion_status=CompletionStatus.INCOMPLETE)

    @classmethod
    def completed(cls) -> "FilterCriteria":
        return cls(completion_status=CompletionStatus.COMPLETED)

    @classmethod
    def overdue(cls) -> "FilterCriteria":
        return cls(completion_status=CompletionStatus.INCOMPLETE, overdue_only=True)

    @classmethod
    def high_priority(cls) -> "FilterCriteria":
        return cls(completion_status=CompletionStatus.INCOMPLETE, priorities=frozenset({ActionPriority.HIGH}))

    @classmethod
    def from_try(cls) -> "FilterCriteria":
        return cls(from_try_item_only=True)

    @classmethod
    def for_retrospective(cls, retrospective_id: str) -> "FilterCriteria":
        return cls(retrospective_id=retrospective_id)

    @classmethod
    def due_soon(cls, days: Optional[int] = None, now: Optional[datetime] = None) -> "FilterCriteria":
        """Open records with a deadline between ``now`` and ``now + days``."""

        now = now or datetime.now()
        days = settings.DUE_SOON_DAYS if days is None else days
        return cls(
            completion_status=CompletionStatus.INCOMPLETE,
            deadline_start=now,
            deadline_end=now + timedelta(days=days),
        )

    @classmethod
    def created_between(cls, start: datetime, end: datetime) -> "FilterCriteria":
        return cls(created_start=start, created_end=end)

    @property
    def is_unconstrained(self) -> bool:
        return self == FilterCriteria()


def _completion_predicate(status: CompletionStatus) -> Optional[Predicate]:
    if status is CompletionStatus.COMPLETED:
        return lambda record: record.is_completed
    if status is CompletionStatus.INCOMPLETE:
        return lambda record: not record.is_completed
    return None


def _deadline_predicates(criteria: FilterCriteria) -> list[Predicate]:
    predicates: list[Predicate] = []
    start, end = criteria.deadline_start, criteria.deadline_end
    if start is not None:
        predicates.append(lambda record: record.deadline is not None and record.deadline >= start)
    if end is not None:
        predicates.append(lambda record: record.deadline is not None and record.deadline <= end)
    return predicates


def _created_predicates(criteria: FilterCriteria) -> list[Predicate]:
    predicates: list[Predicate] = []
    start, end = criteria.created_start, criteria.created_end
    if start is not None:
        predicates.append(lambda record: record.created_at >= start)
    if end is not None:
        predicates.append(lambda record: record.created_at <= end)
    return predicates


def build_predicates(criteria: FilterCriteria, now: Optional[datetime] = None) -> list[Predicate]:
    """Return one pure predicate per active constraint.

    The predicates commute, so their order does not change the result.
    """

    now = now or datetime.now()
    predicates: list[Predicate] = []

    completion = _completion_predicate(criteria.completion_status)
    if completion is not None:
        predicates.append(completion)

    predicates.extend(_deadline_predicates(criteria))
    predicates.extend(_created_predicates(criteria))

    if criteria.priorities:
        allowed = criteria.priorities
        predicates.append(lambda record: record.priority in allowed)

    if criteria.retrospective_id is not None:
        retrospective_id = criteria.retrospective_id
        predicates.append(lambda record: record.retrospective_id == retrospective_id)

    if criteria.overdue_only:
        predicates.append(lambda record: record.is_overdue(now))

    if criteria.from_try_item_only:
        predicates.append(lambda record: record.from_try_item)

    return predicates


def matches(record: ActionRecord, criteria: FilterCriteria, now: Optional[datetime] = None) -> bool:
    """Return True when ``record`` satisfies every active constraint."""

    return all(predicate(record) for predicate in build_predicates(criteria, now))


def apply(records: Iterable[ActionRecord], criteria: FilterCriteria, now: Optional[datetime] = None) -> list[ActionRecord]:
    """Filter records, preserving input order.

    ``now`` is fixed once for the whole call so overdue checks agree.
    """

    records = list(records)
    predicates = build_predicates(criteria, now)
    result = [record for record in records if all(predicate(record) for predicate in predicates)]
    logger.debug("filter kept %d of %d records (%d active constraints)", len(result), len(records), len(predicates))
    return result
