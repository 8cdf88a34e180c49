"""Ordering of action record collections."""

from __future__ import annotations

import logging
from typing import Iterable

from reflection_engine.schema import ActionRecord, SortOrder

logger = logging.getLogger(__name__)


def _deadline_key(record: ActionRecord) -> tuple:
    # dated records group before undated ones; undated fall back to created_at
    if record.deadline is None:
        return (1, record.created_at)
    return (0, record.deadline)


def _by_priority(records: list[ActionRecord], high_first: bool) -> list[ActionRecord]:
    newest_first = sorted(records, key=lambda r: r.created_at, reverse=True)
    return sorted(newest_first, key=lambda r: r.priority.sort_order, reverse=not high_first)


def apply(records: Iterable[ActionRecord], order: SortOrder) -> list[ActionRecord]:
    """Return a new list ordered by ``order``.

    All orders are stable: records that compare equal keep their input order.

    Deadline orders place undated records on opposite ends: last when
    ascending, first when descending.
    """

    records = list(records)

    if order is SortOrder.CREATED_ASCENDING:
        result = sorted(records, key=lambda r: r.created_at)
    elif order is SortOrder.CREATED_DESCENDING:
        result = sorted(records, key=lambda r: r.created_at, reverse=True)
    elif order is SortOrder.DEADLINE_ASCENDING:
        result = sorted(records, key=_deadline_key)
    elif order is SortOrder.DEADLINE_DESCENDING:
        result = sorted(records, key=_deadline_key, reverse=True)
    elif order is SortOrder.PRIORITY_HIGH_FIRST:
        result = _by_priority(records, high_first=True)
    elif order is SortOrder.PRIORITY_LOW_FIRST:
        result = _by_priority(records, high_first=False)
    elif order is SortOrder.UPDATED_DESCENDING:
        result = sorted(records, key=lambda r: r.updated_at, reverse=True)
    else:
        raise ValueError(f"Unsupported sort order: {order!r}")

    logger.debug("sorted %d records by %s", len(result), order.value)
    return result
