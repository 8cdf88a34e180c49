"""In-memory arena holding retrospectives, their entries and action records.

Records reference their owner by id only. The store resolves ids, keeps the
owner's ordered id lists in step with its arenas and cascades deletes from a
retrospective to its children. It does no locking: callers serialize writes.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from reflection_engine import filtering, metrics, retrospective as retro_views, sorting
from reflection_engine.errors import RecordNotFoundError
from reflection_engine.filtering import FilterCriteria
from reflection_engine.metrics import ActionStatistics
from reflection_engine.retrospective import RetrospectiveSummary
from reflection_engine.schema import (
    ActionPriority,
    ActionRecord,
    KPTACategory,
    KPTAItem,
    Retrospective,
    SortOrder,
)

logger = logging.getLogger(__name__)

_UNSET = object()


class RecordStore:
    """Id-indexed arenas for the reflection ownership graph."""

    def __init__(self) -> None:
        self._retrospectives: dict[str, Retrospective] = {}
        self._items: dict[str, KPTAItem] = {}
        self._actions: dict[str, ActionRecord] = {}

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_retrospective(self, retrospective_id: str) -> Retrospective:
        try:
            return self._retrospectives[retrospective_id]
        except KeyError:
            raise RecordNotFoundError("Retrospective", retrospective_id) from None

    def get_item(self, item_id: str) -> KPTAItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise RecordNotFoundError("KPTAItem", item_id) from None

    def get_action(self, action_id: str) -> ActionRecord:
        try:
            return self._actions[action_id]
        except KeyError:
            raise RecordNotFoundError("ActionRecord", action_id) from None

    def items_for(self, retrospective_id: str) -> list[KPTAItem]:
        retrospective = self.get_retrospective(retrospective_id)
        return [self._items[item_id] for item_id in retrospective.item_ids]

    def actions_for(self, retrospective_id: str) -> list[ActionRecord]:
        retrospective = self.get_retrospective(retrospective_id)
        return [self._actions[action_id] for action_id in retrospective.action_ids]

    @property
    def retrospectives(self) -> list[Retrospective]:
        return list(self._retrospectives.values())

    @property
    def actions(self) -> list[ActionRecord]:
        return list(self._actions.values())

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def add_retrospective(self, retrospective: Retrospective) -> Retrospective:
        self._retrospectives[retrospective.id] = retrospective
        return retrospective

    def add_item(
        self,
        retrospective_id: str,
        text: str,
        category: KPTACategory,
        order_index: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> KPTAItem:
        """Attach a new entry; ``order_index`` defaults to the end of its category."""

        retrospective = self.get_retrospective(retrospective_id)
        if order_index is None:
            order_index = sum(1 for item in self.items_for(retrospective_id) if item.category is category)

        item = KPTAItem(
            text=text.strip(),
            category=category,
            order_index=order_index,
            retrospective_id=retrospective_id,
            created_at=now or datetime.now(),
        )
        self._items[item.id] = item
        retrospective.item_ids.append(item.id)
        retrospective.touch(now)
        return item

    def create_action(
        self,
        text: str,
        deadline: Optional[datetime] = None,
        priority: ActionPriority = ActionPriority.MEDIUM,
        from_try_item: bool = False,
        retrospective_id: Optional[str] = None,
        source_item_id: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ActionRecord:
        """Create an action, attaching it to ``retrospective_id`` when given."""

        retrospective = self.get_retrospective(retrospective_id) if retrospective_id is not None else None
        if source_item_id is not None:
            self.get_item(source_item_id)

        now = now or datetime.now()
        action = ActionRecord(
            text=text.strip(),
            deadline=deadline,
            from_try_item=from_try_item or source_item_id is not None,
            priority=priority,
            notes=(notes.strip() or None) if notes else None,
            retrospective_id=retrospective_id,
            source_item_id=source_item_id,
            created_at=now,
        )
        self._actions[action.id] = action

        if retrospective is not None:
            retrospective.action_ids.append(action.id)
            retrospective.touch(now)

        logger.debug("created action %s (retrospective=%s)", action.id, retrospective_id)
        return action

    def create_action_from_try(
        self,
        item_id: str,
        text: Optional[str] = None,
        deadline: Optional[datetime] = None,
        priority: ActionPriority = ActionPriority.MEDIUM,
        retrospective_id: Optional[str] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> ActionRecord:
        """Create an action from a Try entry, inheriting its text and owner."""

        item = self.get_item(item_id)
        return self.create_action(
            text=text if text is not None else item.text,
            deadline=deadline,
            priority=priority,
            from_try_item=True,
            retrospective_id=retrospective_id if retrospective_id is not None else item.retrospective_id,
            source_item_id=item.id,
            notes=notes,
            now=now,
        )

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_action(
        self,
        action_id: str,
        text: Optional[str] = None,
        deadline=_UNSET,
        priority: Optional[ActionPriority] = None,
        notes=_UNSET,
        now: Optional[datetime] = None,
    ) -> ActionRecord:
        """Apply the given edits; omitted arguments leave fields unchanged.

        ``deadline=None`` and ``notes=None`` clear those fields.
        """

        action = self.get_action(action_id)
        if text is not None:
            action.update_text(text, now)
        if deadline is not _UNSET:
            action.update_deadline(deadline, now)
        if priority is not None:
            action.update_priority(priority, now)
        if notes is not _UNSET:
            action.update_notes(notes, now)
        return action

    def toggle_completion(self, action_id: str, now: Optional[datetime] = None) -> ActionRecord:
        action = self.get_action(action_id)
        action.toggle_completion(now)
        return action

    def mark_all_completed(self, action_ids: Iterable[str], now: Optional[datetime] = None) -> None:
        for action_id in action_ids:
            self.get_action(action_id).mark_completed(now)

    def mark_all_incomplete(self, action_ids: Iterable[str], now: Optional[datetime] = None) -> None:
        for action_id in action_ids:
            self.get_action(action_id).mark_incomplete(now)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def delete_action(self, action_id: str) -> None:
        action = self.get_action(action_id)
        if action.retrospective_id in self._retrospectives:
            owner = self._retrospectives[action.retrospective_id]
            owner.action_ids.remove(action_id)
            owner.touch()
        del self._actions[action_id]

    def delete_actions(self, action_ids: Iterable[str]) -> None:
        for action_id in list(action_ids):
            self.delete_action(action_id)

    def delete_completed_actions(self) -> int:
        completed = [action.id for action in self._actions.values() if action.is_completed]
        self.delete_actions(completed)
        return len(completed)

    def _unlink_source_item(self, item_id: str) -> None:
        for action in self._actions.values():
            if action.source_item_id == item_id:
                action.source_item_id = None

    def delete_item(self, item_id: str) -> None:
        """Remove an entry; actions derived from it keep living without the link."""

        item = self.get_item(item_id)
        if item.retrospective_id in self._retrospectives:
            self._retrospectives[item.retrospective_id].item_ids.remove(item_id)
        self._unlink_source_item(item_id)
        del self._items[item_id]

    def delete_retrospective(self, retrospective_id: str) -> None:
        """Delete a retrospective together with its entries and actions."""

        retrospective = self.get_retrospective(retrospective_id)
        for item_id in retrospective.item_ids:
            self._items.pop(item_id, None)
            self._unlink_source_item(item_id)
        for action_id in retrospective.action_ids:
            self._actions.pop(action_id, None)
        del self._retrospectives[retrospective_id]
        logger.debug(
            "deleted retrospective %s with %d entries and %d actions",
            retrospective_id,
            len(retrospective.item_ids),
            len(retrospective.action_ids),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def fetch_actions(
        self,
        criteria: Optional[FilterCriteria] = None,
        order: SortOrder = SortOrder.CREATED_DESCENDING,
        now: Optional[datetime] = None,
    ) -> list[ActionRecord]:
        filtered = filtering.apply(self._actions.values(), criteria or FilterCriteria(), now)
        return sorting.apply(filtered, order)

    def statistics(self, criteria: Optional[FilterCriteria] = None, now: Optional[datetime] = None) -> ActionStatistics:
        now = now or datetime.now()
        return metrics.summarize(filtering.apply(self._actions.values(), criteria or FilterCriteria(), now), now)

    def retrospective_summary(self, retrospective_id: str) -> RetrospectiveSummary:
        retrospective = self.get_retrospective(retrospective_id)
        return retro_views.summarize(
            retrospective,
            self.items_for(retrospective_id),
            self.actions_for(retrospective_id),
        )
