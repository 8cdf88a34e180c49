from datetime import datetime, timedelta

import pytest

from reflection_engine.errors import RecordNotFoundError
from reflection_engine.filtering import FilterCriteria
from reflection_engine.schema import ActionPriority, KPTACategory, Retrospective, RetrospectiveType, SortOrder
from reflection_engine.store import RecordStore

NOW = datetime.fromisoformat("2025-12-01T12:00:00")


def make_store():
    store = RecordStore()
    retro = store.add_retrospective(
        Retrospective("Week of Nov 24", RetrospectiveType.WEEKLY, NOW - timedelta(days=7), NOW, created_at=NOW)
    )
    return store, retro


def test_add_items_assigns_order_within_category():
    store, retro = make_store()
    first = store.add_item(retro.id, " slept well ", KPTACategory.KEEP, now=NOW)
    store.add_item(retro.id, "skipped gym", KPTACategory.PROBLEM, now=NOW)
    second = store.add_item(retro.id, "journaled", KPTACategory.KEEP, now=NOW)

    assert first.text == "slept well"
    assert (first.order_index, second.order_index) == (0, 1)
    assert first.retrospective_id == retro.id
    assert [item.id for item in store.items_for(retro.id)] == retro.item_ids


def test_create_action_attaches_to_retrospective():
    store, retro = make_store()
    later = NOW + timedelta(minutes=1)
    action = store.create_action("walk", retrospective_id=retro.id, now=later)

    assert retro.action_ids == [action.id]
    assert retro.updated_at == later
    assert store.get_action(action.id) is action
    assert action.from_try_item is False


def test_create_action_from_try_inherits_text_and_owner():
    store, retro = make_store()
    item = store.add_item(retro.id, "morning walks", KPTACategory.TRY, now=NOW)
    action = store.create_action_from_try(item.id, priority=ActionPriority.HIGH, now=NOW)

    assert action.text == "morning walks"
    assert action.from_try_item is True
    assert action.source_item_id == item.id
    assert action.retrospective_id == retro.id
    assert store.actions_for(retro.id) == [action]


def test_standalone_action():
    store, _ = make_store()
    action = store.create_action("  call mom  ", notes="   ", now=NOW)
    assert action.text == "call mom"
    assert action.notes is None
    assert action.retrospective_id is None


def test_unknown_ids_raise():
    store, _ = make_store()
    with pytest.raises(RecordNotFoundError):
        store.get_action("missing")
    with pytest.raises(KeyError):
        store.create_action("x", retrospective_id="missing")
    with pytest.raises(RecordNotFoundError):
        store.create_action_from_try("missing")


def test_update_action_distinguishes_clear_from_unchanged():
    store, _ = make_store()
    action = store.create_action("task", deadline=NOW, notes="keep me", now=NOW)
    later = NOW + timedelta(hours=1)

    store.update_action(action.id, priority=ActionPriority.LOW, now=later)
    assert action.deadline == NOW
    assert action.notes == "keep me"
    assert action.priority is ActionPriority.LOW
    assert action.updated_at == later

    store.update_action(action.id, deadline=None, notes=None)
    assert action.deadline is None
    assert action.notes is None


def test_delete_retrospective_cascades():
    store, retro = make_store()
    item = store.add_item(retro.id, "try", KPTACategory.TRY, now=NOW)
    owned = store.create_action_from_try(item.id, now=NOW)
    standalone = store.create_action("standalone", now=NOW)

    store.delete_retrospective(retro.id)

    assert store.retrospectives == []
    assert store.actions == [standalone]
    with pytest.raises(RecordNotFoundError):
        store.get_item(item.id)
    with pytest.raises(RecordNotFoundError):
        store.get_action(owned.id)


def test_delete_retrospective_unlinks_actions_owned_elsewhere():
    store, retro = make_store()
    other = store.add_retrospective(Retrospective("Next week", RetrospectiveType.WEEKLY, NOW, NOW + timedelta(days=7)))
    item = store.add_item(retro.id, "try", KPTACategory.TRY, now=NOW)
    moved = store.create_action_from_try(item.id, retrospective_id=other.id, now=NOW)

    store.delete_retrospective(retro.id)

    assert store.actions_for(other.id) == [moved]
    assert moved.source_item_id is None
    assert moved.from_try_item is True


def test_delete_action_detaches_from_owner():
    store, retro = make_store()
    action = store.create_action("walk", retrospective_id=retro.id, now=NOW)
    store.delete_action(action.id)
    assert retro.action_ids == []
    assert store.actions == []


def test_delete_item_unlinks_derived_actions():
    store, retro = make_store()
    item = store.add_item(retro.id, "try", KPTACategory.TRY, now=NOW)
    action = store.create_action_from_try(item.id, now=NOW)
    store.delete_item(item.id)
    assert retro.item_ids == []
    assert action.source_item_id is None
    assert action.from_try_item is True


def test_batch_completion_and_cleanup():
    store, _ = make_store()
    a = store.create_action("a", now=NOW)
    b = store.create_action("b", now=NOW)
    c = store.create_action("c", now=NOW)

    store.mark_all_completed([a.id, b.id], now=NOW)
    assert a.is_completed and b.is_completed and not c.is_completed

    store.mark_all_incomplete([b.id], now=NOW)
    assert not b.is_completed and b.completed_at is None

    store.toggle_completion(c.id, now=NOW)
    assert store.delete_completed_actions() == 2
    assert store.actions == [b]


def test_fetch_actions_and_statistics():
    store, retro = make_store()
    store.create_action("old", priority=ActionPriority.LOW, now=NOW - timedelta(days=2))
    high = store.create_action("high", priority=ActionPriority.HIGH, retrospective_id=retro.id,
                               deadline=NOW - timedelta(hours=1), now=NOW - timedelta(days=1))
    done = store.create_action("done", now=NOW)
    done.mark_completed(NOW)

    newest_first = store.fetch_actions(now=NOW)
    assert [a.text for a in newest_first] == ["done", "high", "old"]

    by_priority = store.fetch_actions(FilterCriteria.incomplete(), SortOrder.PRIORITY_HIGH_FIRST, now=NOW)
    assert [a.text for a in by_priority] == ["high", "old"]

    stats = store.statistics(now=NOW)
    assert (stats.total, stats.completed, stats.overdue) == (3, 1, 1)

    scoped = store.statistics(FilterCriteria.for_retrospective(retro.id), now=NOW)
    assert scoped.total == 1
    assert store.fetch_actions(FilterCriteria.overdue(), now=NOW) == [high]


def test_retrospective_summary():
    store, retro = make_store()
    store.add_item(retro.id, "keep", KPTACategory.KEEP, now=NOW)
    try_item = store.add_item(retro.id, "try", KPTACategory.TRY, now=NOW)
    action = store.create_action_from_try(try_item.id, now=NOW)
    store.create_action("second", retrospective_id=retro.id, now=NOW)
    action.mark_completed(NOW)

    summary = store.retrospective_summary(retro.id)
    assert summary.total_kpta_count == 2
    assert [item.text for item in summary.views.try_] == ["try"]
    assert summary.completed_actions_count == 1
    assert summary.pending_actions_count == 1
    assert summary.action_completion_rate == pytest.approx(0.5)
    assert summary.period_days == 7
