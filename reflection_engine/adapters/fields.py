"""Field decoding shared by the action record adapters."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from reflection_engine.schema import ActionPriority, ActionRecord

REQUIRED_FIELDS = ("text", "created_at")
_TRUE = {"1", "true", "yes", "y"}
_FALSE = {"0", "false", "no", "n", ""}


def _parse_datetime(raw: Any, name: str, where: str) -> Optional[datetime]:
    """Parse an ISO timestamp as naive local time.

    Offset-bearing values are converted to local time and stripped so they
    compare with the naive timestamps used everywhere else.
    """

    if raw in (None, ""):
        return None
    try:
        value = datetime.fromisoformat(str(raw).strip())
    except ValueError as exc:
        raise ValueError(f"{where}: malformed {name}") from exc
    if value.tzinfo is not None:
        value = value.astimezone().replace(tzinfo=None)
    return value


def _parse_bool(raw: Any, name: str, where: str) -> bool:
    if isinstance(raw, bool):
        return raw
    value = str(raw if raw is not None else "").strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{where}: invalid {name} '{raw}'")


def _parse_priority(raw: Any, where: str) -> ActionPriority:
    if raw in (None, ""):
        return ActionPriority.MEDIUM
    try:
        return ActionPriority(str(raw).strip().lower())
    except ValueError as exc:
        raise ValueError(f"{where}: invalid priority '{raw}'") from exc


def _optional_text(raw: Any) -> Optional[str]:
    text = str(raw).strip() if raw is not None else ""
    return text or None


def build_record(raw: dict, where: str) -> ActionRecord:
    """Decode one exported action mapping, raising ``ValueError`` with ``where`` context."""

    missing = [name for name in REQUIRED_FIELDS if raw.get(name) in (None, "")]
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")

    values = dict(
        text=str(raw["text"]).strip(),
        is_completed=_parse_bool(raw.get("is_completed"), "is_completed", where),
        deadline=_parse_datetime(raw.get("deadline"), "deadline", where),
        completed_at=_parse_datetime(raw.get("completed_at"), "completed_at", where),
        from_try_item=_parse_bool(raw.get("from_try_item"), "from_try_item", where),
        priority=_parse_priority(raw.get("priority"), where),
        notes=_optional_text(raw.get("notes")),
        retrospective_id=_optional_text(raw.get("retrospective_id")),
        source_item_id=_optional_text(raw.get("source_item_id")),
        created_at=_parse_datetime(raw["created_at"], "created_at", where),
        updated_at=_parse_datetime(raw.get("updated_at"), "updated_at", where),
    )
    record_id = _optional_text(raw.get("id"))
    if record_id is not None:
        values["id"] = record_id
    return ActionRecord(**values)
