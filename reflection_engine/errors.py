"""Exceptions raised on the write path and by the record store."""

from __future__ import annotations


class RecordNotFoundError(KeyError):
    """Raised when an id does not resolve to a stored record."""

    def __init__(self, kind: str, record_id: str):
        super().__init__(f"{kind} '{record_id}' not found")
        self.kind = kind
        self.record_id = record_id


class ValidationError(ValueError):
    """Raised when a value fails write-path validation."""

    def __init__(self, problems: list[str]):
        super().__init__("; ".join(problems))
        self.problems = list(problems)
