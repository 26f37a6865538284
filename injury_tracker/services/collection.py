"""
View-scoped record collection.

Each list or detail view owns one of these; nothing is shared between
views, so two open views of the same entity may diverge until reloaded.
"""

from __future__ import annotations

from typing import Any, Iterator


class EntityCollection:
    """
    Ordered, in-memory copy of records fetched for one view.

    Records are stored exactly as decoded from the backend; reconciliation
    only removes whole records by primary key.
    """

    def __init__(self, id_field: str, records: list[dict] | None = None) -> None:
        self.id_field = id_field
        self._records: list[dict] = list(records or [])

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[dict]:
        return iter(self._records)

    def __contains__(self, id_: Any) -> bool:
        return self.find(id_) is not None

    @property
    def records(self) -> list[dict]:
        """A shallow copy in server order."""
        return list(self._records)

    def load(self, records: list[dict] | None) -> None:
        """Replace the whole collection with a fresh server response."""
        self._records = list(records or [])

    def find(self, id_: Any) -> dict | None:
        for record in self._records:
            if _same_id(record.get(self.id_field), id_):
                return record
        return None

    def remove(self, id_: Any) -> dict | None:
        """Remove and return the record with primary key *id_*, if present."""
        for idx, existing in enumerate(self._records):
            if _same_id(existing.get(self.id_field), id_):
                return self._records.pop(idx)
        return None


def _same_id(left: Any, right: Any) -> bool:
    # Route params arrive as strings while records carry integers.
    if left is None or right is None:
        return False
    return str(left) == str(right)
