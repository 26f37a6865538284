"""
Client-side free-text filtering.

Matching is a case-insensitive substring test over a fixed set of fields
per entity, OR-ed together. Filtering keeps server order and never
mutates its input.
"""

from __future__ import annotations

from typing import Iterable, Sequence


def normalize_term(term: str | None) -> str:
    if not term:
        return ""
    return term.lower()


def field_matches(record: dict, field: str, needle: str) -> bool:
    """True when *field* holds a string containing *needle*; absent never matches."""
    value = record.get(field)
    if not isinstance(value, str):
        return False
    return needle in value.lower()


def record_matches(record: dict, term: str | None, fields: Sequence[str]) -> bool:
    needle = normalize_term(term)
    if not needle:
        return True
    return any(field_matches(record, field, needle) for field in fields)


def filter_records(
    records: Iterable[dict], term: str | None, fields: Sequence[str]
) -> list[dict]:
    """
    Return the records matching *term*, preserving input order.

    Args:
        records: Records in server order
        term: Search term; blank or None matches everything
        fields: Field names searched for each record

    Returns:
        New list holding the matching records
    """
    return [record for record in records if record_matches(record, term, fields)]
