"""
Route building and post-action navigation.

Parent context (``athleteId`` / ``injuryId``) travels between views as a
query parameter; this module parses it and decides where each action
lands.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlencode

from injury_tracker.entities.registry import (
    REGISTRY,
    EntityKind,
    EntityDescriptor,
    SuccessTarget,
)


def parse_parent_id(raw: Any) -> int | None:
    """Parse a parent id from the query string; anything non-integral is ignored."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parent_descriptor(descriptor: EntityDescriptor) -> EntityDescriptor | None:
    if descriptor.parent is None:
        return None
    return REGISTRY[descriptor.parent.kind]


def child_descriptor(descriptor: EntityDescriptor) -> EntityDescriptor | None:
    """The entity whose parent is *descriptor*, e.g. injuries for athletes."""
    for candidate in REGISTRY.values():
        if candidate.parent is not None and candidate.parent.kind == descriptor.kind:
            return candidate
    return None


def _with_parent(path: str, descriptor: EntityDescriptor, parent_id: int | None) -> str:
    if parent_id is None or descriptor.parent is None:
        return path
    return f"{path}?{urlencode({descriptor.parent.query_param: parent_id})}"


def list_path(descriptor: EntityDescriptor, parent_id: int | None = None) -> str:
    return _with_parent(f"/{descriptor.resource}", descriptor, parent_id)


def detail_path(descriptor: EntityDescriptor, record_id: Any) -> str:
    return f"/{descriptor.resource}/{record_id}"


def add_path(descriptor: EntityDescriptor, parent_id: int | None = None) -> str:
    return _with_parent(f"/{descriptor.resource}/add", descriptor, parent_id)


def edit_path(descriptor: EntityDescriptor, record_id: Any) -> str:
    return f"/{descriptor.resource}/edit/{record_id}"


def cancel_target(descriptor: EntityDescriptor, parent_id: int | None = None) -> str:
    """Where a form's Cancel goes: the parent's detail when context is present."""
    parent = parent_descriptor(descriptor)
    if parent is not None and parent_id is not None:
        return detail_path(parent, parent_id)
    return list_path(descriptor)


def success_target(descriptor: EntityDescriptor, record_id: Any = None) -> str:
    """
    Where a successful create/update lands.

    Athletes return to the list; injuries and treatments open the affected
    record. A missing id falls back to the list rather than guessing one.
    """
    if descriptor.success_target == SuccessTarget.detail and record_id is not None:
        return detail_path(descriptor, record_id)
    return list_path(descriptor)


def list_links(descriptor: EntityDescriptor, parent_id: int | None = None) -> list[dict]:
    """Add and back links shown on a list view."""
    links = [
        {"label": f"Add New {descriptor.singular.title()}", "href": add_path(descriptor, parent_id)}
    ]
    parent = parent_descriptor(descriptor)
    if parent is None:
        return links
    if parent_id is None:
        links.append(
            {"label": f"View All {parent.plural.title()}", "href": list_path(parent)}
        )
        return links
    if parent.parent is not None:
        # Treatments filtered by injury also link back to that injury.
        links.append(
            {"label": f"Back to {parent.singular.title()}", "href": detail_path(parent, parent_id)}
        )
    links.append(
        {"label": f"Show All {descriptor.plural.title()}", "href": list_path(descriptor)}
    )
    return links


def detail_links(descriptor: EntityDescriptor, record_id: Any) -> list[dict]:
    """Back/edit links plus, for parents, links into their children."""
    links = [
        {"label": f"Back to {descriptor.plural.title()}", "href": list_path(descriptor)},
        {"label": "Edit", "href": edit_path(descriptor, record_id)},
    ]
    child = child_descriptor(descriptor)
    if child is not None:
        links.append(
            {"label": f"Add {child.singular.title()}", "href": add_path(child, record_id)}
        )
        links.append(
            {
                "label": f"View All {child.plural.title()} for this {descriptor.singular.title()}",
                "href": list_path(child, record_id),
            }
        )
    return links


def row_links(descriptor: EntityDescriptor, record: dict) -> dict[str, str]:
    """View/edit links for a list row plus links to the denormalized parents."""
    record_id = descriptor.record_id(record)
    links = {
        "view": detail_path(descriptor, record_id),
        "edit": edit_path(descriptor, record_id),
    }
    athlete_id = record.get("athleteID")
    if descriptor.parent is not None and athlete_id is not None:
        links["athlete"] = f"/athletes/{athlete_id}"
    injury_id = record.get("injuryID")
    if descriptor.kind == EntityKind.treatment and injury_id is not None:
        links["injury"] = f"/injuries/{injury_id}"
    return links


def empty_message(
    descriptor: EntityDescriptor, search: str | None = None, parent_id: int | None = None
) -> str:
    if search:
        return f"No {descriptor.plural} match your search criteria."
    parent = parent_descriptor(descriptor)
    if parent is not None and parent_id is not None:
        return f"No {descriptor.plural} recorded for this {parent.singular}."
    return f"No {descriptor.plural} have been recorded yet."
