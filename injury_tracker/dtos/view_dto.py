"""
View models returned by the front-end routes.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from injury_tracker.core.errors import ApiError, ErrorKind


class Banner(BaseModel):
    """A dismissible, human-readable error scoped to one view."""

    kind: ErrorKind
    message: str
    dismissible: bool = True


class Link(BaseModel):
    label: str
    href: str


class Option(BaseModel):
    value: Any
    label: str


class ListRow(BaseModel):
    id: Any
    record: dict[str, Any]
    badges: dict[str, str] = Field(default_factory=dict)
    links: dict[str, str] = Field(default_factory=dict)
    confirming_delete: bool = False


class ListView(BaseModel):
    entity: str
    state: str
    search: str = ""
    parent_filter: dict[str, Any] | None = None
    total: int = 0
    rows: list[ListRow] = Field(default_factory=list)
    empty_message: str | None = None
    pending_delete: Any = None
    error: Banner | None = None
    links: list[Link] = Field(default_factory=list)


class RelatedList(BaseModel):
    entity: str
    records: list[dict[str, Any]] = Field(default_factory=list)
    badges: list[dict[str, str]] = Field(default_factory=list)


class DetailView(BaseModel):
    entity: str
    state: str
    id: Any
    record: dict[str, Any] | None = None
    badges: dict[str, str] = Field(default_factory=dict)
    extras: dict[str, Any] = Field(default_factory=dict)
    related: RelatedList | None = None
    confirming_delete: bool = False
    error: Banner | None = None
    links: list[Link] = Field(default_factory=list)


class FieldState(BaseModel):
    name: str
    value: Any
    disabled: bool = False
    options: list[Option] | None = None


class FormView(BaseModel):
    entity: str
    mode: str
    state: str
    id: Any = None
    values: dict[str, Any] = Field(default_factory=dict)
    fields: list[FieldState] = Field(default_factory=list)
    field_errors: dict[str, str] = Field(default_factory=dict)
    context: dict[str, Any] | None = None
    parent_details: dict[str, Any] | None = None
    cancel_href: str
    redirect_to: str | None = None
    error: Banner | None = None


def banner_from_error(exc: ApiError, message: str, singular: str | None = None) -> Banner:
    """
    Build the banner shown for a failed backend call.

    Args:
        exc: Classified failure
        message: Default text for the failed action
        singular: Entity name, used for not-found wording

    Returns:
        Banner carrying the failure kind
    """
    if exc.kind == ErrorKind.not_found and singular:
        text = f"The requested {singular} could not be found."
    elif exc.kind == ErrorKind.connectivity:
        text = "Unable to reach the server. Please check your connection and try again."
    else:
        text = message
    return Banner(kind=exc.kind, message=text)
