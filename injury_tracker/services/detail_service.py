"""
Detail views and their related-record lookups.

The primary record is fetched first; only once it has loaded is the
secondary, parent-scoped fetch of child records issued. A failed
secondary fetch is logged and degrades to an empty related list.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any

from injury_tracker.core.errors import ApiError
from injury_tracker.dtos.athlete_dto import AthleteForm
from injury_tracker.dtos.form_base import display_date
from injury_tracker.dtos.injury_dto import InjuryForm
from injury_tracker.dtos.treatment_dto import TreatmentForm
from injury_tracker.dtos.view_dto import (
    Banner,
    DetailView,
    Link,
    RelatedList,
    banner_from_error,
)
from injury_tracker.entities.registry import EntityDescriptor, EntityKind
from injury_tracker.repositories.base_repo import BaseRepository
from injury_tracker.services import navigation
from injury_tracker.services.list_view_service import ViewState

logger = logging.getLogger(__name__)

DISPLAY_DATES: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.athlete: AthleteForm.DATE_FIELDS,
    EntityKind.injury: InjuryForm.DATE_FIELDS,
    EntityKind.treatment: TreatmentForm.DATE_FIELDS,
}


def calculate_age(date_of_birth: Any, today: date | None = None) -> int | None:
    """Completed years since *date_of_birth*; None when it cannot be parsed."""
    if not date_of_birth:
        return None
    try:
        dob = (
            date_of_birth
            if isinstance(date_of_birth, date)
            else date.fromisoformat(str(date_of_birth)[:10])
        )
    except ValueError:
        return None
    today = today or date.today()
    age = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        age -= 1
    return age


async def fetch_related(
    repo: BaseRepository, parent_id: Any, label: str
) -> list[dict]:
    """Parent-scoped fetch that never fails its caller."""
    try:
        return await asyncio.to_thread(repo.list_by_parent, parent_id) or []
    except ApiError as exc:
        logger.warning("Error loading %s for %s: %r", label, parent_id, exc)
        return []


async def fetch_optional(repo: BaseRepository, record_id: Any, label: str) -> dict | None:
    """Single-record fetch that never fails its caller."""
    try:
        return await asyncio.to_thread(repo.get_by_id, record_id)
    except ApiError as exc:
        logger.warning("Error loading %s %s: %r", label, record_id, exc)
        return None


class DetailViewService:
    """
    Owns the record (and related child records) behind one detail view.

    Args:
        descriptor: Entity shown by the view
        repo: Repository for that entity
        child_repo: Repository of the child entity, when related records
            are listed (athletes list injuries, injuries list treatments)
    """

    def __init__(
        self,
        descriptor: EntityDescriptor,
        repo: BaseRepository,
        child_repo: BaseRepository | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.repo = repo
        self.child_repo = child_repo
        self.child = navigation.child_descriptor(descriptor) if child_repo else None
        self.record_id: Any = None
        self.record: dict | None = None
        self.related: list[dict] = []
        self.state = ViewState.idle
        self.error: Banner | None = None
        self.confirming_delete = False

    async def load(self, record_id: Any) -> None:
        self.record_id = record_id
        self.state = ViewState.loading
        try:
            record = await asyncio.to_thread(self.repo.get_by_id, record_id)
        except ApiError as exc:
            logger.error(
                "Error loading %s %s: %r", self.descriptor.singular, record_id, exc
            )
            self.state = ViewState.failed
            self.error = banner_from_error(
                exc,
                f"Failed to load {self.descriptor.singular} details. Please try again later.",
                self.descriptor.singular,
            )
            return

        self.record = record
        if self.child is not None:
            self.related = await fetch_related(self.child_repo, record_id, self.child.plural)
        self.state = ViewState.ready
        self.error = None

    def request_delete(self) -> bool:
        if self.state != ViewState.ready:
            return False
        self.confirming_delete = True
        return True

    def cancel_delete(self) -> None:
        self.confirming_delete = False

    async def confirm_delete(self) -> str | None:
        """
        Delete the shown record.

        Returns:
            Navigation target (the entity list) on success, None on failure
        """
        try:
            await asyncio.to_thread(self.repo.delete, self.record_id)
        except ApiError as exc:
            logger.error(
                "Error deleting %s %s: %r", self.descriptor.singular, self.record_id, exc
            )
            self.error = banner_from_error(
                exc,
                f"Failed to delete {self.descriptor.singular}. Please try again later.",
            )
            return None
        self.confirming_delete = False
        return navigation.list_path(self.descriptor)

    def _extras(self) -> dict[str, Any]:
        if self.record is None:
            return {}
        extras: dict[str, Any] = {
            "dates": {
                name: display_date(self.record.get(name))
                for name in DISPLAY_DATES[self.descriptor.kind]
            }
        }
        if self.descriptor.kind == EntityKind.athlete:
            extras["age"] = calculate_age(self.record.get("dateOfBirth"))
        elif self.descriptor.kind == EntityKind.treatment:
            extras["showFollowUpDate"] = bool(
                self.record.get("followUpRequired") and self.record.get("followUpDate")
            )
        return extras

    def to_view(self) -> DetailView:
        related = None
        if self.child is not None and self.state == ViewState.ready:
            related = RelatedList(
                entity=self.child.plural,
                records=self.related,
                badges=[
                    {
                        field: colour(record.get(field))
                        for field, colour in self.child.badges.items()
                    }
                    for record in self.related
                ],
            )
        return DetailView(
            entity=self.descriptor.singular,
            state=self.state,
            id=self.record_id,
            record=self.record,
            badges=(
                {
                    field: colour(self.record.get(field))
                    for field, colour in self.descriptor.badges.items()
                }
                if self.record
                else {}
            ),
            extras=self._extras(),
            related=related,
            confirming_delete=self.confirming_delete,
            error=self.error,
            links=(
                [Link(**link) for link in navigation.detail_links(self.descriptor, self.record_id)]
                if self.record
                else [Link(label=f"Back to {self.descriptor.plural.title()}", href=navigation.list_path(self.descriptor))]
            ),
        )
