"""
List view lifecycle and delete reconciliation.

State machine:  idle -> loading -> ready | failed
    While ready, one row at a time may sit in a confirming-delete
    sub-state. A row leaves the collection only after the backend
    acknowledges the delete; on failure the collection is left untouched.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Any

from injury_tracker.core.errors import ApiError
from injury_tracker.dtos.view_dto import Banner, Link, ListRow, ListView, banner_from_error
from injury_tracker.entities.registry import EntityDescriptor
from injury_tracker.repositories.base_repo import BaseRepository
from injury_tracker.services import navigation
from injury_tracker.services.collection import EntityCollection
from injury_tracker.services.filter_service import filter_records

logger = logging.getLogger(__name__)


class ViewState(StrEnum):
    idle = "idle"
    loading = "loading"
    ready = "ready"
    failed = "failed"


class ListViewService:
    """
    Owns the collection behind one list view.

    Args:
        descriptor: Entity shown by the list
        repo: Repository for that entity
        parent_id: Parent filter from the query string; switches the load
            to the parent-scoped endpoint
    """

    def __init__(
        self,
        descriptor: EntityDescriptor,
        repo: BaseRepository,
        parent_id: int | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.repo = repo
        self.parent_id = parent_id if descriptor.parent is not None else None
        self.collection = EntityCollection(descriptor.id_field)
        self.state = ViewState.idle
        self.error: Banner | None = None
        self.pending_delete_id: Any = None

    async def load(self) -> None:
        """Fetch the collection; the previous contents are replaced on success."""
        self.state = ViewState.loading
        try:
            if self.parent_id is not None:
                records = await asyncio.to_thread(self.repo.list_by_parent, self.parent_id)
            else:
                records = await asyncio.to_thread(self.repo.list)
        except ApiError as exc:
            logger.error("Error loading %s: %r", self.descriptor.plural, exc)
            self.state = ViewState.failed
            self.error = banner_from_error(
                exc, f"Failed to load {self.descriptor.plural}. Please try again later."
            )
            return

        self.collection.load(records)
        self.state = ViewState.ready
        self.error = None

    def visible(self, search: str | None = None) -> list[dict]:
        return filter_records(self.collection, search, self.descriptor.search_fields)

    def request_delete(self, record_id: Any) -> bool:
        """Move one row into confirmation; any other pending row is released."""
        if self.state != ViewState.ready or record_id not in self.collection:
            return False
        self.pending_delete_id = self.collection.find(record_id)[self.descriptor.id_field]
        return True

    def cancel_delete(self) -> None:
        self.pending_delete_id = None

    async def confirm_delete(self) -> bool:
        """
        Delete the pending row on the backend, then drop it locally.

        Returns:
            True when the row was deleted and removed, False otherwise
        """
        record_id = self.pending_delete_id
        if record_id is None:
            return False

        try:
            await asyncio.to_thread(self.repo.delete, record_id)
        except ApiError as exc:
            logger.error(
                "Error deleting %s %s: %r", self.descriptor.singular, record_id, exc
            )
            self.error = banner_from_error(
                exc,
                f"Failed to delete {self.descriptor.singular}. Please try again later.",
            )
            return False

        self.collection.remove(record_id)
        self.pending_delete_id = None
        self.error = None
        return True

    def _row(self, record: dict) -> ListRow:
        record_id = self.descriptor.record_id(record)
        return ListRow(
            id=record_id,
            record=record,
            badges={
                field: colour(record.get(field))
                for field, colour in self.descriptor.badges.items()
            },
            links=navigation.row_links(self.descriptor, record),
            confirming_delete=(
                self.pending_delete_id is not None
                and str(record_id) == str(self.pending_delete_id)
            ),
        )

    def to_view(self, search: str | None = None) -> ListView:
        rows = [self._row(record) for record in self.visible(search)]
        parent_filter = None
        if self.parent_id is not None:
            parent_filter = {self.descriptor.parent.query_param: self.parent_id}
        return ListView(
            entity=self.descriptor.plural,
            state=self.state,
            search=search or "",
            parent_filter=parent_filter,
            total=len(self.collection),
            rows=rows,
            empty_message=(
                navigation.empty_message(self.descriptor, search, self.parent_id)
                if self.state == ViewState.ready and not rows
                else None
            ),
            pending_delete=self.pending_delete_id,
            error=self.error,
            links=[
                Link(**link)
                for link in navigation.list_links(self.descriptor, self.parent_id)
            ],
        )
