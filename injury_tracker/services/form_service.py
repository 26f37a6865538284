"""
Add/edit form lifecycle.

State machine:
    idle -> loading (existing record and option lists) -> editing
    editing -> submitting -> navigate | failed
Validation failures stay in editing and never reach the backend. A
failed submission keeps the entered values so the user can retry. A form
whose load failed never submits.
"""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum
from typing import Any

from injury_tracker.core.errors import ApiError, FormValidationError
from injury_tracker.dtos.athlete_dto import AthleteForm
from injury_tracker.dtos.form_base import FormModel
from injury_tracker.dtos.injury_dto import InjuryForm
from injury_tracker.dtos.treatment_dto import TreatmentForm
from injury_tracker.dtos.view_dto import (
    Banner,
    FieldState,
    FormView,
    Option,
    banner_from_error,
)
from injury_tracker.entities.enums import (
    AthleteStatus,
    BodyPart,
    InjurySeverity,
    InjuryStatus,
    InjuryType,
    TreatmentResult,
    TreatmentType,
    options,
)
from injury_tracker.entities.registry import EntityDescriptor, EntityKind
from injury_tracker.repositories.base_repo import BaseRepository
from injury_tracker.services import navigation
from injury_tracker.services.detail_service import fetch_optional

logger = logging.getLogger(__name__)

FORM_CLASSES: dict[EntityKind, type[FormModel]] = {
    EntityKind.athlete: AthleteForm,
    EntityKind.injury: InjuryForm,
    EntityKind.treatment: TreatmentForm,
}

ENUM_OPTIONS: dict[EntityKind, dict[str, list[str]]] = {
    EntityKind.athlete: {"status": options(AthleteStatus)},
    EntityKind.injury: {
        "injuryType": options(InjuryType),
        "bodyPart": options(BodyPart),
        "severity": options(InjurySeverity),
        "status": options(InjuryStatus),
    },
    EntityKind.treatment: {
        "treatmentType": options(TreatmentType),
        "result": options(TreatmentResult),
    },
}


def parent_option(kind: EntityKind, record: dict) -> Option:
    """Label a parent record for the foreign-key selector."""
    if kind == EntityKind.athlete:
        return Option(
            value=record.get("athleteID"),
            label=f"{record.get('lastName', '')}, {record.get('firstName', '')}",
        )
    return Option(
        value=record.get("injuryID"),
        label=(
            f"{record.get('injuryType', '')} - {record.get('bodyPart', '')} "
            f"({record.get('athleteName', '')})"
        ),
    )


class FormMode(StrEnum):
    add = "add"
    edit = "edit"


class FormState(StrEnum):
    idle = "idle"
    loading = "loading"
    editing = "editing"
    submitting = "submitting"
    navigate = "navigate"
    failed = "failed"


class FormService:
    """
    Owns the state behind one add or edit form.

    Args:
        descriptor: Entity being edited
        repo: Repository for that entity
        parent_repo: Repository of the parent entity; supplies the
            foreign-key options (athletes for injuries, injuries for
            treatments)
        record_id: Existing record id; switches the form into edit mode
        parent_id: Parent context from the query string; pre-fills and
            locks the foreign key
    """

    def __init__(
        self,
        descriptor: EntityDescriptor,
        repo: BaseRepository,
        parent_repo: BaseRepository | None = None,
        record_id: int | None = None,
        parent_id: int | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.repo = repo
        self.parent_repo = parent_repo
        self.form_cls = FORM_CLASSES[descriptor.kind]
        self.record_id = record_id
        self.mode = FormMode.edit if record_id is not None else FormMode.add
        self.parent_id = parent_id if descriptor.parent is not None else None
        self.state = FormState.idle
        self.values: dict[str, Any] = self.form_cls.blank_values()
        self._apply_context(self.values)
        self.field_errors: dict[str, str] = {}
        self.error: Banner | None = None
        self.parent_options: list[Option] = []
        self.parent_details: dict | None = None
        self.redirect_to: str | None = None
        self.loaded = False

    @property
    def foreign_key(self) -> str | None:
        return self.descriptor.parent.foreign_key if self.descriptor.parent else None

    @property
    def context_locked(self) -> bool:
        return self.parent_id is not None

    def _apply_context(self, values: dict[str, Any]) -> None:
        if self.context_locked:
            values[self.foreign_key] = self.parent_id

    async def load(self, with_options: bool = True) -> None:
        """
        Fetch option lists and, in edit mode, the record being edited.

        Args:
            with_options: False skips the option list and parent details,
                as a submission only needs the record it updates
        """
        self.state = FormState.loading
        fetch_options = with_options and self.parent_repo is not None
        jobs = []
        if fetch_options:
            jobs.append(asyncio.to_thread(self.parent_repo.list))
        if self.mode == FormMode.edit:
            jobs.append(asyncio.to_thread(self.repo.get_by_id, self.record_id))

        results = await asyncio.gather(*jobs, return_exceptions=True)
        failures = [r for r in results if isinstance(r, BaseException)]
        for failure in failures:
            if not isinstance(failure, ApiError):
                raise failure
        if failures:
            exc = failures[0]
            logger.error("Error loading %s form data: %r", self.descriptor.singular, exc)
            what = (
                f"{self.descriptor.singular} data"
                if self.mode == FormMode.edit
                else navigation.parent_descriptor(self.descriptor).plural
            )
            self.error = banner_from_error(exc, f"Failed to load {what}. Please try again later.")
            self.state = FormState.failed
            return

        results = list(results)
        if fetch_options:
            self._set_parent_options(results.pop(0))
        if self.mode == FormMode.edit:
            record = results.pop(0) or {}
            self.values = self.form_cls.values_from_record(record)
            self._apply_context(self.values)

        if with_options:
            await self._resolve_parent_details()
        self.loaded = True
        self.state = FormState.editing

    def _set_parent_options(self, records: list[dict] | None) -> None:
        parent_kind = self.descriptor.parent.kind
        self.parent_options = [parent_option(parent_kind, record) for record in records or []]

    async def load_options(self) -> None:
        """Option list and parent details for re-showing a rejected submission."""
        if self.parent_repo is None:
            return
        try:
            records = await asyncio.to_thread(self.parent_repo.list)
        except ApiError as exc:
            logger.warning(
                "Error loading options for %s form: %r", self.descriptor.singular, exc
            )
            records = []
        self._set_parent_options(records)
        await self._resolve_parent_details()

    async def _resolve_parent_details(self) -> None:
        # Treatment forms show the selected injury; a failed lookup only hides it.
        if self.descriptor.kind != EntityKind.treatment or self.parent_repo is None:
            return
        parent_id = navigation.parse_parent_id(self.values.get(self.foreign_key))
        if parent_id is None:
            self.parent_details = None
            return
        self.parent_details = await fetch_optional(self.parent_repo, parent_id, "injury")

    async def submit(self, data: dict[str, Any]) -> bool:
        """
        Validate and send the form.

        Returns:
            True when the backend accepted it; ``redirect_to`` then holds the
            navigation target. Always False for a form that did not load.
        """
        if not self.loaded:
            logger.warning(
                "Not submitting %s form: it did not load", self.descriptor.singular
            )
            return False

        values = {**self.values, **(data or {})}
        self._apply_context(values)
        self.values = values

        try:
            form = self.form_cls.parse_form(values)
        except FormValidationError as exc:
            self.field_errors = exc.field_errors
            self.state = FormState.editing
            return False
        self.field_errors = {}

        payload = form.to_payload(self.record_id if self.mode == FormMode.edit else None)
        self.state = FormState.submitting
        try:
            if self.mode == FormMode.edit:
                await asyncio.to_thread(self.repo.update, self.record_id, payload)
                target_id = self.record_id
            else:
                created = await asyncio.to_thread(self.repo.create, payload)
                target_id = (
                    created.get(self.descriptor.id_field)
                    if isinstance(created, dict)
                    else None
                )
        except ApiError as exc:
            logger.error(
                "Error submitting %s form: %r", self.descriptor.singular, exc
            )
            action = "update" if self.mode == FormMode.edit else "add"
            self.error = banner_from_error(
                exc,
                f"Failed to {action} {self.descriptor.singular}. Please try again later.",
            )
            self.state = FormState.failed
            return False

        self.error = None
        self.state = FormState.navigate
        self.redirect_to = navigation.success_target(self.descriptor, target_id)
        return True

    def _fields(self) -> list[FieldState]:
        enum_options = ENUM_OPTIONS[self.descriptor.kind]
        fields = []
        for name, value in self.values.items():
            opts = None
            if name == self.foreign_key:
                opts = self.parent_options
            elif name in enum_options:
                opts = [Option(value=v, label=v) for v in enum_options[name]]
            fields.append(
                FieldState(
                    name=name,
                    value=value,
                    disabled=(name == self.foreign_key and self.context_locked),
                    options=opts,
                )
            )
        return fields

    def to_view(self) -> FormView:
        context = None
        if self.context_locked:
            context = {self.descriptor.parent.query_param: self.parent_id}
        return FormView(
            entity=self.descriptor.singular,
            mode=self.mode,
            state=self.state,
            id=self.record_id,
            values=self.values,
            fields=self._fields(),
            field_errors=self.field_errors,
            context=context,
            parent_details=self.parent_details,
            cancel_href=navigation.cancel_target(self.descriptor, self.parent_id),
            redirect_to=self.redirect_to,
            error=self.error,
        )
