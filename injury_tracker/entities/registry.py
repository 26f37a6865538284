"""
Descriptors for the three tracked entities.

Each descriptor names the backend resource, the primary key, the
free-text search fields, the optional parent relation and the badge
colouring applied to list rows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Callable

from injury_tracker.entities.enums import (
    athlete_status_badge,
    injury_severity_badge,
    injury_status_badge,
    treatment_result_badge,
)


class EntityKind(StrEnum):
    athlete = "athlete"
    injury = "injury"
    treatment = "treatment"


class SuccessTarget(StrEnum):
    list = "list"
    detail = "detail"


@dataclass(frozen=True)
class ParentRelation:
    """A child entity's link to its parent, as carried in URLs and payloads."""

    kind: EntityKind
    query_param: str  # e.g. "athleteId" on /injuries?athleteId=7
    foreign_key: str  # e.g. "athleteID" on the injury record


@dataclass(frozen=True)
class EntityDescriptor:
    kind: EntityKind
    resource: str
    id_field: str
    singular: str
    plural: str
    search_fields: tuple[str, ...]
    success_target: SuccessTarget
    parent: ParentRelation | None = None
    badges: dict[str, Callable[[object], str]] = field(default_factory=dict)

    def record_id(self, record: dict):
        return record.get(self.id_field)


ATHLETE = EntityDescriptor(
    kind=EntityKind.athlete,
    resource="athletes",
    id_field="athleteID",
    singular="athlete",
    plural="athletes",
    search_fields=("firstName", "lastName", "sport", "teamName"),
    success_target=SuccessTarget.list,
    badges={"status": athlete_status_badge},
)

INJURY = EntityDescriptor(
    kind=EntityKind.injury,
    resource="injuries",
    id_field="injuryID",
    singular="injury",
    plural="injuries",
    search_fields=("injuryType", "bodyPart", "description", "athleteName"),
    success_target=SuccessTarget.detail,
    parent=ParentRelation(
        kind=EntityKind.athlete, query_param="athleteId", foreign_key="athleteID"
    ),
    badges={"severity": injury_severity_badge, "status": injury_status_badge},
)

TREATMENT = EntityDescriptor(
    kind=EntityKind.treatment,
    resource="treatments",
    id_field="treatmentID",
    singular="treatment",
    plural="treatments",
    search_fields=(
        "treatmentType",
        "provider",
        "result",
        "athleteName",
        "injuryDescription",
    ),
    success_target=SuccessTarget.detail,
    parent=ParentRelation(
        kind=EntityKind.injury, query_param="injuryId", foreign_key="injuryID"
    ),
    badges={"result": treatment_result_badge},
)

REGISTRY: dict[EntityKind, EntityDescriptor] = {
    EntityKind.athlete: ATHLETE,
    EntityKind.injury: INJURY,
    EntityKind.treatment: TREATMENT,
}
