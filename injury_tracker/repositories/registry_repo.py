from __future__ import annotations

from injury_tracker.core.api_client import ApiClient
from injury_tracker.entities.registry import EntityKind
from injury_tracker.repositories.athlete_repo import AthleteRepository
from injury_tracker.repositories.base_repo import BaseRepository
from injury_tracker.repositories.injury_repo import InjuryRepository
from injury_tracker.repositories.treatment_repo import TreatmentRepository

REPOSITORY_CLASSES: dict[EntityKind, type[BaseRepository]] = {
    EntityKind.athlete: AthleteRepository,
    EntityKind.injury: InjuryRepository,
    EntityKind.treatment: TreatmentRepository,
}


def repository_for(kind: EntityKind, client: ApiClient) -> BaseRepository:
    return REPOSITORY_CLASSES[kind](client)
