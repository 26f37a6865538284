"""
Repository for injury data access.
"""

from __future__ import annotations

from typing import Any, List

from injury_tracker.core.api_client import ApiClient
from injury_tracker.entities.registry import INJURY
from injury_tracker.repositories.base_repo import BaseRepository


class InjuryRepository(BaseRepository):
    """Repository for injury operations, including the per-athlete listing."""

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client=client, descriptor=INJURY)

    def list_by_parent(self, parent_id: Any) -> List[dict]:
        """
        Get all injuries recorded for one athlete.

        Args:
            parent_id: athleteID of the owning athlete

        Returns:
            List of injury records in server order
        """
        return self.client.get(f"/injuries/athlete/{parent_id}") or []
