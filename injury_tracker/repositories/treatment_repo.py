"""
Repository for treatment data access.
"""

from __future__ import annotations

from typing import Any, List

from injury_tracker.core.api_client import ApiClient
from injury_tracker.entities.registry import TREATMENT
from injury_tracker.repositories.base_repo import BaseRepository


class TreatmentRepository(BaseRepository):
    """Repository for treatment operations, including the per-injury listing."""

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client=client, descriptor=TREATMENT)

    def list_by_parent(self, parent_id: Any) -> List[dict]:
        """
        Get all treatments recorded for one injury.

        Args:
            parent_id: injuryID of the treated injury

        Returns:
            List of treatment records in server order
        """
        return self.client.get(f"/treatments/injury/{parent_id}") or []
