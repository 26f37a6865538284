"""
Repository for athlete data access.
"""

from __future__ import annotations

from typing import List

from injury_tracker.core.api_client import ApiClient
from injury_tracker.entities.registry import ATHLETE
from injury_tracker.repositories.base_repo import BaseRepository


class AthleteRepository(BaseRepository):
    """
    Repository for athlete operations.

    Athletes have no parent, so only the flat collection endpoints apply.
    """

    def __init__(self, client: ApiClient) -> None:
        super().__init__(client=client, descriptor=ATHLETE)

    def search(self, term: str) -> List[dict]:
        """
        Server-side athlete search.

        Args:
            term: Search term passed through as ``?term=``

        Returns:
            List of athlete records
        """
        return self.client.get("/athletes/search", params={"term": term}) or []
