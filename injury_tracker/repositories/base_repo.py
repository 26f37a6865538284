from __future__ import annotations

from typing import Any, Optional

from injury_tracker.core.api_client import ApiClient
from injury_tracker.entities.registry import EntityDescriptor


class BaseRepository:
    """CRUD against one backend resource; returns decoded bodies unchanged."""

    def __init__(self, client: ApiClient, descriptor: EntityDescriptor) -> None:
        self.client = client
        self.descriptor = descriptor

    @property
    def resource(self) -> str:
        return self.descriptor.resource

    def list(self) -> list[dict]:
        return self.client.get(f"/{self.resource}") or []

    def get_by_id(self, id_: Any) -> Optional[dict]:
        return self.client.get(f"/{self.resource}/{id_}")

    def create(self, payload: dict) -> Any:
        return self.client.post(f"/{self.resource}", payload)

    def update(self, id_: Any, payload: dict) -> Any:
        return self.client.put(f"/{self.resource}/{id_}", payload)

    def delete(self, id_: Any) -> None:
        self.client.delete(f"/{self.resource}/{id_}")

    def list_by_parent(self, parent_id: Any) -> list[dict]:
        raise NotImplementedError(
            f"{self.resource} cannot be listed by parent"
        )
