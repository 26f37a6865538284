import asyncio

from fastapi import APIRouter, Depends

from injury_tracker.core.api_client import ApiClient, get_api_client
from injury_tracker.core.errors import ApiError
from injury_tracker.dtos.view_dto import banner_from_error
from injury_tracker.entities.registry import ATHLETE
from injury_tracker.repositories.athlete_repo import AthleteRepository
from injury_tracker.routers.entity_views import build_router

router = APIRouter()


# Registered ahead of the generic routes so "search" is not read as an id.
@router.get("/athletes/search", tags=["athletes"])
async def search_athletes(term: str = "", client: ApiClient = Depends(get_api_client)):
    """Server-side athlete search, passed straight through to the backend."""
    repo = AthleteRepository(client)
    try:
        records = await asyncio.to_thread(repo.search, term)
    except ApiError as exc:
        banner = banner_from_error(exc, "Failed to search athletes. Please try again later.")
        return {"term": term, "records": [], "error": banner.model_dump(mode="json")}
    return {"term": term, "records": records, "error": None}


router.include_router(build_router(ATHLETE))
