from injury_tracker.entities.registry import TREATMENT
from injury_tracker.routers.entity_views import build_router

router = build_router(TREATMENT)
