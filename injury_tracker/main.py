import logging
import uuid

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from injury_tracker.core.config import settings
from injury_tracker.core.errors import ApiError, ErrorKind
from injury_tracker.entities.registry import REGISTRY
from injury_tracker.routers import athletes, injuries, treatments
from injury_tracker.services import navigation

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="injury-tracker-web", version="0.1.0")

# ---------------------------------------------------------------------------
# Middleware: request-id injection
# ---------------------------------------------------------------------------


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "detail": exc.errors(include_url=False, include_context=False),
            "request_id": _request_id(request),
        },
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": "http_error",
            "message": str(exc.detail),
            "detail": None,
            "request_id": _request_id(request),
        },
    )


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    # Views catch backend failures themselves; this covers anything that escapes.
    status_code = 404 if exc.kind == ErrorKind.not_found else 502
    return JSONResponse(
        status_code=status_code,
        content={
            "error": f"upstream_{exc.kind}",
            "message": "The injury-tracking service could not complete the request",
            "detail": exc.message if settings.DEBUG else None,
            "request_id": _request_id(request),
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    request_id = _request_id(request)
    logger.exception("Unhandled exception", extra={"request_id": request_id})
    # Runs outside the request-id middleware, so the header is set here.
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "detail": str(exc) if settings.DEBUG else None,
            "request_id": request_id,
        },
        headers={"X-Request-ID": request_id},
    )


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "injury-tracker-web", "version": "0.1.0"}


@app.get("/")
async def home():
    """Entry points into each entity, plus quick-add links."""
    return {
        "sections": [
            {
                "entity": descriptor.plural,
                "list": navigation.list_path(descriptor),
                "add": navigation.add_path(descriptor),
            }
            for descriptor in REGISTRY.values()
        ]
    }


# ---------------------------------------------------------------------------
# Entity views
# ---------------------------------------------------------------------------

app.include_router(athletes.router)
app.include_router(injuries.router)
app.include_router(treatments.router)
