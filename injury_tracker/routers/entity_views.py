"""
Route factory shared by the athlete, injury and treatment views.

Every entity exposes the same list/detail/add/edit surface; each request
builds fresh view services, so no state is shared between views.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse

from injury_tracker.core.api_client import ApiClient, get_api_client
from injury_tracker.core.errors import ErrorKind
from injury_tracker.entities.registry import EntityDescriptor
from injury_tracker.repositories.registry_repo import repository_for
from injury_tracker.services import navigation
from injury_tracker.services.detail_service import DetailViewService
from injury_tracker.services.form_service import FormService
from injury_tracker.services.list_view_service import ListViewService


def view_response(view, status_code: int | None = None) -> JSONResponse:
    """Serialize a view model; not-found banners answer 404, field errors 422."""
    if status_code is None:
        status_code = 200
        if getattr(view, "field_errors", None):
            status_code = 422
        elif view.error is not None and view.error.kind == ErrorKind.not_found:
            status_code = 404
    return JSONResponse(status_code=status_code, content=view.model_dump(mode="json"))


def build_router(descriptor: EntityDescriptor) -> APIRouter:
    """Build the view routes for one entity under ``/{resource}``."""
    router = APIRouter(prefix=f"/{descriptor.resource}", tags=[descriptor.plural])
    parent = navigation.parent_descriptor(descriptor)
    child = navigation.child_descriptor(descriptor)

    def parent_id_from(request: Request) -> int | None:
        if descriptor.parent is None:
            return None
        return navigation.parse_parent_id(
            request.query_params.get(descriptor.parent.query_param)
        )

    def form_service(
        client: ApiClient, record_id: int | None, parent_id: int | None
    ) -> FormService:
        return FormService(
            descriptor,
            repository_for(descriptor.kind, client),
            parent_repo=repository_for(parent.kind, client) if parent else None,
            record_id=record_id,
            parent_id=parent_id,
        )

    def detail_service(client: ApiClient) -> DetailViewService:
        return DetailViewService(
            descriptor,
            repository_for(descriptor.kind, client),
            child_repo=repository_for(child.kind, client) if child else None,
        )

    async def submit_form(svc: FormService, payload: dict[str, Any] | None):
        await svc.load(with_options=False)
        if await svc.submit(payload or {}):
            return RedirectResponse(url=svc.redirect_to, status_code=303)
        if svc.loaded:
            await svc.load_options()
        return view_response(svc.to_view())

    @router.get("")
    async def list_view(
        request: Request,
        search: str | None = None,
        confirmDelete: str | None = None,
        client: ApiClient = Depends(get_api_client),
    ):
        svc = ListViewService(
            descriptor, repository_for(descriptor.kind, client), parent_id_from(request)
        )
        await svc.load()
        if confirmDelete is not None:
            svc.request_delete(confirmDelete)
        return view_response(svc.to_view(search))

    @router.get("/add")
    async def add_form(request: Request, client: ApiClient = Depends(get_api_client)):
        svc = form_service(client, None, parent_id_from(request))
        await svc.load()
        return view_response(svc.to_view())

    @router.post("/add")
    async def submit_add_form(
        request: Request,
        payload: dict[str, Any] | None = Body(default=None),
        client: ApiClient = Depends(get_api_client),
    ):
        svc = form_service(client, None, parent_id_from(request))
        return await submit_form(svc, payload)

    @router.get("/edit/{record_id}")
    async def edit_form(record_id: int, client: ApiClient = Depends(get_api_client)):
        svc = form_service(client, record_id, None)
        await svc.load()
        return view_response(svc.to_view())

    @router.post("/edit/{record_id}")
    async def submit_edit_form(
        record_id: int,
        payload: dict[str, Any] | None = Body(default=None),
        client: ApiClient = Depends(get_api_client),
    ):
        svc = form_service(client, record_id, None)
        return await submit_form(svc, payload)

    @router.get("/{record_id}")
    async def detail_view(
        record_id: int,
        confirmDelete: bool = False,
        client: ApiClient = Depends(get_api_client),
    ):
        svc = detail_service(client)
        await svc.load(record_id)
        if confirmDelete:
            svc.request_delete()
        return view_response(svc.to_view())

    @router.post("/{record_id}/delete")
    async def delete_from_list(
        request: Request,
        record_id: int,
        search: str | None = None,
        client: ApiClient = Depends(get_api_client),
    ):
        svc = ListViewService(
            descriptor, repository_for(descriptor.kind, client), parent_id_from(request)
        )
        await svc.load()
        if svc.error is not None:
            return view_response(svc.to_view(search))
        if not svc.request_delete(record_id):
            raise HTTPException(
                status_code=404,
                detail=f"{descriptor.singular.title()} {record_id} is not in this list",
            )
        deleted = await svc.confirm_delete()
        return view_response(svc.to_view(search), status_code=200 if deleted else None)

    @router.post("/{record_id}/delete-record")
    async def delete_from_detail(
        record_id: int, client: ApiClient = Depends(get_api_client)
    ):
        svc = detail_service(client)
        await svc.load(record_id)
        if svc.error is not None:
            return view_response(svc.to_view())
        svc.request_delete()
        target = await svc.confirm_delete()
        if target is None:
            return view_response(svc.to_view())
        return RedirectResponse(url=target, status_code=303)

    return router
