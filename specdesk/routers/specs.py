"""API router for spec listing, analysis and status updates."""
from __future__ import annotations

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel, Field

from specdesk.errors import SpecDeskError
from specdesk.models import (
    DependencyGraph,
    LightweightSpec,
    Spec,
    SpecDependencies,
    StatsResult,
    ValidationResult,
)
from specdesk.routers.deps import get_state, to_http_error

specs_router = APIRouter(prefix="/api/projects/{project_id}", tags=["specs"])


class StatusUpdateRequest(BaseModel):
    status: str = Field(..., min_length=1)
    force: bool = False


@specs_router.get("/specs", response_model=list[LightweightSpec])
def list_specs(
    request: Request,
    project_id: str,
    status: str = Query("", description="Only specs with this exact status"),
    q: str = Query("", description="Case-insensitive search over name, title, content and tags"),
):
    """List specs, optionally filtered by status or a search query."""
    commands = get_state(request).commands
    try:
        if q:
            specs = commands.search_specs(project_id, q)
        elif status:
            specs = commands.get_specs_by_status(project_id, status)
        else:
            specs = commands.get_specs(project_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e
    if q and status:
        specs = [spec for spec in specs if spec.status == status]
    return specs


@specs_router.get("/tags", response_model=list[str])
def list_tags(request: Request, project_id: str):
    try:
        return get_state(request).commands.get_all_tags(project_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.get("/stats", response_model=StatsResult)
def get_stats(request: Request, project_id: str):
    try:
        return get_state(request).commands.get_project_stats(project_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.get("/dependencies", response_model=DependencyGraph)
def get_dependency_graph(request: Request, project_id: str):
    """Dependency graph of numbered specs for visualization."""
    try:
        return get_state(request).commands.get_dependency_graph(project_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.get("/validation", response_model=list[ValidationResult])
def validate_all(request: Request, project_id: str):
    try:
        return get_state(request).commands.validate_all_specs(project_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.get("/specs/{spec_id}", response_model=Spec)
def get_spec(request: Request, project_id: str, spec_id: str):
    """Full spec, looked up by number, name, partial name or id."""
    try:
        return get_state(request).commands.get_spec_detail(project_id, spec_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.get("/specs/{spec_id}/dependencies", response_model=SpecDependencies)
def get_spec_dependencies(request: Request, project_id: str, spec_id: str):
    try:
        return get_state(request).commands.get_spec_dependencies(project_id, spec_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.get("/specs/{spec_id}/validation", response_model=ValidationResult)
def validate_one(request: Request, project_id: str, spec_id: str):
    try:
        return get_state(request).commands.validate_spec(project_id, spec_id)
    except SpecDeskError as e:
        raise to_http_error(e) from e


@specs_router.patch("/specs/{spec_id}/status", response_model=Spec)
def update_status(request: Request, project_id: str, spec_id: str, payload: StatusUpdateRequest):
    """Write a new status to the spec's frontmatter and return the reloaded spec."""
    try:
        return get_state(request).commands.update_spec_status(
            project_id,
            spec_id,
            payload.status,
            force=payload.force,
        )
    except SpecDeskError as e:
        raise to_http_error(e) from e
