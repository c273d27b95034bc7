"""API router for the project registry."""
from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from specdesk.errors import ProjectValidationError
from specdesk.models import Project
from specdesk.project_manager import discover_projects
from specdesk.routers.deps import get_state, to_http_error

projects_router = APIRouter(prefix="/api/projects", tags=["projects"])


class AddProjectRequest(BaseModel):
    path: str = Field(..., min_length=1)


@projects_router.get("", response_model=list[Project])
def list_projects(request: Request):
    """List all registered projects."""
    return get_state(request).project_store.all()


@projects_router.post("", response_model=Project)
def add_project(request: Request, payload: AddProjectRequest):
    """Register a project root that contains a specs directory."""
    try:
        return get_state(request).project_store.add_project(Path(payload.path).expanduser())
    except ProjectValidationError as e:
        raise to_http_error(e) from e


@projects_router.post("/refresh", response_model=list[Project])
def refresh_projects(request: Request):
    """Re-read the registry from disk."""
    return get_state(request).project_store.refresh()


@projects_router.get("/discover", response_model=list[str])
def discover(
    root: str = Query(..., description="Directory to search for projects"),
    limit: int = Query(20, ge=1, le=200),
):
    """Find candidate project roots below ``root``."""
    return [str(path) for path in discover_projects(Path(root).expanduser(), limit=limit)]


@projects_router.get("/active", response_model=Project)
def get_active_project(request: Request):
    """Get the currently active project."""
    state = get_state(request)
    project_id = state.settings.read().activeProjectId
    project = state.project_store.find(project_id) if project_id else None
    if not project:
        raise HTTPException(status_code=404, detail="No active project found")
    return project


@projects_router.post("/active/{project_id}", response_model=Project)
def set_active_project(request: Request, project_id: str):
    """Switch the active project."""
    project = get_state(request).set_active_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@projects_router.delete("/{project_id}")
def remove_project(request: Request, project_id: str):
    """Forget a project; its files are left untouched."""
    if not get_state(request).project_store.remove_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return {"removed": project_id}
