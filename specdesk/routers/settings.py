"""API router for desktop preferences."""
from __future__ import annotations

from fastapi import APIRouter, Request

from specdesk.models import DesktopConfig
from specdesk.routers.deps import get_state

settings_router = APIRouter(prefix="/api/settings", tags=["settings"])


@settings_router.get("", response_model=DesktopConfig)
def get_settings(request: Request):
    return get_state(request).settings.read()


@settings_router.put("", response_model=DesktopConfig)
def update_settings(request: Request, payload: DesktopConfig):
    return get_state(request).settings.update(payload)
