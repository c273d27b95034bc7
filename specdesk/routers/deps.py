"""Shared router helpers."""
from __future__ import annotations

from fastapi import HTTPException, Request

from specdesk.errors import NotFoundError, PolicyViolationError, ProjectValidationError, SpecDeskError
from specdesk.state import DesktopState


def get_state(request: Request) -> DesktopState:
    state = getattr(request.app.state, "desktop", None)
    if state is None:
        raise HTTPException(status_code=503, detail="Desktop state not initialized")
    return state


def to_http_error(exc: SpecDeskError) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (PolicyViolationError, ProjectValidationError)):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
