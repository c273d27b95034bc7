"""SpecDesk FastAPI backend: main application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from specdesk import config
from specdesk.routers.deps import get_state
from specdesk.routers.projects import projects_router
from specdesk.routers.settings import settings_router
from specdesk.routers.specs import specs_router
from specdesk.state import DesktopState

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger("specdesk")


def create_app(config_dir: Optional[Path] = None) -> FastAPI:
    """Build the API; ``config_dir`` overrides where registry and settings live."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup / shutdown lifecycle."""
        logger.info("SpecDesk backend starting up")
        app.state.desktop = DesktopState(config_dir or config.CONFIG_DIR)
        logger.info(f"Loaded {len(app.state.desktop.project_store.all())} registered projects")
        yield
        logger.info("SpecDesk backend shutting down")

    app = FastAPI(
        title="SpecDesk API",
        description="Local API over spec directories: listing, dependencies, stats and validation",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS: allow the desktop web view
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            config.FRONTEND_ORIGIN,
            "tauri://localhost",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(projects_router)
    app.include_router(specs_router)
    app.include_router(settings_router)

    @app.get("/api/health")
    def health(request: Request):
        """Health check endpoint."""
        state = get_state(request)
        return {
            "status": "ok",
            "projects": len(state.project_store.all()),
        }

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("specdesk.main:app", host=config.HOST, port=config.PORT, reload=config.RELOAD)


if __name__ == "__main__":
    run()
