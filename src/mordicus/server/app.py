"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from mordicus.levels import LevelCatalog
from mordicus.server.routes import router
from mordicus.server.run_manager import RunManager
from mordicus.store import Store


def create_app(
    catalog: LevelCatalog | None = None, store: Store | None = None,
) -> FastAPI:
    """Build and return the FastAPI application."""

    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.run_manager = RunManager(catalog=catalog, store=store)
        yield

    app = FastAPI(title="Mordicus API", version="0.1.0", lifespan=_lifespan)
    app.include_router(router)
    return app
