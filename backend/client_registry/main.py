from __future__ import annotations

import logging
from collections.abc import AsyncGenerator  # noqa: TC003
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from client_registry.config import Settings, StoreConfig, settings
from client_registry.routers import clients, health
from client_registry.services.record_store import RecordStore

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None, record_store: RecordStore | None = None
) -> FastAPI:
    app_settings = app_settings or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logging.basicConfig(level=app_settings.log_level)
        store = record_store or RecordStore.from_config(
            StoreConfig.from_settings(app_settings), create_schema=True
        )
        # An unreachable database must not stop startup; requests report it.
        store.ensure_schema()
        app.state.record_store = store
        logger.info("Client endpoint ready at %s", app_settings.api_path)
        yield
        if record_store is None:
            store.engine.dispose()

    app = FastAPI(title=app_settings.app_name, lifespan=lifespan)
    if record_store is not None:
        app.state.record_store = record_store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # No method restriction: every method reaches the dispatcher.
    app.add_route(app_settings.api_path, clients.clients_endpoint)
    app.include_router(health.router, tags=["health"])
    return app


app = create_app()
