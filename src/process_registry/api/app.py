"""
process_registry.api.app

FastAPI app factory for the registry service.

Responsibilities:
- Build the FastAPI application and register routers/middleware/error handlers.
- Build the auth singletons (token service, route table, guard chain) from settings.
- Install the guard chain as an app-wide dependency so every route is checked.
- Initialize and dispose shared infrastructure (DB engine/session factory).
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from process_registry import __version__
from process_registry.api.errors import register_error_handlers
from process_registry.api.route_table import build_route_table
from process_registry.api.routers.auth import router as auth_router
from process_registry.api.routers.departments import router as departments_router
from process_registry.api.routers.health import router as health_router
from process_registry.api.routers.processes import router as processes_router
from process_registry.auth.deps import request_context
from process_registry.auth.guards import default_chain
from process_registry.auth.tokens import JwtConfig, TokenService
from process_registry.db.init_db import init_db
from process_registry.db.session import create_engine, create_sessionmaker
from process_registry.observability.logging import configure_logging, get_logger
from process_registry.observability.middleware import RequestContextMiddleware
from process_registry.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod uses Alembic migrations.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Process Registry",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        dependencies=[Depends(request_context)],
    )

    tokens = TokenService(JwtConfig.from_settings(settings))
    app.state.settings = settings
    app.state.token_service = tokens
    app.state.route_table = build_route_table()
    app.state.guard_chain = default_chain(tokens)

    app.add_middleware(RequestContextMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(departments_router)
    app.include_router(processes_router)

    return app


# --- Module Notes -----------------------------------------------------------
# App composition stays here; access policy lives in `api.route_table` and business
# rules in `services`.
