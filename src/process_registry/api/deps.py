"""
process_registry.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, the token service and DB sessions.
- Encapsulate app.state access patterns (engine/sessionmaker, auth singletons).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from process_registry.auth.tokens import TokenService
from process_registry.settings import Settings


def settings_dep(request: Request) -> Settings:
    # Set by `process_registry.api.app.create_app`.
    return request.app.state.settings  # type: ignore[no-any-return]


def token_service_dep(request: Request) -> TokenService:
    return request.app.state.token_service  # type: ignore[no-any-return]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan.
    return request.app.state.sessionmaker  # type: ignore[no-any-return]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Auth dependencies (request context, claims) live in `process_registry.auth.deps`.
