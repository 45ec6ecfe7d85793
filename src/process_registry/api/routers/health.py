"""
process_registry.api.routers.health

Liveness and readiness probes. Both routes are public in `api.route_table`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from process_registry import __version__
from process_registry.api.deps import db_session, settings_dep
from process_registry.errors import Unavailable
from process_registry.observability.logging import get_logger
from process_registry.settings import Settings

log = get_logger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


@router.get("/healthz", name="health.live", response_model=HealthResponse)
async def healthz(settings: Settings = Depends(settings_dep)) -> HealthResponse:
    return HealthResponse(status="ok", service=settings.service_name, version=__version__)


@router.get("/readyz", name="health.ready", response_model=HealthResponse)
async def readyz(
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> HealthResponse:
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.warning("readiness_failed", error=str(e))
        raise Unavailable("Database is unreachable") from e
    return HealthResponse(status="ready", service=settings.service_name, version=__version__)
