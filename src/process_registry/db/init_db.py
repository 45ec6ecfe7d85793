"""
process_registry.db.init_db

DB initialization helpers (dev/test convenience).

Responsibilities:
- Create tables for local development and tests.
- Keep production migration workflow separate (Alembic).
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from process_registry.db import models  # noqa: F401  # register tables on Base.metadata
from process_registry.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    """
    Create registry tables that don't exist yet; existing tables are left alone.
    """

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Not used in prod; deployments run `alembic upgrade head` instead.
