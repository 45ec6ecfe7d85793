"""
process_registry.db.repositories.departments

Repository for `Department` entities.

Responsibilities:
- Fetch departments with creator/updater summaries eagerly loaded.
- Answer the name/slug existence query used for uniqueness checks.
- Aggregate per-department process tallies for derived statistics.
- Issue direct deletes so referential checks stay with the store.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import and_, case, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from process_registry.db.models import (
    PROCESS_TYPE_MANUAL,
    PROCESS_TYPE_SYSTEMIC,
    Department,
    Process,
)


@dataclass(frozen=True, slots=True)
class ProcessTally:
    total: int = 0
    systemic: int = 0
    manual: int = 0
    documented: int = 0


def _with_people():
    return (selectinload(Department.created_by), selectinload(Department.updated_by))


class DepartmentRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[Department]:
        stmt = select(Department).options(*_with_people()).order_by(Department.name.asc())
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, department_id: uuid.UUID, *, refresh: bool = False) -> Department | None:
        stmt = select(Department).options(*_with_people()).where(Department.id == department_id)
        if refresh:
            # Reload attributes/relationships already present in the identity map.
            stmt = stmt.execution_options(populate_existing=True)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def exists(self, department_id: uuid.UUID) -> bool:
        stmt = select(Department.id).where(Department.id == department_id)
        return (await self._session.execute(stmt)).scalar_one_or_none() is not None

    async def find_by_name_or_slug(
        self,
        *,
        name: str | None,
        slug: str | None,
        exclude_id: uuid.UUID | None = None,
    ) -> Department | None:
        clauses = []
        if name:
            clauses.append(Department.name == name)
        if slug:
            clauses.append(Department.slug == slug)
        if not clauses:
            return None

        stmt = select(Department).where(or_(*clauses))
        if exclude_id is not None:
            stmt = stmt.where(Department.id != exclude_id)
        return (await self._session.execute(stmt.limit(1))).scalar_one_or_none()

    async def add(self, department: Department) -> Department:
        self._session.add(department)
        await self._session.flush()
        return department

    async def delete(self, department_id: uuid.UUID) -> None:
        await self._session.execute(delete(Department).where(Department.id == department_id))

    async def tallies(
        self, department_ids: Iterable[uuid.UUID] | None = None
    ) -> dict[uuid.UUID, ProcessTally]:
        # A process counts as documented when flagged or when it carries a non-empty link.
        is_documented = or_(
            Process.documented.is_(True),
            and_(Process.document_link.is_not(None), func.trim(Process.document_link) != ""),
        )
        stmt = select(
            Process.department_id,
            func.count(Process.id),
            func.sum(case((Process.type == PROCESS_TYPE_SYSTEMIC, 1), else_=0)),
            func.sum(case((Process.type == PROCESS_TYPE_MANUAL, 1), else_=0)),
            func.sum(case((is_documented, 1), else_=0)),
        ).group_by(Process.department_id)
        if department_ids is not None:
            stmt = stmt.where(Process.department_id.in_(list(department_ids)))

        rows = (await self._session.execute(stmt)).all()
        return {
            dept_id: ProcessTally(
                total=int(total or 0),
                systemic=int(systemic or 0),
                manual=int(manual or 0),
                documented=int(documented or 0),
            )
            for dept_id, total, systemic, manual, documented in rows
        }


# --- Module Notes -----------------------------------------------------------
# Tallies are computed on every read; nothing derived is stored on the department row.
