"""
process_registry.db.repositories.processes

Repository for `Process` entities.

Responsibilities:
- Filtered listing with department/people/parent summaries and child/document counts.
- Detail fetch with direct children and attached documents.
- Parent-chain walk used for cycle detection.
- Direct deletes; the store decides whether dependents block them.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass

from sqlalchemy import Select, delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from process_registry.db.models import Process, ProcessDocument


@dataclass(frozen=True, slots=True)
class ProcessFilters:
    department_id: uuid.UUID | None = None
    type: str | None = None
    # "active" selects active processes; any other non-empty value selects inactive ones.
    status: str | None = None
    documented: bool | None = None
    search: str | None = None


@dataclass(frozen=True, slots=True)
class ProcessRow:
    process: Process
    child_count: int
    document_count: int


_Child = aliased(Process)


def _child_count():
    return (
        select(func.count(_Child.id))
        .where(_Child.parent_id == Process.id)
        .correlate(Process)
        .scalar_subquery()
    )


def _document_count():
    return (
        select(func.count(ProcessDocument.id))
        .where(ProcessDocument.process_id == Process.id)
        .correlate(Process)
        .scalar_subquery()
    )


def _with_counts() -> Select:
    return select(
        Process,
        _child_count().label("child_count"),
        _document_count().label("document_count"),
    )


def _summary_options():
    return (
        selectinload(Process.department),
        selectinload(Process.created_by),
        selectinload(Process.updated_by),
        selectinload(Process.parent),
    )


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class ProcessRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_filtered(self, filters: ProcessFilters) -> list[ProcessRow]:
        stmt = _with_counts().options(*_summary_options())

        if filters.department_id is not None:
            stmt = stmt.where(Process.department_id == filters.department_id)
        if filters.type:
            stmt = stmt.where(Process.type == filters.type)
        if filters.status:
            stmt = stmt.where(Process.active.is_(filters.status == "active"))
        if filters.documented is not None:
            stmt = stmt.where(Process.documented.is_(filters.documented))
        if filters.search:
            pattern = _like_pattern(filters.search)
            stmt = stmt.where(
                or_(
                    Process.name.ilike(pattern, escape="\\"),
                    Process.description.ilike(pattern, escape="\\"),
                )
            )

        stmt = stmt.order_by(desc(Process.created_at))
        rows = (await self._session.execute(stmt)).all()
        return [ProcessRow(process=p, child_count=c, document_count=d) for p, c, d in rows]

    async def get(self, process_id: uuid.UUID) -> Process | None:
        return await self._session.get(Process, process_id)

    async def get_detail(self, process_id: uuid.UUID) -> ProcessRow | None:
        stmt = (
            _with_counts()
            .options(
                *_summary_options(),
                selectinload(Process.children),
                selectinload(Process.documents),
            )
            .where(Process.id == process_id)
            # Reload state mutated earlier in the same session (e.g. after an update).
            .execution_options(populate_existing=True)
        )
        row = (await self._session.execute(stmt)).one_or_none()
        if row is None:
            return None
        process, child_count, document_count = row
        return ProcessRow(process=process, child_count=child_count, document_count=document_count)

    async def children_of(self, parent_id: uuid.UUID) -> list[ProcessRow]:
        stmt = (
            _with_counts()
            .where(Process.parent_id == parent_id)
            .order_by(Process.name.asc())
        )
        rows = (await self._session.execute(stmt)).all()
        return [ProcessRow(process=p, child_count=c, document_count=d) for p, c, d in rows]

    async def parent_id_of(self, process_id: uuid.UUID) -> uuid.UUID | None:
        stmt = select(Process.parent_id).where(Process.id == process_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def is_ancestor_or_self(self, candidate: uuid.UUID, process_id: uuid.UUID) -> bool:
        """
        True when `process_id` appears on the parent chain starting at `candidate`.
        """

        seen: set[uuid.UUID] = set()
        current: uuid.UUID | None = candidate
        while current is not None and current not in seen:
            if current == process_id:
                return True
            seen.add(current)
            current = await self.parent_id_of(current)
        return False

    async def add(self, process: Process) -> Process:
        self._session.add(process)
        await self._session.flush()
        return process

    async def delete(self, process_id: uuid.UUID) -> None:
        await self._session.execute(delete(Process).where(Process.id == process_id))


# --- Module Notes -----------------------------------------------------------
# Counts are correlated subqueries so one round-trip returns rows and counts together.
