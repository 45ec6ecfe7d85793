"""
process_registry.services.departments

Department Registry.

Responsibilities:
- CRUD with name/slug uniqueness (pre-check plus unique-constraint backstop).
- Annotate departments with process statistics recomputed on every read.
- Surface referential failures on delete as DependencyExists instead of cascading.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from process_registry.db.models import Department
from process_registry.db.repositories.departments import DepartmentRepo, ProcessTally
from process_registry.errors import (
    Conflict,
    DependencyExists,
    InvalidReference,
    NotFound,
    RegistryError,
)
from process_registry.observability.logging import get_logger

log = get_logger(__name__)

_DUPLICATE = "A department with this name or slug already exists"
_UNKNOWN_ACTOR = "Acting user does not exist"
_FIELDS = ("name", "slug", "description")


@dataclass(frozen=True, slots=True)
class DepartmentStats:
    process_count: int = 0
    systemic_count: int = 0
    manual_count: int = 0
    documented_percent: int = 0

    @classmethod
    def from_tally(cls, tally: ProcessTally) -> DepartmentStats:
        total = tally.total
        # Integer round-half-up of 100 * documented / total.
        percent = (200 * tally.documented + total) // (2 * total) if total else 0
        return cls(
            process_count=total,
            systemic_count=tally.systemic,
            manual_count=tally.manual,
            documented_percent=percent,
        )


@dataclass(frozen=True, slots=True)
class DepartmentView:
    department: Department
    stats: DepartmentStats = field(default_factory=DepartmentStats)


class DepartmentService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._departments = DepartmentRepo(session)

    async def list(self) -> list[DepartmentView]:
        departments = await self._departments.list_all()
        tallies = await self._departments.tallies()
        return [
            DepartmentView(d, DepartmentStats.from_tally(tallies.get(d.id, ProcessTally())))
            for d in departments
        ]

    async def get(self, department_id: uuid.UUID, *, refresh: bool = False) -> DepartmentView:
        department = await self._departments.get(department_id, refresh=refresh)
        if department is None:
            raise NotFound(f"Department {department_id} not found")
        tallies = await self._departments.tallies([department_id])
        return DepartmentView(
            department, DepartmentStats.from_tally(tallies.get(department_id, ProcessTally()))
        )

    async def create(self, data: Mapping[str, Any], *, actor_id: uuid.UUID) -> DepartmentView:
        values = {k: data[k] for k in _FIELDS if k in data}
        existing = await self._departments.find_by_name_or_slug(
            name=values.get("name"), slug=values.get("slug")
        )
        if existing is not None:
            raise Conflict(_DUPLICATE)

        department = Department(**values, created_by_id=actor_id)
        try:
            await self._departments.add(department)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise await self._integrity_failure(values) from e

        log.info("department_created", department_id=str(department.id), actor_id=str(actor_id))
        return await self.get(department.id, refresh=True)

    async def update(
        self,
        department_id: uuid.UUID,
        changes: Mapping[str, Any],
        *,
        actor_id: uuid.UUID,
    ) -> DepartmentView:
        department = await self._departments.get(department_id)
        if department is None:
            raise NotFound(f"Department {department_id} not found")

        values = {k: changes[k] for k in _FIELDS if k in changes}
        if values.get("name") is None:
            values.pop("name", None)
        if values.get("slug") is None:
            values.pop("slug", None)

        if "name" in values or "slug" in values:
            existing = await self._departments.find_by_name_or_slug(
                name=values.get("name"),
                slug=values.get("slug"),
                exclude_id=department_id,
            )
            if existing is not None:
                raise Conflict(_DUPLICATE)

        for key, value in values.items():
            setattr(department, key, value)
        department.updated_by_id = actor_id

        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise await self._integrity_failure(values, exclude_id=department_id) from e

        log.info("department_updated", department_id=str(department_id), actor_id=str(actor_id))
        return await self.get(department_id, refresh=True)

    async def toggle_status(
        self, department_id: uuid.UUID, *, actor_id: uuid.UUID
    ) -> DepartmentView:
        department = await self._departments.get(department_id)
        if department is None:
            raise NotFound(f"Department {department_id} not found")

        department.active = not department.active
        department.updated_by_id = actor_id
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise InvalidReference(_UNKNOWN_ACTOR) from e

        log.info(
            "department_status_toggled",
            department_id=str(department_id),
            active=department.active,
            actor_id=str(actor_id),
        )
        return await self.get(department_id, refresh=True)

    async def remove(self, department_id: uuid.UUID) -> None:
        if not await self._departments.exists(department_id):
            raise NotFound(f"Department {department_id} not found")

        try:
            await self._departments.delete(department_id)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            log.info("department_delete_blocked", department_id=str(department_id))
            raise DependencyExists("Department still has processes attached") from e

        log.info("department_deleted", department_id=str(department_id))

    async def _integrity_failure(
        self, values: Mapping[str, Any], *, exclude_id: uuid.UUID | None = None
    ) -> RegistryError:
        """
        Classify a rejected write after rollback.

        A name/slug row that now exists means a concurrent write won the race; otherwise
        the only other constraint on the row is the actor foreign key.
        """

        existing = await self._departments.find_by_name_or_slug(
            name=values.get("name"), slug=values.get("slug"), exclude_id=exclude_id
        )
        if existing is not None:
            return Conflict(_DUPLICATE)
        return InvalidReference(_UNKNOWN_ACTOR)


# --- Module Notes -----------------------------------------------------------
# The uniqueness pre-check gives a clean Conflict in the common case; the unique
# constraints on `departments.name` / `departments.slug` close the check-then-insert race.
