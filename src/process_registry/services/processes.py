"""
process_registry.services.processes

Process Registry.

Responsibilities:
- Filtered listing and detail reads with hierarchy annotations.
- Create/update with explicit reference resolution for department and parent.
- Keep the process tree a forest: a process can never become its own ancestor.
- Flag toggles and direct deletes (dependents block deletion at the store).

Update semantics:
- `department_id` present and non-null: reconnect to that department.
- `parent_id` present and non-null: reconnect; present and null: detach (root);
  absent: unchanged.
- `document_link` absent: cleared to null. This is deliberate and differs from the
  other fields, which are left untouched when absent.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from process_registry.db.models import Process
from process_registry.db.repositories.departments import DepartmentRepo
from process_registry.db.repositories.processes import ProcessFilters, ProcessRepo, ProcessRow
from process_registry.errors import DependencyExists, InvalidReference, NotFound
from process_registry.observability.logging import get_logger

log = get_logger(__name__)

_CREATE_FIELDS = (
    "name",
    "description",
    "type",
    "criticality",
    "department_id",
    "parent_id",
    "tools",
    "responsibles",
    "document_link",
    "documented",
    "position_x",
    "position_y",
)
_UPDATE_FIELDS = (
    "name",
    "description",
    "type",
    "criticality",
    "tools",
    "responsibles",
    "position_x",
    "position_y",
)
_REQUIRED = frozenset({"name", "type", "tools", "responsibles"})
_UNKNOWN_REFERENCE = "Department, parent process or acting user does not exist"


class ProcessService:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._processes = ProcessRepo(session)
        self._departments = DepartmentRepo(session)

    async def list(self, filters: ProcessFilters) -> list[ProcessRow]:
        return await self._processes.list_filtered(filters)

    async def list_for_department(
        self, department_id: uuid.UUID, filters: ProcessFilters
    ) -> list[ProcessRow]:
        return await self._processes.list_filtered(
            ProcessFilters(
                department_id=department_id,
                type=filters.type,
                status=filters.status,
                documented=filters.documented,
                search=filters.search,
            )
        )

    async def get(self, process_id: uuid.UUID) -> ProcessRow:
        row = await self._processes.get_detail(process_id)
        if row is None:
            raise NotFound(f"Process {process_id} not found")
        return row

    async def list_children(self, process_id: uuid.UUID) -> list[ProcessRow]:
        await self._require(process_id)
        return await self._processes.children_of(process_id)

    async def create(self, data: Mapping[str, Any], *, actor_id: uuid.UUID) -> ProcessRow:
        values = {k: data[k] for k in _CREATE_FIELDS if k in data}
        process = Process(**values, created_by_id=actor_id)
        try:
            await self._processes.add(process)
            await self._session.commit()
        except IntegrityError as e:
            # FK rejection from the store: unknown department, parent process or actor.
            await self._session.rollback()
            raise InvalidReference(_UNKNOWN_REFERENCE) from e

        log.info(
            "process_created",
            process_id=str(process.id),
            department_id=str(process.department_id),
            actor_id=str(actor_id),
        )
        return await self.get(process.id)

    async def update(
        self,
        process_id: uuid.UUID,
        changes: Mapping[str, Any],
        *,
        actor_id: uuid.UUID,
    ) -> ProcessRow:
        process = await self._require(process_id)

        # Resolve references before touching the loaded object.
        department_id = changes.get("department_id")
        if department_id is not None and not await self._departments.exists(department_id):
            raise InvalidReference(f"Department {department_id} does not exist")
        if changes.get("parent_id") is not None:
            await self._check_parent(process.id, changes["parent_id"])

        for key in _UPDATE_FIELDS:
            if key not in changes:
                continue
            value = changes[key]
            if value is None and key in _REQUIRED:
                continue
            setattr(process, key, value)

        process.document_link = changes.get("document_link")
        if department_id is not None:
            process.department_id = department_id
        if "parent_id" in changes:
            process.parent_id = changes["parent_id"]
        process.updated_by_id = actor_id
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise InvalidReference(_UNKNOWN_REFERENCE) from e

        log.info("process_updated", process_id=str(process_id), actor_id=str(actor_id))
        return await self.get(process_id)

    async def toggle_status(self, process_id: uuid.UUID, *, actor_id: uuid.UUID) -> ProcessRow:
        process = await self._require(process_id)
        process.active = not process.active
        process.updated_by_id = actor_id
        await self._commit_flag_change()
        log.info("process_status_toggled", process_id=str(process_id), active=process.active)
        return await self.get(process_id)

    async def toggle_documented(
        self, process_id: uuid.UUID, *, actor_id: uuid.UUID
    ) -> ProcessRow:
        process = await self._require(process_id)
        process.documented = not process.documented
        process.updated_by_id = actor_id
        await self._commit_flag_change()
        log.info(
            "process_documented_toggled", process_id=str(process_id), documented=process.documented
        )
        return await self.get(process_id)

    async def remove(self, process_id: uuid.UUID) -> None:
        await self._require(process_id)
        try:
            await self._processes.delete(process_id)
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            log.info("process_delete_blocked", process_id=str(process_id))
            raise DependencyExists("Process still has child processes or documents") from e

        log.info("process_deleted", process_id=str(process_id))

    async def _commit_flag_change(self) -> None:
        try:
            await self._session.commit()
        except IntegrityError as e:
            await self._session.rollback()
            raise InvalidReference("Acting user does not exist") from e

    async def _require(self, process_id: uuid.UUID) -> Process:
        process = await self._processes.get(process_id)
        if process is None:
            raise NotFound(f"Process {process_id} not found")
        return process

    async def _check_parent(self, process_id: uuid.UUID, parent_id: uuid.UUID) -> None:
        if await self._processes.get(parent_id) is None:
            raise InvalidReference(f"Parent process {parent_id} does not exist")
        if await self._processes.is_ancestor_or_self(parent_id, process_id):
            raise InvalidReference("A process cannot be nested under itself or its descendants")


# --- Module Notes -----------------------------------------------------------
# Reads always go through `ProcessRepo.get_detail`, which repopulates objects already in
# the session so responses reflect the committed state.
