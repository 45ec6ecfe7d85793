"""
process_registry.api.routers.processes

Process Registry endpoints.

Responsibilities:
- Filterable listing (global and per department), detail and direct children.
- Create/update/delete and the status/documented toggles.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from process_registry.api.deps import db_session
from process_registry.api.schemas import DepartmentSummary, ProcessSummary, UserSummary
from process_registry.auth.deps import current_claims
from process_registry.auth.models import Claims
from process_registry.db.repositories.processes import ProcessFilters, ProcessRow
from process_registry.services.processes import ProcessService

router = APIRouter(tags=["processes"])


class ProcessCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    description: str | None = None
    type: str = Field(min_length=1, max_length=64)
    criticality: str | None = Field(default=None, max_length=64)
    department_id: uuid.UUID
    parent_id: uuid.UUID | None = None
    tools: list[str] = Field(default_factory=list)
    responsibles: list[str] = Field(default_factory=list)
    document_link: str | None = Field(default=None, max_length=2048)
    documented: bool = False
    position_x: float | None = None
    position_y: float | None = None


class ProcessUpdateRequest(BaseModel):
    # Field presence matters: an absent `parent_id` keeps the parent, an explicit null
    # detaches it, and an absent `document_link` clears the link.
    name: str | None = Field(default=None, min_length=1, max_length=256)
    description: str | None = None
    type: str | None = Field(default=None, min_length=1, max_length=64)
    criticality: str | None = Field(default=None, max_length=64)
    department_id: uuid.UUID | None = None
    parent_id: uuid.UUID | None = None
    tools: list[str] | None = None
    responsibles: list[str] | None = None
    document_link: str | None = Field(default=None, max_length=2048)
    position_x: float | None = None
    position_y: float | None = None


class ChildResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    type: str
    criticality: str | None
    active: bool
    documented: bool


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    url: str
    created_at: datetime


class ProcessBaseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    type: str
    criticality: str | None
    department_id: uuid.UUID
    parent_id: uuid.UUID | None
    tools: list[str]
    responsibles: list[str]
    document_link: str | None
    documented: bool
    active: bool
    position_x: float | None
    position_y: float | None
    created_at: datetime
    updated_at: datetime
    child_count: int = 0
    document_count: int = 0

    @classmethod
    def from_row(cls, row: ProcessRow) -> ProcessBaseResponse:
        out = cls.model_validate(row.process)
        return out.model_copy(
            update={"child_count": row.child_count, "document_count": row.document_count}
        )


class ProcessResponse(ProcessBaseResponse):
    department: DepartmentSummary | None = None
    created_by: UserSummary | None = None
    updated_by: UserSummary | None = None
    parent: ProcessSummary | None = None


class ProcessDetailResponse(ProcessResponse):
    children: list[ChildResponse] = Field(default_factory=list)
    documents: list[DocumentResponse] = Field(default_factory=list)


def _scoped_filters(
    process_type: str | None = Query(default=None, alias="type"),
    status: str | None = Query(default=None, description='"active" or "inactive"'),
    documented: bool | None = Query(default=None),
    search: str | None = Query(default=None, max_length=256),
) -> ProcessFilters:
    return ProcessFilters(
        type=process_type, status=status, documented=documented, search=search
    )


def _filters(
    department_id: uuid.UUID | None = Query(default=None),
    scoped: ProcessFilters = Depends(_scoped_filters),
) -> ProcessFilters:
    return replace(scoped, department_id=department_id)


@router.get("/processes", name="processes.list", response_model=list[ProcessResponse])
async def list_processes(
    filters: ProcessFilters = Depends(_filters),
    session: AsyncSession = Depends(db_session),
) -> list[ProcessResponse]:
    rows = await ProcessService(session).list(filters)
    return [ProcessResponse.from_row(r) for r in rows]


@router.get(
    "/departments/{department_id}/processes",
    name="processes.by_department",
    response_model=list[ProcessResponse],
)
async def list_department_processes(
    department_id: uuid.UUID,
    filters: ProcessFilters = Depends(_scoped_filters),
    session: AsyncSession = Depends(db_session),
) -> list[ProcessResponse]:
    rows = await ProcessService(session).list_for_department(department_id, filters)
    return [ProcessResponse.from_row(r) for r in rows]


@router.get("/processes/{process_id}", name="processes.get", response_model=ProcessDetailResponse)
async def get_process(
    process_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> ProcessDetailResponse:
    return ProcessDetailResponse.from_row(await ProcessService(session).get(process_id))


@router.get(
    "/processes/{process_id}/children",
    name="processes.children",
    response_model=list[ProcessBaseResponse],
)
async def list_process_children(
    process_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> list[ProcessBaseResponse]:
    rows = await ProcessService(session).list_children(process_id)
    return [ProcessBaseResponse.from_row(r) for r in rows]


@router.post(
    "/processes",
    name="processes.create",
    response_model=ProcessDetailResponse,
    status_code=HTTP_201_CREATED,
)
async def create_process(
    body: ProcessCreateRequest,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> ProcessDetailResponse:
    row = await ProcessService(session).create(body.model_dump(), actor_id=claims.user_id)
    return ProcessDetailResponse.from_row(row)


@router.put("/processes/{process_id}", name="processes.update", response_model=ProcessDetailResponse)
async def update_process(
    process_id: uuid.UUID,
    body: ProcessUpdateRequest,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> ProcessDetailResponse:
    row = await ProcessService(session).update(
        process_id, body.model_dump(exclude_unset=True), actor_id=claims.user_id
    )
    return ProcessDetailResponse.from_row(row)


@router.patch(
    "/processes/{process_id}/status",
    name="processes.toggle_status",
    response_model=ProcessDetailResponse,
)
async def toggle_process_status(
    process_id: uuid.UUID,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> ProcessDetailResponse:
    row = await ProcessService(session).toggle_status(process_id, actor_id=claims.user_id)
    return ProcessDetailResponse.from_row(row)


@router.patch(
    "/processes/{process_id}/documented",
    name="processes.toggle_documented",
    response_model=ProcessDetailResponse,
)
async def toggle_process_documented(
    process_id: uuid.UUID,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> ProcessDetailResponse:
    row = await ProcessService(session).toggle_documented(process_id, actor_id=claims.user_id)
    return ProcessDetailResponse.from_row(row)


@router.delete(
    "/processes/{process_id}",
    name="processes.remove",
    status_code=HTTP_204_NO_CONTENT,
)
async def remove_process(
    process_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> None:
    await ProcessService(session).remove(process_id)
