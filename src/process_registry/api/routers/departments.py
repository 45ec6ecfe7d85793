"""
process_registry.api.routers.departments

Department Registry endpoints.

Responsibilities:
- CRUD, status toggle and delete for departments.
- Return departments with creator/updater summaries and process statistics.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_201_CREATED, HTTP_204_NO_CONTENT

from process_registry.api.deps import db_session
from process_registry.api.schemas import UserSummary
from process_registry.auth.deps import current_claims
from process_registry.auth.models import Claims
from process_registry.services.departments import DepartmentService, DepartmentView

router = APIRouter(prefix="/departments", tags=["departments"])

_SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class DepartmentCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    slug: str = Field(min_length=1, max_length=128, pattern=_SLUG_PATTERN)
    description: str | None = None


class DepartmentUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=256)
    slug: str | None = Field(default=None, min_length=1, max_length=128, pattern=_SLUG_PATTERN)
    description: str | None = None


class DepartmentStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    process_count: int
    systemic_count: int
    manual_count: int
    documented_percent: int


class DepartmentResponse(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    active: bool
    created_by: UserSummary | None
    updated_by: UserSummary | None
    created_at: datetime
    updated_at: datetime
    stats: DepartmentStatsResponse

    @classmethod
    def from_view(cls, view: DepartmentView) -> DepartmentResponse:
        d = view.department
        return cls(
            id=d.id,
            name=d.name,
            slug=d.slug,
            description=d.description,
            active=d.active,
            created_by=UserSummary.model_validate(d.created_by) if d.created_by else None,
            updated_by=UserSummary.model_validate(d.updated_by) if d.updated_by else None,
            created_at=d.created_at,
            updated_at=d.updated_at,
            stats=DepartmentStatsResponse.model_validate(view.stats),
        )


@router.get("", name="departments.list", response_model=list[DepartmentResponse])
async def list_departments(
    session: AsyncSession = Depends(db_session),
) -> list[DepartmentResponse]:
    views = await DepartmentService(session).list()
    return [DepartmentResponse.from_view(v) for v in views]


@router.get("/{department_id}", name="departments.get", response_model=DepartmentResponse)
async def get_department(
    department_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> DepartmentResponse:
    return DepartmentResponse.from_view(await DepartmentService(session).get(department_id))


@router.post(
    "",
    name="departments.create",
    response_model=DepartmentResponse,
    status_code=HTTP_201_CREATED,
)
async def create_department(
    body: DepartmentCreateRequest,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> DepartmentResponse:
    view = await DepartmentService(session).create(body.model_dump(), actor_id=claims.user_id)
    return DepartmentResponse.from_view(view)


@router.put("/{department_id}", name="departments.update", response_model=DepartmentResponse)
async def update_department(
    department_id: uuid.UUID,
    body: DepartmentUpdateRequest,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> DepartmentResponse:
    view = await DepartmentService(session).update(
        department_id, body.model_dump(exclude_unset=True), actor_id=claims.user_id
    )
    return DepartmentResponse.from_view(view)


@router.patch(
    "/{department_id}/status",
    name="departments.toggle_status",
    response_model=DepartmentResponse,
)
async def toggle_department_status(
    department_id: uuid.UUID,
    claims: Claims = Depends(current_claims),
    session: AsyncSession = Depends(db_session),
) -> DepartmentResponse:
    view = await DepartmentService(session).toggle_status(department_id, actor_id=claims.user_id)
    return DepartmentResponse.from_view(view)


@router.delete(
    "/{department_id}",
    name="departments.remove",
    status_code=HTTP_204_NO_CONTENT,
)
async def remove_department(
    department_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
) -> None:
    await DepartmentService(session).remove(department_id)


# --- Module Notes -----------------------------------------------------------
# Role requirements for these routes are declared in `api.route_table`, not here.
