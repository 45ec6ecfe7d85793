"""
tests.test_departments

Department Registry at the service level: uniqueness, toggles, statistics and
dependency-aware deletion.
"""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from process_registry.db.models import User
from process_registry.db.repositories.departments import ProcessTally
from process_registry.errors import Conflict, DependencyExists, InvalidReference, NotFound
from process_registry.services.departments import DepartmentService, DepartmentStats
from process_registry.services.processes import ProcessService


def _process(department_id: uuid.UUID, name: str, **extra) -> dict:
    return {"name": name, "type": "manual", "department_id": department_id, **extra}


@pytest.mark.asyncio
async def test_create_sets_creator_and_defaults(session: AsyncSession, admin: User) -> None:
    view = await DepartmentService(session).create(
        {"name": "Financeiro", "slug": "financeiro", "description": "Contabilidade"},
        actor_id=admin.id,
    )

    assert view.department.active is True
    assert view.department.created_by.email == admin.email
    assert view.department.updated_by is None
    assert view.stats == DepartmentStats()


@pytest.mark.asyncio
async def test_duplicate_name_or_slug_conflicts(session: AsyncSession, admin: User) -> None:
    svc = DepartmentService(session)
    await svc.create({"name": "Recursos Humanos", "slug": "rh"}, actor_id=admin.id)

    with pytest.raises(Conflict):
        await svc.create({"name": "Recursos Humanos", "slug": "rh-2"}, actor_id=admin.id)
    with pytest.raises(Conflict):
        await svc.create({"name": "Pessoas", "slug": "rh"}, actor_id=admin.id)

    assert len(await svc.list()) == 1


@pytest.mark.asyncio
async def test_update_checks_uniqueness_against_other_records(
    session: AsyncSession, admin: User
) -> None:
    svc = DepartmentService(session)
    hr = await svc.create({"name": "Recursos Humanos", "slug": "rh"}, actor_id=admin.id)
    await svc.create({"name": "Tecnologia", "slug": "ti"}, actor_id=admin.id)

    with pytest.raises(Conflict):
        await svc.update(hr.department.id, {"slug": "ti"}, actor_id=admin.id)

    # Re-submitting its own name is not a collision.
    view = await svc.update(
        hr.department.id,
        {"name": "Recursos Humanos", "description": "Gestão de pessoas"},
        actor_id=admin.id,
    )
    assert view.department.description == "Gestão de pessoas"
    assert view.department.updated_by.id == admin.id


@pytest.mark.asyncio
async def test_update_missing_department(session: AsyncSession, admin: User) -> None:
    with pytest.raises(NotFound):
        await DepartmentService(session).update(uuid.uuid4(), {"name": "X"}, actor_id=admin.id)


@pytest.mark.asyncio
async def test_toggle_status_twice_restores_original(session: AsyncSession, admin: User) -> None:
    svc = DepartmentService(session)
    dept = await svc.create({"name": "Marketing", "slug": "marketing"}, actor_id=admin.id)

    first = await svc.toggle_status(dept.department.id, actor_id=admin.id)
    assert first.department.active is False
    second = await svc.toggle_status(dept.department.id, actor_id=admin.id)
    assert second.department.active is True


@pytest.mark.asyncio
async def test_toggle_status_missing(session: AsyncSession, admin: User) -> None:
    with pytest.raises(NotFound):
        await DepartmentService(session).toggle_status(uuid.uuid4(), actor_id=admin.id)


@pytest.mark.asyncio
async def test_list_is_ordered_by_name(session: AsyncSession, admin: User) -> None:
    svc = DepartmentService(session)
    for name, slug in [("Tecnologia", "ti"), ("Financeiro", "fin"), ("Marketing", "mkt")]:
        await svc.create({"name": name, "slug": slug}, actor_id=admin.id)

    names = [v.department.name for v in await svc.list()]
    assert names == ["Financeiro", "Marketing", "Tecnologia"]


@pytest.mark.asyncio
async def test_statistics_are_derived_from_processes(session: AsyncSession, admin: User) -> None:
    departments = DepartmentService(session)
    processes = ProcessService(session)
    dept = await departments.create({"name": "Tecnologia", "slug": "ti"}, actor_id=admin.id)
    dept_id = dept.department.id

    await processes.create(
        _process(dept_id, "Deploy", type="systemic", documented=True), actor_id=admin.id
    )
    await processes.create(
        _process(dept_id, "Backup", type="systemic", documented=True), actor_id=admin.id
    )
    await processes.create(
        _process(dept_id, "Onboarding", document_link="https://wiki.example.com/onboarding"),
        actor_id=admin.id,
    )
    await processes.create(_process(dept_id, "Inventory", type="audit"), actor_id=admin.id)

    stats = (await departments.get(dept_id)).stats
    assert stats.process_count == 4
    assert stats.systemic_count == 2
    assert stats.manual_count == 1
    assert stats.documented_percent == 75

    listed = {v.department.id: v.stats for v in await departments.list()}
    assert listed[dept_id] == stats


@pytest.mark.asyncio
async def test_blank_document_link_does_not_count(session: AsyncSession, admin: User) -> None:
    dept = await DepartmentService(session).create({"name": "Legal", "slug": "legal"}, actor_id=admin.id)
    await ProcessService(session).create(
        _process(dept.department.id, "Contracts", document_link="   "), actor_id=admin.id
    )

    stats = (await DepartmentService(session).get(dept.department.id)).stats
    assert stats.process_count == 1
    assert stats.documented_percent == 0


@pytest.mark.parametrize(
    ("total", "documented", "expected"),
    [(0, 0, 0), (4, 3, 75), (3, 2, 67), (8, 1, 13), (3, 1, 33), (1, 1, 100)],
)
def test_documented_percent_rounds_half_up(total: int, documented: int, expected: int) -> None:
    stats = DepartmentStats.from_tally(ProcessTally(total=total, documented=documented))
    assert stats.documented_percent == expected


@pytest.mark.asyncio
async def test_remove_with_processes_is_a_dependency_conflict(
    session: AsyncSession, admin: User
) -> None:
    departments = DepartmentService(session)
    dept = await departments.create({"name": "Financeiro", "slug": "financeiro"}, actor_id=admin.id)
    # Captured up front: the failed delete rolls back and expires loaded objects.
    dept_id = dept.department.id
    await ProcessService(session).create(_process(dept_id, "Fechamento Mensal"), actor_id=admin.id)

    with pytest.raises(DependencyExists) as exc_info:
        await departments.remove(dept_id)
    assert isinstance(exc_info.value, Conflict)

    # Nothing was cascaded away.
    view = await departments.get(dept_id)
    assert view.stats.process_count == 1


@pytest.mark.asyncio
async def test_remove_empty_department(session: AsyncSession, admin: User) -> None:
    departments = DepartmentService(session)
    dept = await departments.create({"name": "Compras", "slug": "compras"}, actor_id=admin.id)

    await departments.remove(dept.department.id)

    with pytest.raises(NotFound):
        await departments.get(dept.department.id)
    with pytest.raises(NotFound):
        await departments.remove(dept.department.id)


@pytest.mark.asyncio
async def test_unknown_actor_is_not_reported_as_a_duplicate(
    session: AsyncSession, admin: User
) -> None:
    svc = DepartmentService(session)
    ghost = uuid.uuid4()

    with pytest.raises(InvalidReference) as exc_info:
        await svc.create({"name": "Jurídico", "slug": "juridico"}, actor_id=ghost)
    assert not isinstance(exc_info.value, Conflict)
    assert exc_info.value.message == "Acting user does not exist"

    view = await svc.create({"name": "Jurídico", "slug": "juridico"}, actor_id=admin.id)
    dept_id = view.department.id

    with pytest.raises(InvalidReference):
        await svc.update(dept_id, {"description": "Contratos"}, actor_id=ghost)
    with pytest.raises(InvalidReference):
        await svc.toggle_status(dept_id, actor_id=ghost)

    after = await svc.get(dept_id, refresh=True)
    assert after.department.active is True
    assert after.department.description is None
    assert after.department.updated_by is None
