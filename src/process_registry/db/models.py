"""
process_registry.db.models

Persistence schema for the registry.

Responsibilities:
- Define ORM models:
  - User: login identity (bcrypt hash + role)
  - Department: unique name/slug, owns processes
  - Process: self-referencing tree nested under a department
  - ProcessDocument: documents attached to a process
- Declare the uniqueness and foreign-key constraints the store enforces.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid as SAUuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from process_registry.db.base import Base

PROCESS_TYPE_MANUAL = "manual"
PROCESS_TYPE_SYSTEMIC = "systemic"


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.now(UTC).replace(tzinfo=None)


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default="user")

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    slug: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    updated_by_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    created_by: Mapped[User] = relationship(foreign_keys=[created_by_id])
    updated_by: Mapped[User | None] = relationship(foreign_keys=[updated_by_id])
    # Deletes go through a direct DELETE so the store, not the ORM, decides on dependents.
    processes: Mapped[list[Process]] = relationship(
        back_populates="department", passive_deletes="all"
    )

    # Store-level backstop for the name/slug pre-check in DepartmentService.
    __table_args__ = (
        UniqueConstraint("name"),
        UniqueConstraint("slug"),
    )


class Process(Base):
    __tablename__ = "processes"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Open vocabulary; "manual" and "systemic" feed department statistics.
    type: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    criticality: Mapped[str | None] = mapped_column(String(64), nullable=True)

    department_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("departments.id"), nullable=False, index=True
    )
    parent_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("processes.id"), nullable=True, index=True
    )

    tools: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    responsibles: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    document_link: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    documented: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Diagram layout coordinates.
    position_x: Mapped[float | None] = mapped_column(Float, nullable=True)
    position_y: Mapped[float | None] = mapped_column(Float, nullable=True)

    created_by_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=False
    )
    updated_by_id: Mapped[uuid.UUID | None] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("users.id"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)

    department: Mapped[Department] = relationship(back_populates="processes")
    parent: Mapped[Process | None] = relationship(
        back_populates="children", remote_side=[id]
    )
    children: Mapped[list[Process]] = relationship(
        back_populates="parent", passive_deletes="all", order_by="Process.name"
    )
    documents: Mapped[list[ProcessDocument]] = relationship(
        back_populates="process", passive_deletes="all"
    )
    created_by: Mapped[User] = relationship(foreign_keys=[created_by_id])
    updated_by: Mapped[User | None] = relationship(foreign_keys=[updated_by_id])

    __table_args__ = (Index("ix_processes_department_created", "department_id", "created_at"),)


class ProcessDocument(Base):
    __tablename__ = "process_documents"

    id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    process_id: Mapped[uuid.UUID] = mapped_column(
        SAUuid(as_uuid=True), ForeignKey("processes.id"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    process: Mapped[Process] = relationship(back_populates="documents")


# --- Module Notes -----------------------------------------------------------
# Foreign keys use the database default (NO ACTION): deleting a referenced department
# or process fails at the store, and services report it as DependencyExists.
