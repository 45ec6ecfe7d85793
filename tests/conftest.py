"""
tests.conftest

Shared fixtures.

Responsibilities:
- Per-test settings backed by a file SQLite database under `tmp_path`.
- A session factory for service-level tests and an app/client pair for HTTP tests.
- Seeded admin and regular users plus a helper to mint bearer headers for them.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from process_registry.api.app import create_app
from process_registry.auth.models import Identity
from process_registry.auth.passwords import hash_password
from process_registry.auth.tokens import JwtConfig, TokenService
from process_registry.db.init_db import init_db
from process_registry.db.models import User
from process_registry.db.repositories.users import UserRepo
from process_registry.db.session import create_engine, create_sessionmaker
from process_registry.settings import Settings

TEST_SECRET = "test-secret-key-for-pytest-only-0123456789abcdef"
PASSWORD = "stage123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        jwt_secret=TEST_SECRET,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'registry.db'}",
    )


@pytest.fixture
def tokens(settings: Settings) -> TokenService:
    return TokenService(JwtConfig.from_settings(settings))


@pytest_asyncio.fixture
async def session_factory(settings: Settings) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_engine(settings)
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as s:
        yield s


async def _create_user(
    session_factory: async_sessionmaker[AsyncSession], *, email: str, name: str, role: str
) -> User:
    # Short-lived session so no read transaction lingers on the SQLite file.
    async with session_factory() as s:
        user = await UserRepo(s).create(
            email=email, name=name, password_hash=hash_password(PASSWORD), role=role
        )
        await s.commit()
        return user


@pytest_asyncio.fixture
async def admin(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await _create_user(
        session_factory, email="admin@example.com", name="Administrator", role="admin"
    )


@pytest_asyncio.fixture
async def member(session_factory: async_sessionmaker[AsyncSession]) -> User:
    return await _create_user(
        session_factory, email="user@example.com", name="Regular User", role="user"
    )


@pytest.fixture
def password() -> str:
    return PASSWORD


@pytest.fixture
def auth_header(tokens: TokenService) -> Callable[[User], dict[str, str]]:
    def _header(user: User) -> dict[str, str]:
        identity = Identity(id=user.id, email=user.email, role=user.role, name=user.name)
        return {"Authorization": f"Bearer {tokens.issue(identity)}"}

    return _header


@pytest_asyncio.fixture
async def client(settings: Settings) -> AsyncIterator[httpx.AsyncClient]:
    app = create_app(settings=settings)

    # httpx ASGITransport does not run the lifespan; enter it explicitly.
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
