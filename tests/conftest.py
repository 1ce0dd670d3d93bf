"""Shared fixtures: in-memory SQLite database and fake collaborators."""

from collections.abc import AsyncGenerator
from uuid import UUID

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from smartops.configs import Settings
from smartops.db import Database
from smartops.managers import PermissionCache
from smartops.repositories import Repositories
from smartops.schemas import UserCreate, UserResponse
from smartops.services import AccessManagementService

TEST_DATABASE_URL = "sqlite+aiosqlite://"


class FakeHasher:
    """Reversible stand-in for the Argon2 hasher."""

    def __init__(self) -> None:
        self.dummy_calls = 0
        self.hashed: list[str] = []

    async def hash(self, password: str) -> str:
        self.hashed.append(password)
        return f"hashed::{password}"

    async def verify(self, password: str, hashed_password: str) -> bool:
        return hashed_password == f"hashed::{password}"

    async def verify_and_update(self, password: str, hashed_password: str) -> tuple[bool, str | None]:
        """``legacy::`` digests verify and come back upgraded."""
        if hashed_password == f"legacy::{password}":
            return True, await self.hash(password)
        return await self.verify(password, hashed_password), None

    async def dummy_verify(self) -> None:
        self.dummy_calls += 1


class FakeSessions:
    """Records issued and revoked tokens."""

    def __init__(self) -> None:
        self.issued: list[UUID] = []
        self.revoked: list[str] = []

    async def issue(self, user_id: UUID) -> str:
        self.issued.append(user_id)
        return f"token-{user_id}"

    async def revoke(self, token: str) -> None:
        self.revoked.append(token)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        ENVIRONMENT="test",
        DATABASE_URL=TEST_DATABASE_URL,
        DEFAULT_ROLE_NAME="employee",
        PASSWORD_SECURITY_LEVEL="low",
        _env_file=None,
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database]:
    db = Database(settings)
    await db.init_models()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession]:
    async with database.session_maker() as session:
        yield session


@pytest.fixture
def repos(session: AsyncSession) -> Repositories:
    return Repositories.from_session(session)


@pytest.fixture
def hasher() -> FakeHasher:
    return FakeHasher()


@pytest.fixture
def sessions() -> FakeSessions:
    return FakeSessions()


@pytest.fixture
def cache() -> PermissionCache:
    return PermissionCache()


@pytest.fixture
def service(
    repos: Repositories,
    hasher: FakeHasher,
    sessions: FakeSessions,
    settings: Settings,
    cache: PermissionCache,
) -> AccessManagementService:
    return AccessManagementService(repos, hasher, sessions, settings, cache)


@pytest.fixture
def make_user(repos: Repositories):
    """Factory creating users straight through the repository."""
    counter = 0

    async def _make(username: str | None = None, email: str | None = None) -> UserResponse:
        nonlocal counter
        counter += 1
        name = username or f"user{counter}"
        payload = UserCreate(
            username=name,
            email=email or f"{name}@example.com",
            password="Password123",
        )
        return await repos.users.create(payload, "hashed::Password123")

    return _make
