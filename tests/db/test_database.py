# tests/db/test_database.py
"""Tests for the scoped transaction and store-error classification."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from smartops.configs import Settings
from smartops.db import Database
from smartops.errors import ConflictError, DbError, InternalServerError, NotFoundError
from smartops.models import RoleDB
from smartops.repositories import RoleRepository
from smartops.schemas import RoleCreate


def _mock_session() -> AsyncMock:
    session = AsyncMock()
    session.add = MagicMock()
    return session


class TestTransaction:
    async def test_commits_on_success(self, database: Database) -> None:
        async with database.transaction() as session:
            await RoleRepository(session).create(RoleCreate(name="kept"))

        async with database.transaction() as session:
            assert await RoleRepository(session).get_by_name("kept") is not None

    async def test_rolls_back_on_classified_error(self, database: Database) -> None:
        with pytest.raises(ConflictError):
            async with database.transaction() as session:
                repo = RoleRepository(session)
                await repo.create(RoleCreate(name="dropped"))
                await repo.create(RoleCreate(name="dropped"))

        async with database.transaction() as session:
            assert await RoleRepository(session).get_by_name("dropped") is None

    async def test_rolls_back_on_unexpected_error(self, database: Database) -> None:
        with pytest.raises(RuntimeError):
            async with database.transaction() as session:
                await RoleRepository(session).create(RoleCreate(name="dropped"))
                raise RuntimeError("boom")

        async with database.transaction() as session:
            assert await RoleRepository(session).get_by_name("dropped") is None


class TestErrorClassification:
    async def test_unique_race_becomes_conflict(self) -> None:
        session = _mock_session()
        session.flush.side_effect = IntegrityError(
            "INSERT",
            {},
            Exception("UNIQUE constraint failed: roles.name"),
        )
        with pytest.raises(ConflictError):
            await RoleRepository(session)._add_and_refresh(RoleDB(name="raced"))
        session.rollback.assert_awaited_once()

    async def test_foreign_key_violation_becomes_not_found(self) -> None:
        session = _mock_session()
        session.flush.side_effect = IntegrityError(
            "INSERT",
            {},
            Exception("FOREIGN KEY constraint failed"),
        )
        with pytest.raises(NotFoundError):
            await RoleRepository(session)._add_and_refresh(RoleDB(name="dangling"))

    async def test_unclassified_failure_becomes_db_error(self) -> None:
        session = _mock_session()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection reset"))
        with pytest.raises(DbError) as exc_info:
            await RoleRepository(session).get_by_id(1)
        assert exc_info.value.detail == "Internal Server Error"

    async def test_zero_rows_deleted_after_existence_check(self) -> None:
        """A row vanishing between check and delete is an internal error."""
        session = _mock_session()
        result = MagicMock()
        result.scalar_one_or_none.return_value = 1
        result.rowcount = 0
        session.execute.return_value = result

        with pytest.raises(InternalServerError):
            await RoleRepository(session).delete(7)


class TestEngineSettings:
    def test_database_url_built_from_parts(self) -> None:
        settings = Settings(
            DATABASE_USERNAME="app",
            DATABASE_PASSWORD="s3cret",
            DATABASE_HOST="db",
            DATABASE_PORT=6543,
            DATABASE_NAME="smartops",
            _env_file=None,
        )
        assert settings.database_url == "postgresql+asyncpg://app:s3cret@db:6543/smartops"
        assert not settings.is_sqlite

    def test_database_url_override(self, settings: Settings) -> None:
        assert settings.database_url == "sqlite+aiosqlite://"
        assert settings.is_sqlite
