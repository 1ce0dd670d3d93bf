"""Database engine and session management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from smartops.configs.settings import Settings
from smartops.errors.base import BaseAppError
from smartops.monitoring.logging import get_logger

logger = get_logger(__name__)

STATEMENT_TIMEOUT_MS = 30000


def _configure_engine_events(engine: AsyncEngine) -> None:
    """Configure connection pool events for monitoring."""

    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("New database connection established")

    @event.listens_for(engine.sync_engine, "checkout")
    def on_checkout(
        dbapi_connection: object,
        connection_record: object,
        connection_proxy: object,
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine.sync_engine, "checkin")
    def on_checkin(dbapi_connection: object, connection_record: object) -> None:
        logger.debug("Connection returned to pool")


def _enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection: Any, connection_record: object) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def create_engine(settings: Settings) -> AsyncEngine:
    """
    Build the async engine and its bounded connection pool from settings.

    SQLite URLs (tests, local tooling) get a single shared connection with
    foreign keys switched on; every other URL gets a sized, pre-pinged pool.
    """
    if settings.is_sqlite:
        engine = create_async_engine(
            settings.database_url,
            echo=settings.DATABASE_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        _enable_sqlite_foreign_keys(engine)
    else:
        engine = create_async_engine(
            settings.database_url,
            echo=settings.DATABASE_ECHO,
            pool_size=settings.DATABASE_MAX_CONNECTIONS,
            max_overflow=settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=settings.DATABASE_POOL_TIMEOUT,
            pool_recycle=settings.DATABASE_IDLE_TIMEOUT,
            pool_pre_ping=True,
            connect_args={
                "command_timeout": STATEMENT_TIMEOUT_MS / 1000,
                "server_settings": {
                    "statement_timeout": str(STATEMENT_TIMEOUT_MS),
                    "lock_timeout": str(STATEMENT_TIMEOUT_MS),
                },
            },
        )

    if settings.DEBUG:
        _configure_engine_events(engine)

    return engine


class Database:
    """
    Owner of the engine and session factory.

    Constructed once at startup and passed to whatever needs a session;
    nothing in the package reaches for a module-level engine.
    """

    def __init__(self, settings: Settings, engine: AsyncEngine | None = None) -> None:
        self.settings = settings
        self.engine = engine or create_engine(settings)
        self.session_maker: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[AsyncSession]:
        """
        Scoped session for one logical operation.

        Commits on successful exit, rolls back on exception, and always
        returns the connection to the pool.

        Example:
            ```python
            async with database.transaction() as session:
                service = AccessManagementService(Repositories.from_session(session), ...)
                await service.assign_role(user_id, role_id)
            ```
        """
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except BaseAppError as e:
                await session.rollback()
                logger.info("Transaction rolled back", reason=type(e).__name__)
                raise
            except Exception:
                await session.rollback()
                logger.exception("Transaction error")
                raise
            finally:
                await session.close()

    async def get_session(self) -> AsyncGenerator[AsyncSession]:
        """FastAPI dependency flavour of :meth:`transaction`."""
        async with self.transaction() as session:
            yield session

    async def init_models(self) -> None:
        """
        Create all tables defined in SQLModel models.

        Note:
            Development and test convenience; production schemas belong to
            migrations.
        """
        async with self.engine.begin() as conn:
            # Register every table on the metadata before create_all
            from smartops import models  # noqa: F401, PLC0415

            await conn.run_sync(SQLModel.metadata.create_all)
            logger.info("Database initialized successfully!")

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Database connections closed")
