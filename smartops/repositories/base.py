"""Base repository for database operations."""

from typing import Any

from sqlalchemy import ColumnElement, Delete, Executable, Result, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from smartops.errors import ConflictError, DbError, InternalServerError, NotFoundError
from smartops.monitoring.logging import get_logger

logger = get_logger(__name__)


def _integrity_message(error: IntegrityError) -> str:
    return str(error.orig) if error.orig else str(error)


def is_unique_violation(error: IntegrityError) -> bool:
    message = _integrity_message(error).lower()
    return "unique" in message or "duplicate" in message


def is_foreign_key_violation(error: IntegrityError) -> bool:
    return "foreign key" in _integrity_message(error).lower()


class BaseRepository[ModelT: SQLModel]:
    """
    Common plumbing shared by the aggregate and association repositories.

    Every statement goes through :meth:`_execute` or :meth:`_flush` so that
    raw SQLAlchemy failures leave this layer as classified errors: unique
    violations become ``ConflictError``, dangling references become
    ``NotFoundError`` and anything else becomes ``DbError``.

    Attributes:
        model: The SQLModel table class the repository owns.
        entity: Human-readable name used in error details.
    """

    model: type[ModelT]
    entity: str = "Record"

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize repository with database session.

        Args:
            session: Async database session scoped to the current operation
        """
        self.session = session

    async def _execute(self, statement: Executable) -> Result[Any]:
        try:
            return await self.session.execute(statement)
        except IntegrityError as e:
            await self.session.rollback()
            raise self._classify_integrity_error(e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DbError(detail=f"{self.entity} query failed: {e}") from e

    async def _exists(self, *conditions: ColumnElement[bool], model: type[SQLModel] | None = None) -> bool:
        """Existence check that never loads the full row."""
        statement = select(1).select_from(model or self.model).where(*conditions).limit(1)
        result = await self._execute(statement)
        return result.scalar_one_or_none() is not None

    async def _first(self, *conditions: ColumnElement[bool]) -> ModelT | None:
        result = await self._execute(select(self.model).where(*conditions).limit(1))
        return result.scalars().first()

    async def _all(self, *conditions: ColumnElement[bool], order_by: Any = None) -> list[ModelT]:
        statement = select(self.model).where(*conditions)
        if order_by is not None:
            statement = statement.order_by(order_by)
        result = await self._execute(statement)
        return list(result.scalars().all())

    async def _add_and_refresh(self, record: ModelT) -> ModelT:
        """
        Add a record and refresh it from the database with error handling.

        Raises:
            ConflictError: If a unique constraint is violated (a racing writer
                slipped past the pre-check)
            NotFoundError: If a referenced row vanished before the insert
            DbError: For other database errors
        """
        self.session.add(record)
        await self._flush()
        await self.session.refresh(record)
        return record

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as e:
            await self.session.rollback()
            raise self._classify_integrity_error(e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DbError(detail=f"Failed to save {self.entity.lower()}: {e}") from e

    async def _delete_checked(self, statement: Delete) -> None:
        """
        Run a DELETE whose target was already confirmed to exist.

        Existence-then-delete spans two statements, so the affected row
        count is the authoritative answer: zero means a concurrent writer
        removed the row in between.
        """
        result = await self._execute(statement)
        if result.rowcount == 0:
            raise InternalServerError(f"Failed to delete {self.entity.lower()}")

    def _delete_statement(self, *conditions: ColumnElement[bool]) -> Delete:
        return delete(self.model).where(*conditions)

    def _classify_integrity_error(self, error: IntegrityError) -> Exception:
        message = _integrity_message(error)
        if is_unique_violation(error):
            logger.info("Unique constraint race remapped to conflict", entity=self.entity)
            return ConflictError(f"{self.entity} already exists")
        if is_foreign_key_violation(error):
            logger.info("Foreign key violation remapped", entity=self.entity)
            return NotFoundError(f"Referenced record for {self.entity.lower()} not found")
        return DbError(detail=f"Database integrity error: {message}")
