"""Repository for the reporting hierarchy."""

from collections.abc import Collection
from uuid import UUID

from sqlmodel import col

from smartops.errors import NotFoundError
from smartops.models import UserDB, UserHierarchyDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.relations import UserHierarchyResponse


class UserHierarchyRepository(BaseRepository[UserHierarchyDB]):
    """
    Repository for ``user_hierarchy`` edges.

    Stores at most one edge per subordinate. Cycle detection needs the
    whole chain and lives in the access-management service; this layer
    only guarantees both users exist.
    """

    model = UserHierarchyDB
    entity = "Reporting line"

    async def get_manager_id(self, user_id: UUID) -> UUID | None:
        record = await self._first(col(UserHierarchyDB.user_id) == user_id)
        return record.reports_to if record else None

    async def set_manager(self, user_id: UUID, reports_to: UUID) -> UserHierarchyResponse:
        """
        Insert the edge, or move it when the user already has a manager.

        Raises:
            NotFoundError: If either user does not exist
        """
        for ref in (user_id, reports_to):
            if not await self._exists(col(UserDB.id) == ref, model=UserDB):
                raise NotFoundError(f"User with ID {ref} not found")

        record = await self._first(col(UserHierarchyDB.user_id) == user_id)
        if record is None:
            record = UserHierarchyDB(user_id=user_id, reports_to=reports_to)
        else:
            record.reports_to = reports_to
        record = await self._add_and_refresh(record)
        return UserHierarchyResponse.model_validate(record)

    async def remove(self, user_id: UUID) -> None:
        if await self.get_manager_id(user_id) is None:
            raise NotFoundError("User has no manager")
        await self._delete_checked(self._delete_statement(col(UserHierarchyDB.user_id) == user_id))

    async def list_direct_reports(self, manager_ids: Collection[UUID]) -> list[UUID]:
        """Subordinate ids of every manager in ``manager_ids``."""
        if not manager_ids:
            return []
        records = await self._all(col(UserHierarchyDB.reports_to).in_(list(manager_ids)))
        return [r.user_id for r in records]
