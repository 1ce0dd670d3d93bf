"""Repository for user-role assignments."""

from uuid import UUID

from sqlmodel import col

from smartops.errors import ConflictError, NotFoundError
from smartops.models import RoleDB, UserDB, UserRoleDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.relations import UserRoleResponse


class UserRoleRepository(BaseRepository[UserRoleDB]):
    """
    Repository for the ``user_roles`` association.

    Both referenced rows must exist before a pair is written, and a user
    cannot hold the same role twice.
    """

    model = UserRoleDB
    entity = "User role"

    @staticmethod
    def _pair(user_id: UUID, role_id: int) -> tuple:
        return (col(UserRoleDB.user_id) == user_id, col(UserRoleDB.role_id) == role_id)

    async def _require_references(self, user_id: UUID, role_id: int) -> None:
        if not await self._exists(col(UserDB.id) == user_id, model=UserDB):
            raise NotFoundError(f"User with ID {user_id} not found")
        if not await self._exists(col(RoleDB.id) == role_id, model=RoleDB):
            raise NotFoundError(f"Role with ID {role_id} not found")

    async def exists(self, user_id: UUID, role_id: int) -> bool:
        return await self._exists(*self._pair(user_id, role_id))

    async def add(self, user_id: UUID, role_id: int) -> UserRoleResponse:
        """
        Assign a role to a user.

        Raises:
            NotFoundError: If the user or the role does not exist
            ConflictError: If the user already holds the role
        """
        await self._require_references(user_id, role_id)
        if await self.exists(user_id, role_id):
            raise ConflictError("User already holds this role")
        record = await self._add_and_refresh(UserRoleDB(user_id=user_id, role_id=role_id))
        return UserRoleResponse.model_validate(record)

    async def replace(self, user_id: UUID, old_role_id: int, new_role_id: int) -> UserRoleResponse:
        """
        Swap one held role for another in place.

        Raises:
            NotFoundError: If the user does not hold ``old_role_id`` or the
                new role does not exist
            ConflictError: If the user already holds ``new_role_id``
        """
        record = await self._first(*self._pair(user_id, old_role_id))
        if record is None:
            raise NotFoundError("User does not hold this role")
        await self._require_references(user_id, new_role_id)
        if await self.exists(user_id, new_role_id):
            raise ConflictError("User already holds this role")

        await self._delete_checked(self._delete_statement(*self._pair(user_id, old_role_id)))
        record = await self._add_and_refresh(UserRoleDB(user_id=user_id, role_id=new_role_id))
        return UserRoleResponse.model_validate(record)

    async def remove(self, user_id: UUID, role_id: int) -> None:
        """
        Revoke a role from a user.

        Raises:
            NotFoundError: If the user does not hold the role
            InternalServerError: If the pair vanished between check and delete
        """
        if not await self.exists(user_id, role_id):
            raise NotFoundError("User does not hold this role")
        await self._delete_checked(self._delete_statement(*self._pair(user_id, role_id)))

    async def list_for_user(self, user_id: UUID) -> list[UserRoleResponse]:
        records = await self._all(col(UserRoleDB.user_id) == user_id, order_by=col(UserRoleDB.role_id))
        return [UserRoleResponse.model_validate(r) for r in records]

    async def list_user_ids_for_role(self, role_id: int) -> list[UUID]:
        records = await self._all(col(UserRoleDB.role_id) == role_id)
        return [r.user_id for r in records]
