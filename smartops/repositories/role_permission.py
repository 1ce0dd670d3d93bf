"""Repository for role-permission grants."""

from sqlmodel import col

from smartops.errors import ConflictError, NotFoundError
from smartops.models import PermissionDB, RoleDB, RolePermissionDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.relations import RolePermissionResponse


class RolePermissionRepository(BaseRepository[RolePermissionDB]):
    """Repository for the ``role_permissions`` association."""

    model = RolePermissionDB
    entity = "Role permission"

    @staticmethod
    def _pair(role_id: int, permission_id: int) -> tuple:
        return (
            col(RolePermissionDB.role_id) == role_id,
            col(RolePermissionDB.permission_id) == permission_id,
        )

    async def exists(self, role_id: int, permission_id: int) -> bool:
        return await self._exists(*self._pair(role_id, permission_id))

    async def add(self, role_id: int, permission_id: int) -> RolePermissionResponse:
        """
        Grant a permission to a role.

        Raises:
            NotFoundError: If the role or the permission does not exist
            ConflictError: If the role already has the permission
        """
        if not await self._exists(col(RoleDB.id) == role_id, model=RoleDB):
            raise NotFoundError(f"Role with ID {role_id} not found")
        if not await self._exists(col(PermissionDB.id) == permission_id, model=PermissionDB):
            raise NotFoundError(f"Permission with ID {permission_id} not found")
        if await self.exists(role_id, permission_id):
            raise ConflictError("Role already has this permission")

        record = await self._add_and_refresh(
            RolePermissionDB(role_id=role_id, permission_id=permission_id),
        )
        return RolePermissionResponse.model_validate(record)

    async def remove(self, role_id: int, permission_id: int) -> None:
        if not await self.exists(role_id, permission_id):
            raise NotFoundError("Role does not have this permission")
        await self._delete_checked(self._delete_statement(*self._pair(role_id, permission_id)))

    async def list_for_role(self, role_id: int) -> list[RolePermissionResponse]:
        records = await self._all(
            col(RolePermissionDB.role_id) == role_id,
            order_by=col(RolePermissionDB.permission_id),
        )
        return [RolePermissionResponse.model_validate(r) for r in records]

    async def list_role_ids_for_permission(self, permission_id: int) -> list[int]:
        records = await self._all(col(RolePermissionDB.permission_id) == permission_id)
        return [r.role_id for r in records]
