"""Permission repository for database operations."""

from uuid import UUID

from sqlalchemy import select
from sqlmodel import col

from smartops.errors import ConflictError, NotFoundError
from smartops.models import PermissionDB, RolePermissionDB, UserRoleDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.permission import PermissionCreate, PermissionResponse, PermissionUpdate

CAPABILITY_COLUMNS = ("can_read", "can_write", "can_delete", "can_update")


class PermissionRepository(BaseRepository[PermissionDB]):
    """
    Repository for Permission database operations.

    A permission is unique on its entity name together with its full set
    of capability flags.
    """

    model = PermissionDB
    entity = "Permission"

    async def _combination_taken(
        self,
        entity_name: str,
        flags: dict[str, bool],
        exclude_id: int | None = None,
    ) -> bool:
        conditions = [col(PermissionDB.entity_name) == entity_name]
        conditions.extend(getattr(PermissionDB, name) == flags[name] for name in CAPABILITY_COLUMNS)
        if exclude_id is not None:
            conditions.append(col(PermissionDB.id) != exclude_id)
        return await self._exists(*conditions)

    async def _get_record(self, permission_id: int) -> PermissionDB:
        record = await self._first(col(PermissionDB.id) == permission_id)
        if record is None:
            raise NotFoundError(f"Permission with ID {permission_id} not found")
        return record

    async def create(self, permission: PermissionCreate) -> PermissionResponse:
        """
        Raises:
            ConflictError: If the same entity/capability combination exists
        """
        data = permission.model_dump()
        if await self._combination_taken(permission.entity_name, data):
            raise ConflictError(f"Permission for '{permission.entity_name}' already exists")
        db_permission = await self._add_and_refresh(PermissionDB.model_validate(data))
        return PermissionResponse.model_validate(db_permission)

    async def get_by_id(self, permission_id: int) -> PermissionResponse:
        return PermissionResponse.model_validate(await self._get_record(permission_id))

    async def get_all(self) -> list[PermissionResponse]:
        permissions = await self._all(order_by=col(PermissionDB.id))
        return [PermissionResponse.model_validate(p) for p in permissions]

    async def exists(self, permission_id: int) -> bool:
        return await self._exists(col(PermissionDB.id) == permission_id)

    async def update(
        self,
        permission_id: int,
        permission_update: PermissionUpdate,
    ) -> PermissionResponse:
        """
        Coalesce-on-null update of entity name and capability flags.

        Raises:
            NotFoundError: If the permission does not exist
            ConflictError: If the resulting combination exists on another row
        """
        db_permission = await self._get_record(permission_id)
        changes = permission_update.model_dump(exclude_none=True)
        if not changes:
            return PermissionResponse.model_validate(db_permission)

        merged = {name: getattr(db_permission, name) for name in CAPABILITY_COLUMNS}
        merged["entity_name"] = db_permission.entity_name
        merged.update(changes)
        if await self._combination_taken(merged["entity_name"], merged, exclude_id=permission_id):
            raise ConflictError(f"Permission for '{merged['entity_name']}' already exists")

        for key, value in changes.items():
            setattr(db_permission, key, value)
        db_permission = await self._add_and_refresh(db_permission)
        return PermissionResponse.model_validate(db_permission)

    async def delete(self, permission_id: int) -> None:
        if not await self.exists(permission_id):
            raise NotFoundError(f"Permission with ID {permission_id} not found")
        await self._delete_checked(self._delete_statement(col(PermissionDB.id) == permission_id))

    async def list_for_user(self, user_id: UUID, entity_name: str) -> list[PermissionResponse]:
        """
        Permissions reaching a user for one entity.

        Two hops: user_roles -> role_permissions -> permissions.
        """
        statement = (
            select(PermissionDB)
            .join(RolePermissionDB, col(RolePermissionDB.permission_id) == col(PermissionDB.id))
            .join(UserRoleDB, col(UserRoleDB.role_id) == col(RolePermissionDB.role_id))
            .where(
                col(UserRoleDB.user_id) == user_id,
                col(PermissionDB.entity_name) == entity_name,
            )
            .distinct()
        )
        result = await self._execute(statement)
        return [PermissionResponse.model_validate(p) for p in result.scalars().all()]
