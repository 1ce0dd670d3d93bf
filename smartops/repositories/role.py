"""Role repository for database operations."""

from sqlmodel import col

from smartops.errors import ConflictError, NotFoundError
from smartops.models import RoleDB, UserRoleDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.role import RoleCreate, RoleResponse, RoleUpdate


class RoleRepository(BaseRepository[RoleDB]):
    """Repository for Role database operations."""

    model = RoleDB
    entity = "Role"

    async def _name_taken(self, name: str, exclude_id: int | None = None) -> bool:
        conditions = [col(RoleDB.name) == name]
        if exclude_id is not None:
            conditions.append(col(RoleDB.id) != exclude_id)
        return await self._exists(*conditions)

    async def _get_record(self, role_id: int) -> RoleDB:
        record = await self._first(col(RoleDB.id) == role_id)
        if record is None:
            raise NotFoundError(f"Role with ID {role_id} not found")
        return record

    async def create(self, role: RoleCreate) -> RoleResponse:
        """
        Create a new role.

        Raises:
            ConflictError: If a role with this name already exists
        """
        if await self._name_taken(role.name):
            raise ConflictError(f"Role '{role.name}' already exists")
        db_role = await self._add_and_refresh(RoleDB(name=role.name))
        return RoleResponse.model_validate(db_role)

    async def get_by_id(self, role_id: int) -> RoleResponse:
        return RoleResponse.model_validate(await self._get_record(role_id))

    async def get_by_name(self, name: str) -> RoleResponse | None:
        record = await self._first(col(RoleDB.name) == name)
        return RoleResponse.model_validate(record) if record else None

    async def get_all(self) -> list[RoleResponse]:
        roles = await self._all(order_by=col(RoleDB.id))
        return [RoleResponse.model_validate(role) for role in roles]

    async def exists(self, role_id: int) -> bool:
        return await self._exists(col(RoleDB.id) == role_id)

    async def update(self, role_id: int, role_update: RoleUpdate) -> RoleResponse:
        """
        Rename a role; a ``None`` name keeps the stored one.

        Raises:
            NotFoundError: If the role does not exist
            ConflictError: If another role already has the new name
        """
        db_role = await self._get_record(role_id)
        if role_update.name is not None and role_update.name != db_role.name:
            if await self._name_taken(role_update.name, exclude_id=role_id):
                raise ConflictError(f"Role '{role_update.name}' already exists")
            db_role.name = role_update.name
            db_role = await self._add_and_refresh(db_role)
        return RoleResponse.model_validate(db_role)

    async def delete(self, role_id: int) -> None:
        if not await self.exists(role_id):
            raise NotFoundError(f"Role with ID {role_id} not found")
        await self._delete_checked(self._delete_statement(col(RoleDB.id) == role_id))

    async def is_assigned(self, role_id: int) -> bool:
        """Whether any user currently holds the role."""
        return await self._exists(col(UserRoleDB.role_id) == role_id, model=UserRoleDB)
