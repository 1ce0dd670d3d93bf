"""Protocol definitions for repository implementations.

Services depend on these capability contracts rather than on the concrete
SQL-backed repositories, so a workflow can be exercised against any object
with the same shape.
"""

from collections.abc import Collection
from typing import Protocol, runtime_checkable
from uuid import UUID

from smartops.models import UserDB
from smartops.schemas import (
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    RoleCreate,
    RolePermissionResponse,
    RoleResponse,
    RoleUpdate,
    StoreCreate,
    StoreResponse,
    StoreUpdate,
    StoreUserResponse,
    UserCreate,
    UserHierarchyResponse,
    UserResponse,
    UserRoleResponse,
    UserUpdate,
)


@runtime_checkable
class UserRepositoryProtocol(Protocol):
    """Persistence contract for users."""

    async def create(self, user: UserCreate, password_hash: str) -> UserResponse: ...

    async def get_by_id(self, user_id: UUID) -> UserResponse: ...

    async def get_by_username(self, username: str) -> UserDB | None:
        """Full record including the credential hash."""
        ...

    async def get_all(self) -> list[UserResponse]: ...

    async def get_many(self, user_ids: Collection[UUID]) -> list[UserResponse]: ...

    async def exists(self, user_id: UUID) -> bool: ...

    async def update(
        self,
        user_id: UUID,
        user_update: UserUpdate,
        password_hash: str | None = None,
    ) -> UserResponse: ...

    async def set_active(self, user_id: UUID, *, is_active: bool) -> UserResponse: ...

    async def delete(self, user_id: UUID) -> None: ...


@runtime_checkable
class RoleRepositoryProtocol(Protocol):
    """Persistence contract for roles."""

    async def create(self, role: RoleCreate) -> RoleResponse: ...

    async def get_by_id(self, role_id: int) -> RoleResponse: ...

    async def get_by_name(self, name: str) -> RoleResponse | None: ...

    async def get_all(self) -> list[RoleResponse]: ...

    async def exists(self, role_id: int) -> bool: ...

    async def is_assigned(self, role_id: int) -> bool: ...

    async def update(self, role_id: int, role_update: RoleUpdate) -> RoleResponse: ...

    async def delete(self, role_id: int) -> None: ...


@runtime_checkable
class PermissionRepositoryProtocol(Protocol):
    """Persistence contract for permissions and the authorization join."""

    async def create(self, permission: PermissionCreate) -> PermissionResponse: ...

    async def get_by_id(self, permission_id: int) -> PermissionResponse: ...

    async def get_all(self) -> list[PermissionResponse]: ...

    async def exists(self, permission_id: int) -> bool: ...

    async def update(
        self,
        permission_id: int,
        permission_update: PermissionUpdate,
    ) -> PermissionResponse: ...

    async def delete(self, permission_id: int) -> None: ...

    async def list_for_user(self, user_id: UUID, entity_name: str) -> list[PermissionResponse]: ...


@runtime_checkable
class StoreRepositoryProtocol(Protocol):
    """Persistence contract for stores."""

    async def create(self, store: StoreCreate) -> StoreResponse: ...

    async def get_by_id(self, store_id: int) -> StoreResponse: ...

    async def get_all(self) -> list[StoreResponse]: ...

    async def list_owned_by(self, owner_id: UUID) -> list[StoreResponse]: ...

    async def exists(self, store_id: int) -> bool: ...

    async def update(self, store_id: int, store_update: StoreUpdate) -> StoreResponse: ...

    async def delete(self, store_id: int) -> None: ...


@runtime_checkable
class UserRoleRepositoryProtocol(Protocol):
    """Persistence contract for user-role assignments."""

    async def add(self, user_id: UUID, role_id: int) -> UserRoleResponse: ...

    async def remove(self, user_id: UUID, role_id: int) -> None: ...

    async def replace(self, user_id: UUID, old_role_id: int, new_role_id: int) -> UserRoleResponse: ...

    async def exists(self, user_id: UUID, role_id: int) -> bool: ...

    async def list_for_user(self, user_id: UUID) -> list[UserRoleResponse]: ...

    async def list_user_ids_for_role(self, role_id: int) -> list[UUID]: ...


@runtime_checkable
class RolePermissionRepositoryProtocol(Protocol):
    """Persistence contract for role-permission grants."""

    async def add(self, role_id: int, permission_id: int) -> RolePermissionResponse: ...

    async def remove(self, role_id: int, permission_id: int) -> None: ...

    async def exists(self, role_id: int, permission_id: int) -> bool: ...

    async def list_for_role(self, role_id: int) -> list[RolePermissionResponse]: ...

    async def list_role_ids_for_permission(self, permission_id: int) -> list[int]: ...


@runtime_checkable
class StoreUserRepositoryProtocol(Protocol):
    """Persistence contract for store access grants."""

    async def add(self, store_id: int, user_id: UUID) -> StoreUserResponse: ...

    async def remove(self, store_id: int, user_id: UUID) -> None: ...

    async def exists(self, store_id: int, user_id: UUID) -> bool: ...

    async def list_for_store(self, store_id: int) -> list[StoreUserResponse]: ...

    async def list_for_user(self, user_id: UUID) -> list[StoreUserResponse]: ...


@runtime_checkable
class UserHierarchyRepositoryProtocol(Protocol):
    """Persistence contract for reporting lines."""

    async def get_manager_id(self, user_id: UUID) -> UUID | None: ...

    async def set_manager(self, user_id: UUID, reports_to: UUID) -> UserHierarchyResponse: ...

    async def remove(self, user_id: UUID) -> None: ...

    async def list_direct_reports(self, manager_ids: Collection[UUID]) -> list[UUID]: ...
