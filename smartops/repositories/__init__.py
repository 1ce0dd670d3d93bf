"""Repository layer for database operations."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from smartops.repositories.permission import PermissionRepository
from smartops.repositories.protocols import (
    PermissionRepositoryProtocol,
    RolePermissionRepositoryProtocol,
    RoleRepositoryProtocol,
    StoreRepositoryProtocol,
    StoreUserRepositoryProtocol,
    UserHierarchyRepositoryProtocol,
    UserRepositoryProtocol,
    UserRoleRepositoryProtocol,
)
from smartops.repositories.role import RoleRepository
from smartops.repositories.role_permission import RolePermissionRepository
from smartops.repositories.store import StoreRepository
from smartops.repositories.store_user import StoreUserRepository
from smartops.repositories.user import UserRepository
from smartops.repositories.user_hierarchy import UserHierarchyRepository
from smartops.repositories.user_role import UserRoleRepository


@dataclass(frozen=True, slots=True)
class Repositories:
    """Every repository a workflow needs, bound to one session."""

    users: UserRepositoryProtocol
    roles: RoleRepositoryProtocol
    permissions: PermissionRepositoryProtocol
    stores: StoreRepositoryProtocol
    user_roles: UserRoleRepositoryProtocol
    role_permissions: RolePermissionRepositoryProtocol
    store_users: StoreUserRepositoryProtocol
    hierarchy: UserHierarchyRepositoryProtocol
    session: AsyncSession

    @classmethod
    def from_session(cls, session: AsyncSession) -> "Repositories":
        return cls(
            users=UserRepository(session),
            roles=RoleRepository(session),
            permissions=PermissionRepository(session),
            stores=StoreRepository(session),
            user_roles=UserRoleRepository(session),
            role_permissions=RolePermissionRepository(session),
            store_users=StoreUserRepository(session),
            hierarchy=UserHierarchyRepository(session),
            session=session,
        )


__all__ = [
    "PermissionRepository",
    "PermissionRepositoryProtocol",
    "Repositories",
    "RolePermissionRepository",
    "RolePermissionRepositoryProtocol",
    "RoleRepository",
    "RoleRepositoryProtocol",
    "StoreRepository",
    "StoreRepositoryProtocol",
    "StoreUserRepository",
    "StoreUserRepositoryProtocol",
    "UserHierarchyRepository",
    "UserHierarchyRepositoryProtocol",
    "UserRepository",
    "UserRepositoryProtocol",
    "UserRoleRepository",
    "UserRoleRepositoryProtocol",
]
