from smartops.schemas.auth import AuthSession
from smartops.schemas.permission import (
    Capability,
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
)
from smartops.schemas.relations import (
    RolePermissionResponse,
    StoreUserResponse,
    UserHierarchyResponse,
    UserRoleResponse,
)
from smartops.schemas.role import RoleCreate, RoleResponse, RoleUpdate
from smartops.schemas.store import Address, AddressUpdate, StoreCreate, StoreResponse, StoreUpdate
from smartops.schemas.user import UserCreate, UserResponse, UserUpdate

__all__ = [
    "Address",
    "AddressUpdate",
    "AuthSession",
    "Capability",
    "PermissionCreate",
    "PermissionResponse",
    "PermissionUpdate",
    "RoleCreate",
    "RolePermissionResponse",
    "RoleResponse",
    "RoleUpdate",
    "StoreCreate",
    "StoreResponse",
    "StoreUpdate",
    "StoreUserResponse",
    "UserCreate",
    "UserHierarchyResponse",
    "UserResponse",
    "UserRoleResponse",
    "UserUpdate",
]
