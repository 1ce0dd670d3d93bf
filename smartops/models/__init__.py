"""Database models for the application."""

from smartops.models.associations import (
    RolePermissionDB,
    StoreUserDB,
    UserHierarchyDB,
    UserRoleDB,
)
from smartops.models.permission import PermissionDB
from smartops.models.role import RoleDB
from smartops.models.store import StoreDB
from smartops.models.user import UserDB

__all__ = [
    "PermissionDB",
    "RoleDB",
    "RolePermissionDB",
    "StoreDB",
    "StoreUserDB",
    "UserDB",
    "UserHierarchyDB",
    "UserRoleDB",
]
