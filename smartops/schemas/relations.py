"""Projections of the association records; each echoes both keys."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserRoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    role_id: int
    assigned_at: datetime


class RolePermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_id: int
    permission_id: int


class UserHierarchyResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    reports_to: UUID


class StoreUserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    store_id: int
    user_id: UUID
