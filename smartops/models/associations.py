"""Composite-key association tables joining the aggregates."""

from datetime import datetime
from typing import cast
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel

from smartops.utils.helpers import utcnow


class UserRoleDB(SQLModel, table=True):
    """A role held by a user."""

    __tablename__ = cast("declared_attr[str]", "user_roles")

    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True)
    role_id: int = Field(foreign_key="roles.id", ondelete="CASCADE", primary_key=True, index=True)
    assigned_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="When the role was assigned",
    )


class RolePermissionDB(SQLModel, table=True):
    """A permission granted to a role."""

    __tablename__ = cast("declared_attr[str]", "role_permissions")

    role_id: int = Field(foreign_key="roles.id", ondelete="CASCADE", primary_key=True)
    permission_id: int = Field(
        foreign_key="permissions.id",
        ondelete="CASCADE",
        primary_key=True,
        index=True,
    )


class UserHierarchyDB(SQLModel, table=True):
    """
    Reporting edge: ``user_id`` reports to ``reports_to``.

    ``user_id`` is the primary key, so every user has at most one manager.
    """

    __tablename__ = cast("declared_attr[str]", "user_hierarchy")

    __table_args__ = (
        CheckConstraint("user_id <> reports_to", name="ck_user_hierarchy_not_self"),
    )

    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True)
    reports_to: UUID = Field(
        foreign_key="users.id",
        ondelete="CASCADE",
        nullable=False,
        index=True,
    )


class StoreUserDB(SQLModel, table=True):
    """A user granted access to a store."""

    __tablename__ = cast("declared_attr[str]", "store_users")

    store_id: int = Field(foreign_key="stores.id", ondelete="CASCADE", primary_key=True)
    user_id: UUID = Field(foreign_key="users.id", ondelete="CASCADE", primary_key=True, index=True)
