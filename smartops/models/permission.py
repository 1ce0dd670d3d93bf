"""Permission database model using SQLModel."""

from typing import cast

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class PermissionDB(SQLModel, table=True):
    """
    Capability flags over one named entity.

    Several rows may target the same entity as long as their flag sets
    differ; the authorization check ORs them together.
    """

    __tablename__ = cast("declared_attr[str]", "permissions")

    __table_args__ = (
        UniqueConstraint(
            "entity_name",
            "can_read",
            "can_write",
            "can_delete",
            "can_update",
            name="uq_permissions_entity_capabilities",
        ),
    )

    id: int | None = Field(default=None, primary_key=True, description="Permission ID")
    entity_name: str = Field(
        sa_column=Column(String(100), nullable=False, index=True),
        description="Name of the guarded entity (e.g. 'inventory')",
    )
    can_read: bool = Field(default=False, nullable=False)
    can_write: bool = Field(default=False, nullable=False)
    can_delete: bool = Field(default=False, nullable=False)
    can_update: bool = Field(default=False, nullable=False)
