"""Store database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID

from sqlalchemy import DateTime
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from smartops.utils.helpers import utcnow


class StoreDB(SQLModel, table=True):
    """
    Retail store owned by a user.

    The postal address is flattened into ``address_*`` columns.
    """

    __tablename__ = cast("declared_attr[str]", "stores")

    id: int | None = Field(default=None, primary_key=True, description="Store ID")
    owner_id: UUID = Field(
        foreign_key="users.id",
        ondelete="RESTRICT",
        nullable=False,
        index=True,
        description="Owner (foreign key to users.id)",
    )
    name: str = Field(sa_column=Column(String(200), nullable=False), description="Store name")

    address_country: str = Field(sa_column=Column(String(100), nullable=False))
    address_state: str = Field(sa_column=Column(String(100), nullable=False))
    address_city: str = Field(sa_column=Column(String(100), nullable=False))
    address_street: str = Field(sa_column=Column(String(255), nullable=False))
    address_zip: str = Field(sa_column=Column(String(20), nullable=False))

    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False),
        description="Last update timestamp",
    )
