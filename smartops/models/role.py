"""Role database model using SQLModel."""

from typing import cast

from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String


class RoleDB(SQLModel, table=True):
    """Named bundle of permissions, assigned to users through ``user_roles``."""

    __tablename__ = cast("declared_attr[str]", "roles")

    id: int | None = Field(default=None, primary_key=True, description="Role ID")
    name: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True),
        description="Role name (unique)",
    )
