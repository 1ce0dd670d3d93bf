"""User database model using SQLModel."""

from datetime import datetime
from typing import cast
from uuid import UUID, uuid4

from pydantic import ConfigDict
from sqlalchemy import DateTime, Index, column, func
from sqlalchemy.orm import declared_attr
from sqlmodel import Column, Field, SQLModel, String

from smartops.utils.helpers import utcnow


class UserDB(SQLModel, table=True):
    """
    User database model.

    Users are never hard-deleted by the access workflows; ``is_active``
    carries logical deletion so role, store and hierarchy history survives.
    """

    __tablename__ = cast("declared_attr[str]", "users")
    __table_args__ = (
        # Usernames compare case-insensitively
        Index("ix_users_username_lower", func.lower(column("username")), unique=True),
    )

    id: UUID = Field(
        default_factory=uuid4,
        primary_key=True,
        nullable=False,
        description="User ID",
    )
    username: str = Field(
        sa_column=Column(String(50), unique=True, nullable=False, index=True),
        description="Username (unique, compared case-insensitively)",
    )
    email: str = Field(
        sa_column=Column(String(255), unique=True, nullable=False, index=True),
        description="Email address (unique, stored lower-cased)",
    )
    password_hash: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Credential digest produced by the hashing collaborator",
    )
    is_active: bool = Field(
        default=True,
        nullable=False,
        description="Whether the user is active",
    )

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

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "username": "jdoe",
                "email": "jdoe@example.com",
                "is_active": True,
            },
        },
    )
