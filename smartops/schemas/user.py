"""
User payloads and projections.

Request payloads arrive already deserialized from the transport layer.
Projections never carry the credential.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, SecretStr, field_validator

from smartops.configs.settings import (
    MAX_USERNAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    MIN_USERNAME_LENGTH,
)


def _normalize_username(v: str) -> str:
    v = v.strip()
    if len(v) < MIN_USERNAME_LENGTH:
        mssg = f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        raise ValueError(mssg)
    return v


class UserCreate(BaseModel):
    """User registration payload."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    username: str = Field(
        ...,
        min_length=MIN_USERNAME_LENGTH,
        max_length=MAX_USERNAME_LENGTH,
        description="Username",
        examples=["jdoe"],
    )
    email: EmailStr = Field(..., description="Email address", examples=["jdoe@example.com"])
    password: SecretStr = Field(
        ...,
        min_length=MIN_PASSWORD_LENGTH,
        description="Password",
        examples=["Password123"],
    )

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return _normalize_username(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()


class UserUpdate(BaseModel):
    """
    Partial user update. ``None`` leaves the stored value unchanged.

    ``is_active`` is parsed so the profile-update path can refuse it; the
    flag only moves through deactivation and reactivation.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    username: str | None = Field(
        default=None,
        min_length=MIN_USERNAME_LENGTH,
        max_length=MAX_USERNAME_LENGTH,
    )
    email: EmailStr | None = None
    password: SecretStr | None = Field(default=None, min_length=MIN_PASSWORD_LENGTH)
    is_active: bool | None = None

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str | None) -> str | None:
        return _normalize_username(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str | None) -> str | None:
        return v.lower() if v else v


class UserResponse(BaseModel):
    """User projection returned to callers."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    username: str
    email: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
