"""Permission payloads, projections and the capability vocabulary."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from smartops.configs.settings import MAX_ENTITY_NAME_LENGTH


class Capability(StrEnum):
    """Action a permission row may grant on its entity."""

    READ = "read"
    WRITE = "write"
    DELETE = "delete"
    UPDATE = "update"

    @property
    def column(self) -> str:
        """Name of the boolean flag backing this capability."""
        return f"can_{self.value}"


class PermissionCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_name: str = Field(
        ...,
        min_length=1,
        max_length=MAX_ENTITY_NAME_LENGTH,
        examples=["inventory"],
    )
    can_read: bool = False
    can_write: bool = False
    can_delete: bool = False
    can_update: bool = False


class PermissionUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    entity_name: str | None = Field(default=None, min_length=1, max_length=MAX_ENTITY_NAME_LENGTH)
    can_read: bool | None = None
    can_write: bool | None = None
    can_delete: bool | None = None
    can_update: bool | None = None


class PermissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    entity_name: str
    can_read: bool
    can_write: bool
    can_delete: bool
    can_update: bool

    def capabilities(self) -> frozenset[Capability]:
        return frozenset(c for c in Capability if getattr(self, c.column))
