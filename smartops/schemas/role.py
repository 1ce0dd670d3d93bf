from pydantic import BaseModel, ConfigDict, Field

from smartops.configs.settings import MAX_ROLE_NAME_LENGTH


class RoleCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH, examples=["manager"])


class RoleUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, min_length=1, max_length=MAX_ROLE_NAME_LENGTH)


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
