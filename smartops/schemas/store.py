"""Store payloads and projections."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from smartops.configs.settings import MAX_STORE_NAME_LENGTH
from smartops.models import StoreDB

ADDRESS_FIELDS = ("country", "state", "city", "street", "zip")


class Address(BaseModel):
    model_config = ConfigDict(frozen=True)

    country: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    city: str = Field(..., min_length=1, max_length=100)
    street: str = Field(..., min_length=1, max_length=255)
    zip: str = Field(..., min_length=1, max_length=20)


class AddressUpdate(BaseModel):
    """Per-field address patch; omitted parts keep their stored value."""

    model_config = ConfigDict(frozen=True)

    country: str | None = Field(default=None, min_length=1, max_length=100)
    state: str | None = Field(default=None, min_length=1, max_length=100)
    city: str | None = Field(default=None, min_length=1, max_length=100)
    street: str | None = Field(default=None, min_length=1, max_length=255)
    zip: str | None = Field(default=None, min_length=1, max_length=20)


class StoreCreate(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner_id: UUID
    name: str = Field(..., min_length=1, max_length=MAX_STORE_NAME_LENGTH)
    address: Address


class StoreUpdate(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str | None = Field(default=None, min_length=1, max_length=MAX_STORE_NAME_LENGTH)
    address: AddressUpdate | None = None


class StoreResponse(BaseModel):
    id: int
    owner_id: UUID
    name: str
    address: Address
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_db(cls, store: StoreDB) -> "StoreResponse":
        return cls(
            id=store.id,
            owner_id=store.owner_id,
            name=store.name,
            address=Address(
                **{part: getattr(store, f"address_{part}") for part in ADDRESS_FIELDS},
            ),
            created_at=store.created_at,
            updated_at=store.updated_at,
        )
