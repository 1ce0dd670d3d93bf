"""Store repository for database operations."""

from uuid import UUID

from sqlmodel import col

from smartops.errors import NotFoundError
from smartops.models import StoreDB, UserDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.store import ADDRESS_FIELDS, StoreCreate, StoreResponse, StoreUpdate
from smartops.utils.helpers import utcnow


class StoreRepository(BaseRepository[StoreDB]):
    """Repository for Store database operations."""

    model = StoreDB
    entity = "Store"

    async def _get_record(self, store_id: int) -> StoreDB:
        record = await self._first(col(StoreDB.id) == store_id)
        if record is None:
            raise NotFoundError(f"Store with ID {store_id} not found")
        return record

    async def create(self, store: StoreCreate) -> StoreResponse:
        """
        Register a store.

        Raises:
            NotFoundError: If the owner does not exist
        """
        if not await self._exists(col(UserDB.id) == store.owner_id, model=UserDB):
            raise NotFoundError(f"User with ID {store.owner_id} not found")

        db_store = StoreDB(
            owner_id=store.owner_id,
            name=store.name,
            **{f"address_{part}": getattr(store.address, part) for part in ADDRESS_FIELDS},
        )
        db_store = await self._add_and_refresh(db_store)
        return StoreResponse.from_db(db_store)

    async def get_by_id(self, store_id: int) -> StoreResponse:
        return StoreResponse.from_db(await self._get_record(store_id))

    async def get_all(self) -> list[StoreResponse]:
        stores = await self._all(order_by=col(StoreDB.id))
        return [StoreResponse.from_db(store) for store in stores]

    async def list_owned_by(self, owner_id: UUID) -> list[StoreResponse]:
        stores = await self._all(col(StoreDB.owner_id) == owner_id, order_by=col(StoreDB.id))
        return [StoreResponse.from_db(store) for store in stores]

    async def exists(self, store_id: int) -> bool:
        return await self._exists(col(StoreDB.id) == store_id)

    async def update(self, store_id: int, store_update: StoreUpdate) -> StoreResponse:
        """
        Coalesce-on-null update; address parts are patched individually.

        Raises:
            NotFoundError: If the store does not exist
        """
        db_store = await self._get_record(store_id)

        if store_update.name is not None:
            db_store.name = store_update.name
        if store_update.address is not None:
            for part, value in store_update.address.model_dump(exclude_none=True).items():
                setattr(db_store, f"address_{part}", value)
        db_store.updated_at = utcnow()

        db_store = await self._add_and_refresh(db_store)
        return StoreResponse.from_db(db_store)

    async def delete(self, store_id: int) -> None:
        if not await self.exists(store_id):
            raise NotFoundError(f"Store with ID {store_id} not found")
        await self._delete_checked(self._delete_statement(col(StoreDB.id) == store_id))
