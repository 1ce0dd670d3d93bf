"""Repository for store access grants."""

from uuid import UUID

from sqlmodel import col

from smartops.errors import ConflictError, NotFoundError
from smartops.models import StoreDB, StoreUserDB, UserDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.relations import StoreUserResponse


class StoreUserRepository(BaseRepository[StoreUserDB]):
    """Repository for the ``store_users`` association."""

    model = StoreUserDB
    entity = "Store user"

    @staticmethod
    def _pair(store_id: int, user_id: UUID) -> tuple:
        return (col(StoreUserDB.store_id) == store_id, col(StoreUserDB.user_id) == user_id)

    async def exists(self, store_id: int, user_id: UUID) -> bool:
        return await self._exists(*self._pair(store_id, user_id))

    async def add(self, store_id: int, user_id: UUID) -> StoreUserResponse:
        """
        Grant a user access to a store.

        Raises:
            NotFoundError: If the store or the user does not exist
            ConflictError: If the user already has access
        """
        if not await self._exists(col(StoreDB.id) == store_id, model=StoreDB):
            raise NotFoundError(f"Store with ID {store_id} not found")
        if not await self._exists(col(UserDB.id) == user_id, model=UserDB):
            raise NotFoundError(f"User with ID {user_id} not found")
        if await self.exists(store_id, user_id):
            raise ConflictError("User already has access to this store")

        record = await self._add_and_refresh(StoreUserDB(store_id=store_id, user_id=user_id))
        return StoreUserResponse.model_validate(record)

    async def remove(self, store_id: int, user_id: UUID) -> None:
        if not await self.exists(store_id, user_id):
            raise NotFoundError("User has no access to this store")
        await self._delete_checked(self._delete_statement(*self._pair(store_id, user_id)))

    async def list_for_store(self, store_id: int) -> list[StoreUserResponse]:
        records = await self._all(col(StoreUserDB.store_id) == store_id)
        return [StoreUserResponse.model_validate(r) for r in records]

    async def list_for_user(self, user_id: UUID) -> list[StoreUserResponse]:
        records = await self._all(
            col(StoreUserDB.user_id) == user_id,
            order_by=col(StoreUserDB.store_id),
        )
        return [StoreUserResponse.model_validate(r) for r in records]
