"""User repository for database operations."""

from collections.abc import Collection
from uuid import UUID

from sqlalchemy import func
from sqlmodel import col

from smartops.errors import ConflictError, NotFoundError
from smartops.models import StoreDB, UserDB
from smartops.repositories.base import BaseRepository
from smartops.schemas.user import UserCreate, UserResponse, UserUpdate
from smartops.utils.helpers import utcnow


class UserRepository(BaseRepository[UserDB]):
    """
    Repository for User database operations.

    Usernames are unique case-insensitively and emails are stored
    lower-cased, so both uniqueness checks compare on ``lower()``.
    Projections returned from here never include the password hash; only
    :meth:`get_by_username` hands out the full record, for authentication.
    """

    model = UserDB
    entity = "User"

    async def _username_taken(self, username: str, exclude_id: UUID | None = None) -> bool:
        conditions = [func.lower(col(UserDB.username)) == username.lower()]
        if exclude_id is not None:
            conditions.append(col(UserDB.id) != exclude_id)
        return await self._exists(*conditions)

    async def _email_taken(self, email: str, exclude_id: UUID | None = None) -> bool:
        conditions = [func.lower(col(UserDB.email)) == email.lower()]
        if exclude_id is not None:
            conditions.append(col(UserDB.id) != exclude_id)
        return await self._exists(*conditions)

    async def create(self, user: UserCreate, password_hash: str) -> UserResponse:
        """
        Create a new user in the database.

        Args:
            user: Registration payload
            password_hash: Digest produced by the credential hasher

        Returns:
            UserResponse: Created user projection

        Raises:
            ConflictError: If username or email already exists
        """
        if await self._email_taken(user.email):
            raise ConflictError(f"Email '{user.email}' already exists")
        if await self._username_taken(user.username):
            raise ConflictError(f"Username '{user.username}' already exists")

        db_user = UserDB(
            username=user.username,
            email=user.email.lower(),
            password_hash=password_hash,
        )
        db_user = await self._add_and_refresh(db_user)
        return UserResponse.model_validate(db_user)

    async def get_record(self, user_id: UUID) -> UserDB:
        record = await self._first(col(UserDB.id) == user_id)
        if record is None:
            raise NotFoundError(f"User with ID {user_id} not found")
        return record

    async def get_by_id(self, user_id: UUID) -> UserResponse:
        """
        Get user by ID.

        Raises:
            NotFoundError: If no user has this ID
        """
        return UserResponse.model_validate(await self.get_record(user_id))

    async def get_by_username(self, username: str) -> UserDB | None:
        """Full record (hash included) for the authentication path."""
        return await self._first(func.lower(col(UserDB.username)) == username.lower())

    async def get_all(self) -> list[UserResponse]:
        users = await self._all(order_by=col(UserDB.created_at))
        return [UserResponse.model_validate(user) for user in users]

    async def get_many(self, user_ids: Collection[UUID]) -> list[UserResponse]:
        if not user_ids:
            return []
        users = await self._all(col(UserDB.id).in_(list(user_ids)), order_by=col(UserDB.username))
        return [UserResponse.model_validate(user) for user in users]

    async def exists(self, user_id: UUID) -> bool:
        return await self._exists(col(UserDB.id) == user_id)

    async def update(
        self,
        user_id: UUID,
        user_update: UserUpdate,
        password_hash: str | None = None,
    ) -> UserResponse:
        """
        Coalesce-on-null update: only supplied fields change.

        Args:
            user_id: User UUID
            user_update: Partial payload; its plaintext password is ignored
            password_hash: Replacement digest, when the password changes

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the new username or email belongs to another user
        """
        db_user = await self.get_record(user_id)

        if user_update.username is not None and await self._username_taken(
            user_update.username,
            exclude_id=user_id,
        ):
            raise ConflictError(f"Username '{user_update.username}' already exists")
        if user_update.email is not None and await self._email_taken(
            user_update.email,
            exclude_id=user_id,
        ):
            raise ConflictError(f"Email '{user_update.email}' already exists")

        if user_update.username is not None:
            db_user.username = user_update.username
        if user_update.email is not None:
            db_user.email = user_update.email.lower()
        if password_hash is not None:
            db_user.password_hash = password_hash
        db_user.updated_at = utcnow()

        db_user = await self._add_and_refresh(db_user)
        return UserResponse.model_validate(db_user)

    async def set_active(self, user_id: UUID, *, is_active: bool) -> UserResponse:
        db_user = await self.get_record(user_id)
        if db_user.is_active != is_active:
            db_user.is_active = is_active
            db_user.updated_at = utcnow()
            db_user = await self._add_and_refresh(db_user)
        return UserResponse.model_validate(db_user)

    async def delete(self, user_id: UUID) -> None:
        """
        Hard-delete a user.

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If the user still owns stores
            InternalServerError: If the row vanished between check and delete
        """
        if not await self.exists(user_id):
            raise NotFoundError(f"User with ID {user_id} not found")
        if await self._exists(col(StoreDB.owner_id) == user_id, model=StoreDB):
            raise ConflictError("User still owns stores")
        await self._delete_checked(self._delete_statement(col(UserDB.id) == user_id))
