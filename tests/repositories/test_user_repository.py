# tests/repositories/test_user_repository.py
"""Tests for smartops/repositories/user.py module."""

from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from smartops.errors import ConflictError, NotFoundError
from smartops.models import UserDB
from smartops.repositories import Repositories, UserRepository
from smartops.schemas import StoreCreate, UserCreate, UserUpdate
from smartops.schemas.store import Address


def _payload(username: str = "jdoe", email: str = "jdoe@example.com") -> UserCreate:
    return UserCreate(username=username, email=email, password="Password123")


class TestCreate:
    async def test_create_then_get_matches_and_hides_credential(self, repos: Repositories) -> None:
        """Created projection round-trips through get_by_id without the hash."""
        created = await repos.users.create(_payload(), "hashed::secret")
        fetched = await repos.users.get_by_id(created.id)

        assert fetched.id == created.id
        assert fetched.username == "jdoe"
        assert fetched.email == "jdoe@example.com"
        assert fetched.is_active is True
        dumped = fetched.model_dump()
        assert "password_hash" not in dumped
        assert "password" not in dumped

    async def test_duplicate_username_case_insensitive(self, repos: Repositories) -> None:
        await repos.users.create(_payload("Alice", "alice@example.com"), "h")
        with pytest.raises(ConflictError):
            await repos.users.create(_payload("aLICE", "other@example.com"), "h")

    async def test_store_rejects_case_variant_usernames(self, session: AsyncSession) -> None:
        """The lower(username) index catches writers that skip the pre-check."""
        users = UserRepository(session)
        await users._add_and_refresh(UserDB(username="Alice", email="alice@example.com", password_hash="h"))
        with pytest.raises(ConflictError):
            await users._add_and_refresh(UserDB(username="alice", email="other@example.com", password_hash="h"))

    async def test_duplicate_email(self, repos: Repositories) -> None:
        await repos.users.create(_payload("alice", "alice@example.com"), "h")
        with pytest.raises(ConflictError):
            await repos.users.create(_payload("bob", "ALICE@example.com"), "h")

    async def test_email_stored_lower_cased(self, repos: Repositories) -> None:
        created = await repos.users.create(_payload("carol", "Carol@Example.COM"), "h")
        assert created.email == "carol@example.com"


class TestRead:
    async def test_get_unknown_raises_not_found(self, repos: Repositories) -> None:
        with pytest.raises(NotFoundError):
            await repos.users.get_by_id(uuid4())

    async def test_get_by_username_ignores_case(self, repos: Repositories, make_user) -> None:
        user = await make_user("Dave")
        record = await repos.users.get_by_username("dave")
        assert record is not None
        assert record.id == user.id
        assert record.password_hash == "hashed::Password123"

    async def test_get_by_username_missing(self, repos: Repositories) -> None:
        assert await repos.users.get_by_username("ghost") is None

    async def test_get_all_and_exists(self, repos: Repositories, make_user) -> None:
        first = await make_user()
        second = await make_user()
        ids = {u.id for u in await repos.users.get_all()}
        assert ids == {first.id, second.id}
        assert await repos.users.exists(first.id)
        assert not await repos.users.exists(uuid4())

    async def test_get_many_empty(self, repos: Repositories) -> None:
        assert await repos.users.get_many([]) == []


class TestUpdate:
    async def test_coalesce_changes_only_supplied_field(self, repos: Repositories, make_user) -> None:
        """Updating only the email leaves the username untouched."""
        user = await make_user("erin")
        updated = await repos.users.update(user.id, UserUpdate(email="new@example.com"))

        assert updated.email == "new@example.com"
        assert updated.username == "erin"
        fetched = await repos.users.get_by_id(user.id)
        assert fetched.username == "erin"
        assert fetched.email == "new@example.com"

    async def test_update_password_hash(self, repos: Repositories, make_user) -> None:
        user = await make_user("frank")
        await repos.users.update(user.id, UserUpdate(), password_hash="hashed::changed")
        record = await repos.users.get_by_username("frank")
        assert record is not None
        assert record.password_hash == "hashed::changed"

    async def test_update_unknown_raises_not_found(self, repos: Repositories) -> None:
        with pytest.raises(NotFoundError):
            await repos.users.update(uuid4(), UserUpdate(username="nobody"))

    async def test_update_to_taken_username_conflicts(self, repos: Repositories, make_user) -> None:
        await make_user("grace")
        heidi = await make_user("heidi")
        with pytest.raises(ConflictError):
            await repos.users.update(heidi.id, UserUpdate(username="GRACE"))

    async def test_update_to_padded_taken_username_conflicts(self, repos: Repositories, make_user) -> None:
        await make_user("alice")
        bob = await make_user("bob")
        with pytest.raises(ConflictError):
            await repos.users.update(bob.id, UserUpdate(username=" Alice "))

    async def test_update_strips_username(self, repos: Repositories, make_user) -> None:
        judy = await make_user("judy")
        updated = await repos.users.update(judy.id, UserUpdate(username="  judith "))
        assert updated.username == "judith"

    async def test_update_own_username_case_is_allowed(self, repos: Repositories, make_user) -> None:
        ivan = await make_user("ivan")
        updated = await repos.users.update(ivan.id, UserUpdate(username="Ivan"))
        assert updated.username == "Ivan"

    async def test_set_active_is_idempotent(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        first = await repos.users.set_active(user.id, is_active=False)
        second = await repos.users.set_active(user.id, is_active=False)
        assert first.is_active is False
        assert second.is_active is False


class TestDelete:
    async def test_delete_unknown_raises_not_found(self, repos: Repositories) -> None:
        with pytest.raises(NotFoundError):
            await repos.users.delete(uuid4())

    async def test_delete_succeeds_exactly_once(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        await repos.users.delete(user.id)
        with pytest.raises(NotFoundError):
            await repos.users.delete(user.id)
        with pytest.raises(NotFoundError):
            await repos.users.get_by_id(user.id)

    async def test_delete_store_owner_conflicts(self, repos: Repositories, make_user) -> None:
        owner = await make_user()
        address = Address(country="ID", state="Bali", city="Denpasar", street="Jl. 1", zip="80111")
        await repos.stores.create(StoreCreate(owner_id=owner.id, name="Main", address=address))
        with pytest.raises(ConflictError):
            await repos.users.delete(owner.id)
