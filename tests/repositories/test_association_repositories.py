# tests/repositories/test_association_repositories.py
"""Tests for user-role, role-permission, store-user and hierarchy repositories."""

from uuid import uuid4

import pytest

from smartops.errors import ConflictError, NotFoundError
from smartops.repositories import Repositories
from smartops.schemas import AddressUpdate, PermissionCreate, RoleCreate, StoreCreate, StoreUpdate
from smartops.schemas.store import Address

ADDRESS = Address(country="ID", state="Bali", city="Denpasar", street="Jl. Raya 1", zip="80111")


class TestUserRoleRepository:
    async def test_assign_twice_conflicts_then_revoke_and_reassign(
        self,
        repos: Repositories,
        make_user,
    ) -> None:
        user = await make_user()
        role = await repos.roles.create(RoleCreate(name="cashier"))

        assignment = await repos.user_roles.add(user.id, role.id)
        assert assignment.user_id == user.id
        assert assignment.role_id == role.id

        with pytest.raises(ConflictError):
            await repos.user_roles.add(user.id, role.id)

        await repos.user_roles.remove(user.id, role.id)
        assert not await repos.user_roles.exists(user.id, role.id)
        await repos.user_roles.add(user.id, role.id)
        assert await repos.user_roles.exists(user.id, role.id)

    async def test_add_requires_both_references(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        role = await repos.roles.create(RoleCreate(name="cashier"))
        with pytest.raises(NotFoundError):
            await repos.user_roles.add(uuid4(), role.id)
        with pytest.raises(NotFoundError):
            await repos.user_roles.add(user.id, 404)

    async def test_remove_missing_pair(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        with pytest.raises(NotFoundError):
            await repos.user_roles.remove(user.id, 1)

    async def test_replace(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        old = await repos.roles.create(RoleCreate(name="old"))
        new = await repos.roles.create(RoleCreate(name="new"))
        await repos.user_roles.add(user.id, old.id)

        swapped = await repos.user_roles.replace(user.id, old.id, new.id)

        assert swapped.role_id == new.id
        assert [a.role_id for a in await repos.user_roles.list_for_user(user.id)] == [new.id]

    async def test_replace_errors(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        a = await repos.roles.create(RoleCreate(name="a"))
        b = await repos.roles.create(RoleCreate(name="b"))
        await repos.user_roles.add(user.id, a.id)
        await repos.user_roles.add(user.id, b.id)

        with pytest.raises(NotFoundError):
            await repos.user_roles.replace(user.id, 999, a.id)
        with pytest.raises(NotFoundError):
            await repos.user_roles.replace(user.id, a.id, 999)
        with pytest.raises(ConflictError):
            await repos.user_roles.replace(user.id, a.id, b.id)

    async def test_list_user_ids_for_role(self, repos: Repositories, make_user) -> None:
        u1, u2 = await make_user(), await make_user()
        role = await repos.roles.create(RoleCreate(name="shared"))
        await repos.user_roles.add(u1.id, role.id)
        await repos.user_roles.add(u2.id, role.id)
        assert set(await repos.user_roles.list_user_ids_for_role(role.id)) == {u1.id, u2.id}

    async def test_deleting_role_cascades_assignments(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        role = await repos.roles.create(RoleCreate(name="short-lived"))
        await repos.user_roles.add(user.id, role.id)
        await repos.roles.delete(role.id)
        assert await repos.user_roles.list_for_user(user.id) == []


class TestRolePermissionRepository:
    async def test_grant_twice_conflicts(self, repos: Repositories) -> None:
        role = await repos.roles.create(RoleCreate(name="auditor"))
        perm = await repos.permissions.create(PermissionCreate(entity_name="ledger", can_read=True))
        grant = await repos.role_permissions.add(role.id, perm.id)
        assert (grant.role_id, grant.permission_id) == (role.id, perm.id)
        with pytest.raises(ConflictError):
            await repos.role_permissions.add(role.id, perm.id)

    async def test_grant_requires_references(self, repos: Repositories) -> None:
        role = await repos.roles.create(RoleCreate(name="auditor"))
        with pytest.raises(NotFoundError):
            await repos.role_permissions.add(role.id, 12345)
        with pytest.raises(NotFoundError):
            await repos.role_permissions.add(12345, 1)

    async def test_revoke_and_listing(self, repos: Repositories) -> None:
        role = await repos.roles.create(RoleCreate(name="auditor"))
        perm = await repos.permissions.create(PermissionCreate(entity_name="ledger", can_read=True))
        await repos.role_permissions.add(role.id, perm.id)
        assert await repos.role_permissions.list_role_ids_for_permission(perm.id) == [role.id]

        await repos.role_permissions.remove(role.id, perm.id)
        assert await repos.role_permissions.list_for_role(role.id) == []
        with pytest.raises(NotFoundError):
            await repos.role_permissions.remove(role.id, perm.id)


class TestStoreRepositories:
    async def test_store_crud(self, repos: Repositories, make_user) -> None:
        owner = await make_user()
        store = await repos.stores.create(StoreCreate(owner_id=owner.id, name="Kuta", address=ADDRESS))
        assert store.address.city == "Denpasar"

        updated = await repos.stores.update(
            store.id,
            StoreUpdate(address=AddressUpdate(city="Ubud")),
        )
        assert updated.name == "Kuta"
        assert updated.address.city == "Ubud"
        assert updated.address.street == "Jl. Raya 1"
        assert [s.id for s in await repos.stores.list_owned_by(owner.id)] == [store.id]

        await repos.stores.delete(store.id)
        with pytest.raises(NotFoundError):
            await repos.stores.get_by_id(store.id)

    async def test_store_owner_must_exist(self, repos: Repositories) -> None:
        with pytest.raises(NotFoundError):
            await repos.stores.create(StoreCreate(owner_id=uuid4(), name="Ghost", address=ADDRESS))

    async def test_store_access_pairs(self, repos: Repositories, make_user) -> None:
        owner, clerk = await make_user(), await make_user()
        store = await repos.stores.create(StoreCreate(owner_id=owner.id, name="Kuta", address=ADDRESS))

        await repos.store_users.add(store.id, clerk.id)
        with pytest.raises(ConflictError):
            await repos.store_users.add(store.id, clerk.id)
        with pytest.raises(NotFoundError):
            await repos.store_users.add(store.id, uuid4())
        with pytest.raises(NotFoundError):
            await repos.store_users.add(9999, clerk.id)

        assert [a.user_id for a in await repos.store_users.list_for_store(store.id)] == [clerk.id]
        assert [a.store_id for a in await repos.store_users.list_for_user(clerk.id)] == [store.id]

        await repos.store_users.remove(store.id, clerk.id)
        assert not await repos.store_users.exists(store.id, clerk.id)


class TestUserHierarchyRepository:
    async def test_set_manager_upserts(self, repos: Repositories, make_user) -> None:
        a, b, c = await make_user(), await make_user(), await make_user()

        edge = await repos.hierarchy.set_manager(a.id, b.id)
        assert (edge.user_id, edge.reports_to) == (a.id, b.id)

        moved = await repos.hierarchy.set_manager(a.id, c.id)
        assert moved.reports_to == c.id
        assert await repos.hierarchy.get_manager_id(a.id) == c.id
        assert await repos.hierarchy.list_direct_reports([b.id]) == []
        assert await repos.hierarchy.list_direct_reports([c.id]) == [a.id]

    async def test_set_manager_requires_users(self, repos: Repositories, make_user) -> None:
        a = await make_user()
        with pytest.raises(NotFoundError):
            await repos.hierarchy.set_manager(a.id, uuid4())

    async def test_remove(self, repos: Repositories, make_user) -> None:
        a, b = await make_user(), await make_user()
        with pytest.raises(NotFoundError):
            await repos.hierarchy.remove(a.id)
        await repos.hierarchy.set_manager(a.id, b.id)
        await repos.hierarchy.remove(a.id)
        assert await repos.hierarchy.get_manager_id(a.id) is None
