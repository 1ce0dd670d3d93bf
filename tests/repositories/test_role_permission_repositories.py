# tests/repositories/test_role_permission_repositories.py
"""Tests for the role and permission repositories."""

from uuid import uuid4

import pytest

from smartops.errors import ConflictError, NotFoundError
from smartops.repositories import Repositories
from smartops.schemas import Capability, PermissionCreate, PermissionUpdate, RoleCreate, RoleUpdate


class TestRoleRepository:
    async def test_create_and_get(self, repos: Repositories) -> None:
        role = await repos.roles.create(RoleCreate(name="manager"))
        assert (await repos.roles.get_by_id(role.id)).name == "manager"
        found = await repos.roles.get_by_name("manager")
        assert found is not None
        assert found.id == role.id

    async def test_duplicate_name_conflicts(self, repos: Repositories) -> None:
        await repos.roles.create(RoleCreate(name="manager"))
        with pytest.raises(ConflictError):
            await repos.roles.create(RoleCreate(name="manager"))

    async def test_get_unknown(self, repos: Repositories) -> None:
        with pytest.raises(NotFoundError):
            await repos.roles.get_by_id(999)
        assert await repos.roles.get_by_name("missing") is None

    async def test_update_none_keeps_name(self, repos: Repositories) -> None:
        role = await repos.roles.create(RoleCreate(name="clerk"))
        assert (await repos.roles.update(role.id, RoleUpdate())).name == "clerk"

    async def test_update_to_taken_name_conflicts(self, repos: Repositories) -> None:
        await repos.roles.create(RoleCreate(name="clerk"))
        other = await repos.roles.create(RoleCreate(name="cashier"))
        with pytest.raises(ConflictError):
            await repos.roles.update(other.id, RoleUpdate(name="clerk"))

    async def test_list_ordered_by_id(self, repos: Repositories) -> None:
        a = await repos.roles.create(RoleCreate(name="b-role"))
        b = await repos.roles.create(RoleCreate(name="a-role"))
        assert [r.id for r in await repos.roles.get_all()] == [a.id, b.id]

    async def test_delete_once(self, repos: Repositories) -> None:
        role = await repos.roles.create(RoleCreate(name="temp"))
        await repos.roles.delete(role.id)
        with pytest.raises(NotFoundError):
            await repos.roles.delete(role.id)

    async def test_is_assigned(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        role = await repos.roles.create(RoleCreate(name="staff"))
        assert not await repos.roles.is_assigned(role.id)
        await repos.user_roles.add(user.id, role.id)
        assert await repos.roles.is_assigned(role.id)


class TestPermissionRepository:
    async def test_same_entity_different_flags_allowed(self, repos: Repositories) -> None:
        read = await repos.permissions.create(PermissionCreate(entity_name="inventory", can_read=True))
        write = await repos.permissions.create(PermissionCreate(entity_name="inventory", can_write=True))
        assert read.id != write.id
        assert read.capabilities() == {Capability.READ}

    async def test_identical_combination_conflicts(self, repos: Repositories) -> None:
        await repos.permissions.create(PermissionCreate(entity_name="sales", can_read=True))
        with pytest.raises(ConflictError):
            await repos.permissions.create(PermissionCreate(entity_name="sales", can_read=True))

    async def test_update_merges_flags(self, repos: Repositories) -> None:
        perm = await repos.permissions.create(PermissionCreate(entity_name="sales", can_read=True))
        updated = await repos.permissions.update(perm.id, PermissionUpdate(can_delete=True))
        assert updated.can_read is True
        assert updated.can_delete is True
        assert updated.entity_name == "sales"

    async def test_update_into_existing_combination_conflicts(self, repos: Repositories) -> None:
        await repos.permissions.create(PermissionCreate(entity_name="sales", can_read=True))
        other = await repos.permissions.create(PermissionCreate(entity_name="sales", can_write=True))
        with pytest.raises(ConflictError):
            await repos.permissions.update(
                other.id,
                PermissionUpdate(can_read=True, can_write=False),
            )

    async def test_update_unknown(self, repos: Repositories) -> None:
        with pytest.raises(NotFoundError):
            await repos.permissions.update(42, PermissionUpdate(can_read=True))

    async def test_delete_once(self, repos: Repositories) -> None:
        perm = await repos.permissions.create(PermissionCreate(entity_name="sales"))
        await repos.permissions.delete(perm.id)
        with pytest.raises(NotFoundError):
            await repos.permissions.delete(perm.id)

    async def test_list_for_user_follows_both_hops(self, repos: Repositories, make_user) -> None:
        user = await make_user()
        role = await repos.roles.create(RoleCreate(name="stocker"))
        perm = await repos.permissions.create(PermissionCreate(entity_name="inventory", can_read=True))
        await repos.permissions.create(PermissionCreate(entity_name="payroll", can_read=True))
        await repos.role_permissions.add(role.id, perm.id)
        await repos.user_roles.add(user.id, role.id)

        assert [p.id for p in await repos.permissions.list_for_user(user.id, "inventory")] == [perm.id]
        assert await repos.permissions.list_for_user(user.id, "payroll") == []
        assert await repos.permissions.list_for_user(uuid4(), "inventory") == []
