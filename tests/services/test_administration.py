# tests/services/test_administration.py
"""Tests for role, permission, assignment and store administration."""

from uuid import uuid4

import pytest

from smartops.errors import ConflictError, NotFoundError
from smartops.schemas import (
    Address,
    PermissionCreate,
    RoleCreate,
    RoleUpdate,
    StoreCreate,
    StoreUpdate,
)
from smartops.services import AccessManagementService

ADDRESS = Address(country="ID", state="Bali", city="Denpasar", street="Jl. Raya 1", zip="80111")


class TestRoles:
    async def test_rename_unassigned_role(self, service: AccessManagementService) -> None:
        role = await service.create_role(RoleCreate(name="draft"))
        renamed = await service.update_role(role.id, RoleUpdate(name="final"))
        assert renamed.name == "final"

    async def test_rename_assigned_role_conflicts(
        self,
        service: AccessManagementService,
        make_user,
    ) -> None:
        user = await make_user()
        role = await service.create_role(RoleCreate(name="cashier"))
        await service.assign_role(user.id, role.id)

        with pytest.raises(ConflictError):
            await service.update_role(role.id, RoleUpdate(name="teller"))
        assert (await service.update_role(role.id, RoleUpdate(name="cashier"))).name == "cashier"

    async def test_update_unknown_role(self, service: AccessManagementService) -> None:
        with pytest.raises(NotFoundError):
            await service.update_role(999, RoleUpdate(name="x-role"))

    async def test_list_and_delete(self, service: AccessManagementService) -> None:
        role = await service.create_role(RoleCreate(name="temp"))
        assert [r.name for r in await service.list_roles()] == ["temp"]
        await service.delete_role(role.id)
        with pytest.raises(NotFoundError):
            await service.get_role(role.id)


class TestRoleAssignment:
    async def test_assign_twice_conflicts_revoke_reassign(
        self,
        service: AccessManagementService,
        make_user,
    ) -> None:
        user = await make_user()
        role = await service.create_role(RoleCreate(name="cashier"))
        await service.assign_role(user.id, role.id)
        with pytest.raises(ConflictError):
            await service.assign_role(user.id, role.id)
        await service.revoke_role(user.id, role.id)
        await service.assign_role(user.id, role.id)
        assert [a.role_id for a in await service.list_user_roles(user.id)] == [role.id]

    async def test_change_role(self, service: AccessManagementService, make_user) -> None:
        user = await make_user()
        old = await service.create_role(RoleCreate(name="junior"))
        new = await service.create_role(RoleCreate(name="senior"))
        await service.assign_role(user.id, old.id)
        changed = await service.change_role(user.id, old.id, new.id)
        assert changed.role_id == new.id

    async def test_list_roles_of_unknown_user(self, service: AccessManagementService) -> None:
        with pytest.raises(NotFoundError):
            await service.list_user_roles(uuid4())


class TestPermissions:
    async def test_crud_and_grants(self, service: AccessManagementService) -> None:
        role = await service.create_role(RoleCreate(name="auditor"))
        perm = await service.create_permission(PermissionCreate(entity_name="ledger", can_read=True))

        assert (await service.get_permission(perm.id)).entity_name == "ledger"
        assert [p.id for p in await service.list_permissions()] == [perm.id]

        await service.grant_permission(role.id, perm.id)
        assert [g.permission_id for g in await service.list_role_permissions(role.id)] == [perm.id]

        await service.delete_permission(perm.id)
        assert await service.list_role_permissions(role.id) == []

    async def test_list_grants_of_unknown_role(self, service: AccessManagementService) -> None:
        with pytest.raises(NotFoundError):
            await service.list_role_permissions(999)


class TestStores:
    async def test_store_lifecycle(self, service: AccessManagementService, make_user) -> None:
        owner = await make_user()
        store = await service.create_store(StoreCreate(owner_id=owner.id, name="Kuta", address=ADDRESS))

        renamed = await service.update_store(store.id, StoreUpdate(name="Kuta Beach"))
        assert renamed.name == "Kuta Beach"
        assert renamed.address == ADDRESS
        assert [s.id for s in await service.list_stores()] == [store.id]

        await service.delete_store(store.id)
        with pytest.raises(NotFoundError):
            await service.get_store(store.id)

    async def test_store_access(self, service: AccessManagementService, make_user) -> None:
        owner, clerk, stranger = await make_user(), await make_user(), await make_user()
        store = await service.create_store(StoreCreate(owner_id=owner.id, name="Ubud", address=ADDRESS))

        assert await service.has_store_access(owner.id, store.id)
        assert not await service.has_store_access(clerk.id, store.id)

        await service.grant_store_access(store.id, clerk.id)
        assert await service.has_store_access(clerk.id, store.id)
        assert not await service.has_store_access(stranger.id, store.id)
        assert [a.user_id for a in await service.list_store_users(store.id)] == [clerk.id]

        await service.revoke_store_access(store.id, clerk.id)
        assert not await service.has_store_access(clerk.id, store.id)

    async def test_inactive_users_have_no_store_access(
        self,
        service: AccessManagementService,
        make_user,
    ) -> None:
        owner, clerk = await make_user(), await make_user()
        store = await service.create_store(StoreCreate(owner_id=owner.id, name="Ubud", address=ADDRESS))
        await service.grant_store_access(store.id, clerk.id)

        await service.deactivate_employee(owner.id)
        await service.deactivate_employee(clerk.id)

        assert not await service.has_store_access(owner.id, store.id)
        assert not await service.has_store_access(clerk.id, store.id)

    async def test_unknown_store(self, service: AccessManagementService, make_user) -> None:
        user = await make_user()
        with pytest.raises(NotFoundError):
            await service.has_store_access(user.id, 404)
