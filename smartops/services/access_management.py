"""Access-management workflows spanning users, roles, hierarchy and stores."""

from collections.abc import Iterable
from uuid import UUID

from smartops.configs import Settings
from smartops.errors import ConflictError, ForbiddenError, UnauthorizedError
from smartops.managers.permission_cache import PermissionCache
from smartops.models import UserDB
from smartops.monitoring import get_logger
from smartops.repositories import Repositories
from smartops.schemas import (
    AuthSession,
    Capability,
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
    RoleCreate,
    RolePermissionResponse,
    RoleResponse,
    RoleUpdate,
    StoreCreate,
    StoreResponse,
    StoreUpdate,
    StoreUserResponse,
    UserCreate,
    UserHierarchyResponse,
    UserResponse,
    UserRoleResponse,
    UserUpdate,
)
from smartops.services.authorization import Authorizer
from smartops.services.protocols import CredentialHasher, SessionManager

logger = get_logger(__name__)


class AccessManagementService:
    """
    Service composing repository calls into access-control workflows.

    One instance serves one unit of work: every repository in ``repos`` is
    bound to the same session, so a workflow touching several aggregates
    (registration plus default-role assignment, say) commits or rolls back
    as a whole when the caller's ``Database.transaction()`` block exits.
    The permission cache, when given, outlives the instance and is shared
    across requests.
    """

    def __init__(
        self,
        repos: Repositories,
        hasher: CredentialHasher,
        sessions: SessionManager,
        settings: Settings,
        cache: PermissionCache | None = None,
    ) -> None:
        """
        Initialize the access-management service.

        Args:
            repos: Repositories bound to the current session
            hasher: Credential hashing collaborator
            sessions: Session/token issuing collaborator
            settings: Application settings (default role name)
            cache: Optional shared permission cache
        """
        self.repos = repos
        self.hasher = hasher
        self.sessions = sessions
        self.settings = settings
        self.cache = cache
        self.authorizer = Authorizer(repos.users, repos.permissions, cache, session=repos.session)

    # --- cache bookkeeping ---

    def _invalidate_user(self, user_id: UUID) -> None:
        self._invalidate_users([user_id])

    def _invalidate_users(self, user_ids: Iterable[UUID]) -> None:
        if self.cache is not None:
            self.cache.invalidate_users(user_ids, session=self.repos.session)

    async def _invalidate_role_holders(self, role_id: int) -> None:
        if self.cache is not None:
            self._invalidate_users(await self.repos.user_roles.list_user_ids_for_role(role_id))

    def _clear_cache(self) -> None:
        if self.cache is not None:
            self.cache.clear(session=self.repos.session)

    # --- authentication ---

    async def register_user(self, user: UserCreate) -> AuthSession:
        """
        Register a user and open their first session.

        The password is hashed before anything is written. When a role
        named ``DEFAULT_ROLE_NAME`` exists it is assigned in the same unit
        of work.

        Raises:
            ConflictError: If username or email already exists
            PasswordHashingError: If the hasher fails
        """
        password_hash = await self.hasher.hash(user.password.get_secret_value())
        created = await self.repos.users.create(user, password_hash)

        if self.settings.DEFAULT_ROLE_NAME:
            role = await self.repos.roles.get_by_name(self.settings.DEFAULT_ROLE_NAME)
            if role is not None:
                await self.repos.user_roles.add(created.id, role.id)
                self._invalidate_user(created.id)
            else:
                logger.warning("Default role missing", role=self.settings.DEFAULT_ROLE_NAME)

        token = await self.sessions.issue(created.id)
        logger.info("User registered", user_id=str(created.id))
        return AuthSession(user=created, access_token=token)

    async def _resolve_active(self, username: str) -> UserDB | None:
        record = await self.repos.users.get_by_username(username)
        if record is None or not record.is_active:
            return None
        return record

    async def login_user(self, username: str, password: str) -> AuthSession:
        """
        Authenticate and issue a session token.

        Raises:
            UnauthorizedError: If the user is unknown, inactive, or the
                password does not match
        """
        record = await self.repos.users.get_by_username(username)
        if record is None:
            await self.hasher.dummy_verify()
            raise UnauthorizedError

        password_ok, new_hash = await self.hasher.verify_and_update(password, record.password_hash)
        if not password_ok or not record.is_active:
            logger.info("Login rejected", user_id=str(record.id))
            raise UnauthorizedError

        if new_hash is not None:
            await self.repos.users.update(record.id, UserUpdate(), password_hash=new_hash)
            logger.info("Password digest upgraded", user_id=str(record.id))

        token = await self.sessions.issue(record.id)
        logger.info("User logged in", user_id=str(record.id))
        return AuthSession(user=UserResponse.model_validate(record), access_token=token)

    async def logout_user(self, username: str, token: str) -> None:
        """
        Raises:
            UnauthorizedError: If the user is unknown or inactive
        """
        record = await self._resolve_active(username)
        if record is None:
            raise UnauthorizedError
        await self.sessions.revoke(token)
        logger.info("User logged out", user_id=str(record.id))

    # --- users and employees ---

    async def get_user(self, user_id: UUID) -> UserResponse:
        return await self.repos.users.get_by_id(user_id)

    async def get_users(self) -> list[UserResponse]:
        return await self.repos.users.get_all()

    async def _subtree_ids(self, manager_id: UUID) -> set[UUID]:
        """Ids of everyone reporting to the manager, directly or not."""
        found: set[UUID] = set()
        frontier = [manager_id]
        while frontier:
            reports = await self.repos.hierarchy.list_direct_reports(frontier)
            frontier = [uid for uid in reports if uid not in found and uid != manager_id]
            found.update(frontier)
        return found

    async def get_employees(self, manager_id: UUID) -> list[UserResponse]:
        """
        Active users anywhere below the manager in the hierarchy.

        Raises:
            NotFoundError: If the manager does not exist
        """
        manager = await self.repos.users.get_by_id(manager_id)
        if not manager.is_active:
            return []
        users = await self.repos.users.get_many(await self._subtree_ids(manager_id))
        return [user for user in users if user.is_active]

    async def get_employee_by_id(self, manager_id: UUID, employee_id: UUID) -> UserResponse:
        """
        Raises:
            NotFoundError: If the manager or the employee does not exist
            ForbiddenError: If the employee is outside the manager's subtree
        """
        manager = await self.repos.users.get_by_id(manager_id)
        employee = await self.repos.users.get_by_id(employee_id)
        if not manager.is_active or employee_id not in await self._subtree_ids(manager_id):
            mssg = "Employee is outside your reporting line"
            raise ForbiddenError(mssg)
        return employee

    async def update_employee(self, user_id: UUID, user_update: UserUpdate) -> UserResponse:
        """
        Raises:
            ForbiddenError: If the payload tries to change the active flag
            NotFoundError: If the user does not exist
            ConflictError: If the new username or email is taken
        """
        if user_update.is_active is not None:
            mssg = "Active status cannot be changed through a profile update"
            raise ForbiddenError(mssg)

        password_hash = None
        if user_update.password is not None:
            password_hash = await self.hasher.hash(user_update.password.get_secret_value())
        return await self.repos.users.update(user_id, user_update, password_hash=password_hash)

    async def deactivate_employee(self, user_id: UUID) -> UserResponse:
        user = await self.repos.users.set_active(user_id, is_active=False)
        self._invalidate_user(user_id)
        logger.info("User deactivated", user_id=str(user_id))
        return user

    async def reactivate_employee(self, user_id: UUID) -> UserResponse:
        user = await self.repos.users.set_active(user_id, is_active=True)
        self._invalidate_user(user_id)
        logger.info("User reactivated", user_id=str(user_id))
        return user

    # --- roles ---

    async def create_role(self, role: RoleCreate) -> RoleResponse:
        return await self.repos.roles.create(role)

    async def get_role(self, role_id: int) -> RoleResponse:
        return await self.repos.roles.get_by_id(role_id)

    async def list_roles(self) -> list[RoleResponse]:
        return await self.repos.roles.get_all()

    async def update_role(self, role_id: int, role_update: RoleUpdate) -> RoleResponse:
        """
        Raises:
            NotFoundError: If the role does not exist
            ConflictError: If the name is taken, or the role is already
                assigned and the name would change
        """
        current = await self.repos.roles.get_by_id(role_id)
        renaming = role_update.name is not None and role_update.name != current.name
        if renaming and await self.repos.roles.is_assigned(role_id):
            mssg = f"Role '{current.name}' is assigned and cannot be renamed"
            raise ConflictError(mssg)
        return await self.repos.roles.update(role_id, role_update)

    async def delete_role(self, role_id: int) -> None:
        holders = await self.repos.user_roles.list_user_ids_for_role(role_id)
        await self.repos.roles.delete(role_id)
        self._invalidate_users(holders)
        logger.info("Role deleted", role_id=role_id, holders=len(holders))

    # --- permissions ---

    async def create_permission(self, permission: PermissionCreate) -> PermissionResponse:
        return await self.repos.permissions.create(permission)

    async def get_permission(self, permission_id: int) -> PermissionResponse:
        return await self.repos.permissions.get_by_id(permission_id)

    async def list_permissions(self) -> list[PermissionResponse]:
        return await self.repos.permissions.get_all()

    async def update_permission(
        self,
        permission_id: int,
        permission_update: PermissionUpdate,
    ) -> PermissionResponse:
        permission = await self.repos.permissions.update(permission_id, permission_update)
        self._clear_cache()
        return permission

    async def delete_permission(self, permission_id: int) -> None:
        await self.repos.permissions.delete(permission_id)
        self._clear_cache()

    async def grant_permission(self, role_id: int, permission_id: int) -> RolePermissionResponse:
        grant = await self.repos.role_permissions.add(role_id, permission_id)
        await self._invalidate_role_holders(role_id)
        logger.info("Permission granted", role_id=role_id, permission_id=permission_id)
        return grant

    async def revoke_permission(self, role_id: int, permission_id: int) -> None:
        await self.repos.role_permissions.remove(role_id, permission_id)
        await self._invalidate_role_holders(role_id)
        logger.info("Permission revoked", role_id=role_id, permission_id=permission_id)

    async def list_role_permissions(self, role_id: int) -> list[RolePermissionResponse]:
        await self.repos.roles.get_by_id(role_id)
        return await self.repos.role_permissions.list_for_role(role_id)

    # --- role assignment ---

    async def assign_role(self, user_id: UUID, role_id: int) -> UserRoleResponse:
        assignment = await self.repos.user_roles.add(user_id, role_id)
        self._invalidate_user(user_id)
        logger.info("Role assigned", user_id=str(user_id), role_id=role_id)
        return assignment

    async def revoke_role(self, user_id: UUID, role_id: int) -> None:
        await self.repos.user_roles.remove(user_id, role_id)
        self._invalidate_user(user_id)
        logger.info("Role revoked", user_id=str(user_id), role_id=role_id)

    async def change_role(self, user_id: UUID, old_role_id: int, new_role_id: int) -> UserRoleResponse:
        assignment = await self.repos.user_roles.replace(user_id, old_role_id, new_role_id)
        self._invalidate_user(user_id)
        logger.info("Role changed", user_id=str(user_id), old=old_role_id, new=new_role_id)
        return assignment

    async def list_user_roles(self, user_id: UUID) -> list[UserRoleResponse]:
        await self.repos.users.get_by_id(user_id)
        return await self.repos.user_roles.list_for_user(user_id)

    # --- hierarchy ---

    async def _ensure_no_cycle(self, user_id: UUID, manager_id: UUID) -> None:
        """Walk upward from the proposed manager; meeting the subject is a cycle."""
        visited: set[UUID] = set()
        current: UUID | None = manager_id
        while current is not None and current not in visited:
            if current == user_id:
                mssg = "Reporting line would form a cycle"
                raise ConflictError(mssg)
            visited.add(current)
            current = await self.repos.hierarchy.get_manager_id(current)

    async def assign_manager(self, user_id: UUID, manager_id: UUID) -> UserHierarchyResponse:
        """
        Set or move the user's manager.

        Raises:
            NotFoundError: If either user does not exist
            ConflictError: If the user would manage themselves, directly or
                through the chain above the new manager
        """
        await self.repos.users.get_by_id(user_id)
        await self.repos.users.get_by_id(manager_id)
        await self._ensure_no_cycle(user_id, manager_id)
        edge = await self.repos.hierarchy.set_manager(user_id, manager_id)
        logger.info("Manager assigned", user_id=str(user_id), manager_id=str(manager_id))
        return edge

    async def remove_manager(self, user_id: UUID) -> None:
        await self.repos.hierarchy.remove(user_id)

    async def get_reporting_chain(self, user_id: UUID) -> list[UserResponse]:
        """Managers above the user, nearest first."""
        await self.repos.users.get_by_id(user_id)
        chain: list[UserResponse] = []
        seen = {user_id}
        current = await self.repos.hierarchy.get_manager_id(user_id)
        while current is not None and current not in seen:
            seen.add(current)
            chain.append(await self.repos.users.get_by_id(current))
            current = await self.repos.hierarchy.get_manager_id(current)
        return chain

    # --- stores ---

    async def create_store(self, store: StoreCreate) -> StoreResponse:
        return await self.repos.stores.create(store)

    async def get_store(self, store_id: int) -> StoreResponse:
        return await self.repos.stores.get_by_id(store_id)

    async def list_stores(self) -> list[StoreResponse]:
        return await self.repos.stores.get_all()

    async def update_store(self, store_id: int, store_update: StoreUpdate) -> StoreResponse:
        return await self.repos.stores.update(store_id, store_update)

    async def delete_store(self, store_id: int) -> None:
        await self.repos.stores.delete(store_id)

    async def grant_store_access(self, store_id: int, user_id: UUID) -> StoreUserResponse:
        return await self.repos.store_users.add(store_id, user_id)

    async def revoke_store_access(self, store_id: int, user_id: UUID) -> None:
        await self.repos.store_users.remove(store_id, user_id)

    async def list_store_users(self, store_id: int) -> list[StoreUserResponse]:
        await self.repos.stores.get_by_id(store_id)
        return await self.repos.store_users.list_for_store(store_id)

    async def has_store_access(self, user_id: UUID, store_id: int) -> bool:
        """
        Owners and granted users have access; inactive users never do.

        Raises:
            NotFoundError: If the user or the store does not exist
        """
        user = await self.repos.users.get_by_id(user_id)
        store = await self.repos.stores.get_by_id(store_id)
        if not user.is_active:
            return False
        if store.owner_id == user_id:
            return True
        return await self.repos.store_users.exists(store_id, user_id)

    # --- authorization ---

    async def is_authorized(self, user_id: UUID, entity_name: str, capability: Capability) -> bool:
        return await self.authorizer.is_authorized(user_id, entity_name, capability)

    async def require_permission(self, user_id: UUID, entity_name: str, capability: Capability) -> None:
        await self.authorizer.require_permission(user_id, entity_name, capability)
