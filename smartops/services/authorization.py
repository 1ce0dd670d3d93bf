"""Capability resolution for the role/permission model."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from smartops.errors import ForbiddenError
from smartops.managers.permission_cache import PermissionCache
from smartops.monitoring import get_logger
from smartops.repositories.protocols import PermissionRepositoryProtocol, UserRepositoryProtocol
from smartops.schemas.permission import Capability

logger = get_logger(__name__)


class Authorizer:
    """
    Decides whether a user may exercise a capability on an entity.

    Roles held by the user expand to permissions (user_roles ->
    role_permissions -> permissions). Every permission row targeting the
    entity contributes its flags and the rows combine by logical OR. An
    inactive user is denied whatever the associations say.

    When a cache is supplied the merged capability set is stored per
    ``(user_id, entity_name)``; the active flag is always read fresh.
    Nothing is stored while ``session`` holds uncommitted authorization
    changes, since those reads may not survive the transaction.
    """

    def __init__(
        self,
        users: UserRepositoryProtocol,
        permissions: PermissionRepositoryProtocol,
        cache: PermissionCache | None = None,
        session: AsyncSession | None = None,
    ) -> None:
        self.users = users
        self.permissions = permissions
        self.cache = cache
        self.session = session

    def _may_store(self, cache: PermissionCache) -> bool:
        return self.session is None or not cache.has_pending(self.session)

    async def capabilities_for(self, user_id: UUID, entity_name: str) -> frozenset[Capability]:
        """Merged capabilities reaching the user through roles, ignoring activity."""
        generation = None
        if self.cache is not None:
            cached = self.cache.get(user_id, entity_name)
            if cached is not None:
                return cached
            generation = self.cache.generation

        merged: set[Capability] = set()
        for permission in await self.permissions.list_for_user(user_id, entity_name):
            merged |= permission.capabilities()
        capabilities = frozenset(merged)

        if self.cache is not None and self._may_store(self.cache):
            self.cache.set(user_id, entity_name, capabilities, generation=generation)
        return capabilities

    async def is_authorized(self, user_id: UUID, entity_name: str, capability: Capability) -> bool:
        """
        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.users.get_by_id(user_id)
        if not user.is_active:
            return False
        return capability in await self.capabilities_for(user_id, entity_name)

    async def require_permission(self, user_id: UUID, entity_name: str, capability: Capability) -> None:
        """
        Raises:
            NotFoundError: If the user does not exist
            ForbiddenError: If the user lacks the capability or is inactive
        """
        if not await self.is_authorized(user_id, entity_name, capability):
            logger.info(
                "Permission denied",
                user_id=str(user_id),
                entity=entity_name,
                capability=str(capability),
            )
            mssg = f"Missing '{capability}' permission on '{entity_name}'"
            raise ForbiddenError(mssg)
