"""In-process cache of merged capability sets."""

import builtins
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from smartops.monitoring import get_logger
from smartops.schemas.permission import Capability

logger = get_logger(__name__)

type CacheKey = tuple[UUID, str]

PENDING_KEY = "permission_cache.pending"
# Marks a pending full clear in a session's pending set
CLEAR_ALL = None


class PermissionCache:
    """
    Maps ``(user_id, entity_name)`` to the capabilities the user holds.

    Entries hold the OR of every permission row reaching the user for the
    entity. The cache never decides on its own: callers invalidate whenever
    a user's roles, a role's permissions or a user's active flag change.

    Only committed state may be cached. An invalidation issued inside a
    session is applied at once and again after that session commits, and
    while it is pending the session's reads are not stored. Every
    invalidation bumps :attr:`generation`; a value computed under an older
    generation is discarded by :meth:`set`.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, frozenset[Capability]] = {}
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def generation(self) -> int:
        return self._generation

    def get(self, user_id: UUID, entity_name: str) -> frozenset[Capability] | None:
        return self._entries.get((user_id, entity_name))

    def set(
        self,
        user_id: UUID,
        entity_name: str,
        capabilities: Iterable[Capability],
        generation: int | None = None,
    ) -> bool:
        """
        Store a merged capability set.

        Returns:
            False when ``generation`` is stale and nothing was stored
        """
        if generation is not None and generation != self._generation:
            logger.debug("Stale capability set discarded", user_id=str(user_id), entity=entity_name)
            return False
        self._entries[(user_id, entity_name)] = frozenset(capabilities)
        return True

    def invalidate_user(self, user_id: UUID) -> None:
        self._generation += 1
        stale = [key for key in self._entries if key[0] == user_id]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("Permission cache invalidated", user_id=str(user_id), entries=len(stale))

    def invalidate_users(self, user_ids: Iterable[UUID], session: AsyncSession | None = None) -> None:
        """Drop entries for ``user_ids``, again after ``session`` commits when given."""
        user_ids = set(user_ids)
        for user_id in user_ids:
            self.invalidate_user(user_id)
        if session is not None:
            self._pending(session).update(user_ids)

    def clear(self, session: AsyncSession | None = None) -> None:
        """Drop every entry, again after ``session`` commits when given."""
        self._generation += 1
        self._entries.clear()
        logger.debug("Permission cache cleared")
        if session is not None:
            self._pending(session).add(CLEAR_ALL)

    def has_pending(self, session: AsyncSession) -> bool:
        """Whether ``session`` carries uncommitted changes to authorization data."""
        return bool(session.sync_session.info.get(PENDING_KEY))

    # --- session binding ---

    def _pending(self, session: AsyncSession) -> builtins.set[UUID | None]:
        sync_session = session.sync_session
        pending = sync_session.info.get(PENDING_KEY)
        if pending is None:
            pending = sync_session.info[PENDING_KEY] = set()
            event.listen(sync_session, "after_commit", self._on_commit)
            event.listen(sync_session, "after_rollback", self._on_rollback)
        return pending

    def _on_commit(self, sync_session: Session) -> None:
        pending = sync_session.info.get(PENDING_KEY)
        if not pending:
            return
        if CLEAR_ALL in pending:
            self.clear()
        else:
            for user_id in pending:
                self.invalidate_user(user_id)
        pending.clear()

    def _on_rollback(self, sync_session: Session) -> None:
        pending = sync_session.info.get(PENDING_KEY)
        if pending:
            pending.clear()
