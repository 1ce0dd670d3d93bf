"""Protocol definitions for the collaborators the service consumes."""

from typing import Protocol, runtime_checkable
from uuid import UUID


@runtime_checkable
class CredentialHasher(Protocol):
    """
    Credential hashing collaborator.

    ``smartops.managers.PasswordHasher`` is the Argon2id implementation
    shipped with the backend.
    """

    async def hash(self, password: str) -> str:
        """Digest a plaintext password."""
        ...

    async def verify(self, password: str, hashed_password: str) -> bool:
        """Check a plaintext password against a digest."""
        ...

    async def verify_and_update(self, password: str, hashed_password: str) -> tuple[bool, str | None]:
        """Verify, returning a replacement digest when the stored one is outdated."""
        ...

    async def dummy_verify(self) -> None:
        """Spend the time of one verification without a stored digest."""
        ...


@runtime_checkable
class SessionManager(Protocol):
    """Session/token issuer; the token format belongs to the implementation."""

    async def issue(self, user_id: UUID) -> str:
        """Open a session for the user and return its token."""
        ...

    async def revoke(self, token: str) -> None:
        """Close the session identified by the token."""
        ...
