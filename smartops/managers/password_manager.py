"""
Password hashing module using Argon2 with passlib's CryptContext.

Hashing is CPU-bound, so the async facade pushes every call onto a small
thread pool instead of blocking the event loop.
"""

from asyncio import get_running_loop
from concurrent.futures import ThreadPoolExecutor

from passlib.context import CryptContext
from passlib.exc import InternalBackendError

from smartops.configs import CONFIG_MAP, Settings
from smartops.errors import PasswordHashingError
from smartops.monitoring import get_logger

logger = get_logger(__name__)


class PasswordHasher:
    """
    Argon2id credential hasher satisfying ``CredentialHasher``.

    Wraps passlib's CryptContext. pbkdf2_sha256 stays readable as a
    deprecated scheme so old digests still verify and are upgraded on the
    next successful login.
    """

    def __init__(self, settings: Settings, max_workers: int = 4) -> None:
        self.level = settings.PASSWORD_SECURITY_LEVEL
        config = CONFIG_MAP[self.level]
        self.pwd_context = CryptContext(
            schemes=["argon2", "pbkdf2_sha256"],
            deprecated="pbkdf2_sha256",
            argon2__memory_cost=config.memory_cost,
            argon2__time_cost=config.time_cost,
            argon2__parallelism=config.parallelism,
        )
        self._executor = ThreadPoolExecutor(max_workers=max_workers)
        logger.info("PasswordHasher initialized with Argon2id", security_level=self.level)

    def _hash(self, password: str) -> str:
        if not password:
            mssg = "Password cannot be empty"
            raise PasswordHashingError(mssg)
        try:
            return self.pwd_context.hash(password)
        except (ValueError, InternalBackendError, UnicodeError) as e:
            logger.exception("Invalid password format")
            mssg = "Failed to hash password"
            raise PasswordHashingError(mssg) from e

    def _verify(self, password: str, hashed_password: str) -> bool:
        if not isinstance(hashed_password, str) or not hashed_password.strip():
            logger.warning("Invalid hash format provided")
            return False
        try:
            return self.pwd_context.verify(password, hashed_password)
        except ValueError:
            logger.exception("Stored hash is corrupted or invalid format")
            return False

    def _needs_rehash(self, hashed_password: str) -> bool:
        try:
            return self.pwd_context.needs_update(hashed_password)
        except ValueError:
            logger.exception("Error checking hash currency", security_level=self.level)
            return False

    def _verify_and_update(self, password: str, hashed_password: str) -> tuple[bool, str | None]:
        if not self._verify(password, hashed_password):
            return False, None
        if not self._needs_rehash(hashed_password):
            return True, None
        new_hash = self._hash(password)
        logger.info("Password needs rehashing, new hash generated", security_level=self.level)
        return True, new_hash

    async def hash(self, password: str) -> str:
        """
        Hash a plaintext password using Argon2id.

        Raises:
            PasswordHashingError: If the password is empty or the backend fails
        """
        return await get_running_loop().run_in_executor(self._executor, self._hash, password)

    async def verify(self, password: str, hashed_password: str) -> bool:
        """Check a plaintext password against a stored digest."""
        return await get_running_loop().run_in_executor(
            self._executor,
            self._verify,
            password,
            hashed_password,
        )

    async def verify_and_update(self, password: str, hashed_password: str) -> tuple[bool, str | None]:
        """
        Verify a password and return a new digest if the stored one is outdated.

        Digests from a deprecated scheme (pbkdf2_sha256) or from weaker
        Argon2 parameters than the configured security level are upgraded.

        Returns:
            tuple[bool, str | None]:
                - True if the password is correct, False otherwise
                - The replacement digest when rehashing is needed, None otherwise

        Raises:
            PasswordHashingError: If generating the replacement digest fails
        """
        return await get_running_loop().run_in_executor(
            self._executor,
            self._verify_and_update,
            password,
            hashed_password,
        )

    async def dummy_verify(self) -> None:
        """Burn one verification's worth of time for unknown accounts."""
        await get_running_loop().run_in_executor(self._executor, self.pwd_context.dummy_verify)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
