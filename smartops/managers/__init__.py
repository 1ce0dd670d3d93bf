from smartops.managers.password_manager import PasswordHasher
from smartops.managers.permission_cache import PermissionCache

__all__ = ["PasswordHasher", "PermissionCache"]
