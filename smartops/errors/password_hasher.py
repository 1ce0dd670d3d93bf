from smartops.errors.access import InternalServerError


class PasswordHashingError(InternalServerError):
    """Error for password hasher module."""

    def __init__(self, detail: str = "Password hashing failed") -> None:
        super().__init__(detail)
