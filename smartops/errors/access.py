"""Classified failures raised by repositories and services.

The set is closed: every repository or service failure surfaces as exactly
one of these. The transport layer maps each to its HTTP status through
``access_exception_handler``.
"""

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_429_TOO_MANY_REQUESTS,
    HTTP_500_INTERNAL_SERVER_ERROR,
    HTTP_503_SERVICE_UNAVAILABLE,
)

from smartops.errors.base import BaseAppError, create_exception_handler
from smartops.monitoring.logging import get_logger

logger = get_logger(__name__)


class InternalServerError(BaseAppError):
    """Unexpected failure. The detail is logged, the caller sees a generic message."""

    def __init__(self, detail: str = "Internal Server Error") -> None:
        super().__init__("Internal Server Error", HTTP_500_INTERNAL_SERVER_ERROR)
        self._internal_detail = detail
        logger.error("Internal Server Error", detail=detail)

    @property
    def internal_detail(self) -> str:
        return self._internal_detail


class DbError(BaseAppError):
    """Unclassified data-store failure. The detail is logged, never exposed."""

    def __init__(self, detail: str = "Database Error") -> None:
        super().__init__("Internal Server Error", HTTP_500_INTERNAL_SERVER_ERROR)
        self._internal_detail = detail
        logger.error("Database Error", detail=detail)

    @property
    def internal_detail(self) -> str:
        return self._internal_detail


class ConflictError(BaseAppError):
    """A uniqueness or structural invariant already holds."""

    def __init__(self, detail: str = "Conflict") -> None:
        super().__init__(detail, HTTP_409_CONFLICT)


class BadRequestError(BaseAppError):
    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(detail, HTTP_400_BAD_REQUEST)


class ServiceUnavailableError(BaseAppError):
    def __init__(self, detail: str = "Service Unavailable") -> None:
        super().__init__(detail, HTTP_503_SERVICE_UNAVAILABLE)


class TooManyRequestsError(BaseAppError):
    def __init__(self, detail: str = "Too Many Requests") -> None:
        super().__init__(detail, HTTP_429_TOO_MANY_REQUESTS)


class UnprocessableEntityError(BaseAppError):
    def __init__(self, detail: str = "Unprocessable Entity") -> None:
        super().__init__(detail, HTTP_422_UNPROCESSABLE_ENTITY)


class NotFoundError(BaseAppError):
    """The addressed record does not exist."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(detail, HTTP_404_NOT_FOUND)


class ForbiddenError(BaseAppError):
    """The caller is known but not allowed to perform the action."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(detail, HTTP_403_FORBIDDEN)


class UnauthorizedError(BaseAppError):
    """Authentication failed. Never reveals whether the identifier exists."""

    def __init__(self) -> None:
        super().__init__("Unauthorized", HTTP_401_UNAUTHORIZED)


ACCESS_ERRORS: tuple[type[BaseAppError], ...] = (
    InternalServerError,
    ConflictError,
    BadRequestError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnprocessableEntityError,
    NotFoundError,
    ForbiddenError,
    UnauthorizedError,
    DbError,
)

access_exception_handler = create_exception_handler(logger)
