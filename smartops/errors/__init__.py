from smartops.errors.access import (
    ACCESS_ERRORS,
    BadRequestError,
    ConflictError,
    DbError,
    ForbiddenError,
    InternalServerError,
    NotFoundError,
    ServiceUnavailableError,
    TooManyRequestsError,
    UnauthorizedError,
    UnprocessableEntityError,
    access_exception_handler,
)
from smartops.errors.base import BaseAppError, create_exception_handler
from smartops.errors.password_hasher import PasswordHashingError

__all__ = [
    "ACCESS_ERRORS",
    "BadRequestError",
    "BaseAppError",
    "ConflictError",
    "DbError",
    "ForbiddenError",
    "InternalServerError",
    "NotFoundError",
    "PasswordHashingError",
    "ServiceUnavailableError",
    "TooManyRequestsError",
    "UnauthorizedError",
    "UnprocessableEntityError",
    "access_exception_handler",
    "create_exception_handler",
]
