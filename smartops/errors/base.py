from collections.abc import Awaitable, Callable

from fastapi import Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR
from structlog.stdlib import BoundLogger

from smartops.utils.helpers import host


class BaseAppError(Exception):
    """Base exception class for application errors."""

    def __init__(
        self,
        detail: str = "Internal Server Error",
        status_code: int = HTTP_500_INTERNAL_SERVER_ERROR,
    ) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code

    def __str__(self) -> str:
        return self.detail


def create_exception_handler(
    logger: BoundLogger,
) -> Callable[[Request, Exception], Awaitable[ORJSONResponse]]:
    """
    Create a standardized exception handler for the application.

    Args:
        logger: Logger instance to use for logging exceptions.

    Returns:
        A callable exception handler.
    """

    async def handler(request: Request, exc: Exception) -> ORJSONResponse:
        status_code = HTTP_500_INTERNAL_SERVER_ERROR
        detail = "Internal Server Error"

        if isinstance(exc, BaseAppError):
            status_code = exc.status_code
            detail = exc.detail

        logger.warning(f"{detail} for ip: {host(request)} for endpoint {request.url.path}")

        # Private attributes carry server-side detail and never reach the client
        content = {"detail": detail}
        content.update(
            {
                k: v
                for k, v in exc.__dict__.items()
                if k not in ("status_code", "detail") and not k.startswith("_")
            },
        )

        return ORJSONResponse(content=content, status_code=status_code)

    return handler
