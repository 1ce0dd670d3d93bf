"""
Health checks for the access backend.

- /health/live (Liveness): basic app responsiveness, no external deps
- /health/ready (Readiness): database round-trip within a timeout

Response Format
---------------
{
    "status": "ready" | "not_ready" | "live",
    "timestamp": "2026-01-01 12:00:00",
    "version": "0.1.0",
    "checks": {"database": {"status": "pass", "response_ms": 3}}
}
"""

from asyncio import wait_for
from dataclasses import dataclass, field
from enum import StrEnum
from time import perf_counter
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.responses import ORJSONResponse
from sqlalchemy import text
from starlette.status import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from smartops.db.database import Database
from smartops.monitoring.logging import get_logger
from smartops.utils.helpers import today_str

logger = get_logger(__name__)

DATABASE_CHECK_TIMEOUT = 2.0


class CheckStatus(StrEnum):
    """Status values for individual health checks."""

    PASS = "pass"
    FAIL = "fail"


class OverallStatus(StrEnum):
    """Overall health status."""

    READY = "ready"
    NOT_READY = "not_ready"
    LIVE = "live"


@dataclass
class ComponentCheck:
    """Result of an individual health check component."""

    status: CheckStatus
    response_ms: int | None = None
    message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"status": self.status.value}
        if self.response_ms is not None:
            result["response_ms"] = self.response_ms
        if self.message is not None:
            result["message"] = self.message
        return result


@dataclass
class HealthStatus:
    """Complete health status response."""

    status: OverallStatus
    timestamp: str
    version: str
    checks: dict[str, ComponentCheck] = field(default_factory=dict)

    @property
    def is_healthy(self) -> bool:
        return self.status in (OverallStatus.READY, OverallStatus.LIVE)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp,
            "version": self.version,
            "checks": {name: check.to_dict() for name, check in self.checks.items()},
        }


class HealthChecker:
    """Liveness and readiness probes backed by the application database."""

    def __init__(self, database: Database, version: str) -> None:
        self.database = database
        self.version = version

    def check_liveness(self) -> HealthStatus:
        return HealthStatus(
            status=OverallStatus.LIVE,
            timestamp=today_str(),
            version=self.version,
        )

    async def check_database(self) -> ComponentCheck:
        """Run ``SELECT 1`` through a pooled connection."""
        start = perf_counter()
        try:
            async with self.database.transaction() as session:
                await wait_for(session.execute(text("SELECT 1")), DATABASE_CHECK_TIMEOUT)
        except TimeoutError:
            logger.warning("Database health check timed out")
            return ComponentCheck(status=CheckStatus.FAIL, message="timeout")
        except Exception as e:
            logger.exception("Database health check failed")
            return ComponentCheck(status=CheckStatus.FAIL, message=type(e).__name__)
        return ComponentCheck(
            status=CheckStatus.PASS,
            response_ms=int((perf_counter() - start) * 1000),
        )

    async def check_readiness(self) -> HealthStatus:
        database = await self.check_database()
        status = (
            OverallStatus.READY if database.status == CheckStatus.PASS else OverallStatus.NOT_READY
        )
        return HealthStatus(
            status=status,
            timestamp=today_str(),
            version=self.version,
            checks={"database": database},
        )


def setup_health_routes(app: FastAPI) -> None:
    """Mount ``/health/live`` and ``/health/ready`` on the application."""
    router = APIRouter(prefix="/health", tags=["Health"])

    @router.get("/live", summary="Liveness probe")
    async def liveness() -> ORJSONResponse:
        checker: HealthChecker = app.state.health_checker
        return ORJSONResponse(checker.check_liveness().to_dict(), status_code=HTTP_200_OK)

    @router.get("/ready", summary="Readiness probe")
    async def readiness() -> ORJSONResponse:
        checker: HealthChecker = app.state.health_checker
        result = await checker.check_readiness()
        status_code = HTTP_200_OK if result.is_healthy else HTTP_503_SERVICE_UNAVAILABLE
        return ORJSONResponse(result.to_dict(), status_code=status_code)

    app.include_router(router)
