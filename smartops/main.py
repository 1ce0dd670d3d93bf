"""SmartOps access backend - FastAPI application shell."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from smartops.configs import Settings, get_settings
from smartops.db import Database
from smartops.errors import BaseAppError, access_exception_handler
from smartops.managers import PasswordHasher, PermissionCache
from smartops.middleware import LoggingMiddleware, SecurityHeadersMiddleware
from smartops.monitoring import configure_logging, get_logger
from smartops.monitoring.health import HealthChecker, setup_health_routes

logger = get_logger(__name__)


def create_app(settings: Settings | None = None, database: Database | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to run with; loaded from the environment when omitted
        database: Prebuilt database handle; built from settings when omitted

    Returns:
        FastAPI: Application with health routes and error handlers mounted
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Manage application startup and shutdown events with service initialization."""
        configure_logging(settings)
        logger.info("Starting application", name=settings.APP_NAME, env=settings.ENVIRONMENT)

        db = database or Database(settings)
        try:
            if settings.ENVIRONMENT in ("development", "test"):
                await db.init_models()
        except Exception:
            logger.exception("Failed to initialize services")
            await db.dispose()
            raise

        hasher = PasswordHasher(settings)
        app.state.settings = settings
        app.state.database = db
        app.state.health_checker = HealthChecker(db, settings.VERSION)
        app.state.password_hasher = hasher
        app.state.permission_cache = PermissionCache() if settings.PERMISSION_CACHE_ENABLED else None
        logger.info("Services initialized successfully", address=settings.server_address)

        yield

        logger.info("Shutting down application", name=settings.APP_NAME)
        try:
            hasher.shutdown()
            await db.dispose()
            logger.info("Services cleaned up successfully")
        except Exception:
            logger.exception("Error during service cleanup")

    app = FastAPI(
        title=settings.APP_NAME,
        description="SmartOps access-control backend",
        version=settings.VERSION,
        lifespan=lifespan,
        debug=settings.DEBUG,
    )

    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_exception_handler(BaseAppError, access_exception_handler)
    setup_health_routes(app)

    return app
