"""
Observability for the SmartOps access backend.

>>> from smartops.monitoring import configure_logging, get_logger
>>> from smartops.monitoring.health import setup_health_routes
"""

from smartops.monitoring.logging import (
    bind_request_id,
    clear_context,
    configure_logging,
    get_logger,
    redact_pii,
    sanitize_log_message,
)

__all__ = [
    "bind_request_id",
    "clear_context",
    "configure_logging",
    "get_logger",
    "redact_pii",
    "sanitize_log_message",
]
