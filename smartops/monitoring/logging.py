"""
Structured logging with PII sanitization.

This module provides structured logging using structlog with:
- JSON output outside development
- Pretty console output for development
- Automatic PII redaction (emails, bearer tokens, password hashes)
- Control-character escaping against log injection

Examples
--------
>>> from smartops.monitoring import get_logger
>>> logger = get_logger(__name__)
>>> logger.info("Role assigned", user_id="123", role_id=4)
"""

from logging import INFO, StreamHandler, root
from logging.handlers import RotatingFileHandler
from pathlib import Path
from re import Pattern
from re import compile as re_compile

from structlog import configure
from structlog import get_logger as struct_logger
from structlog.contextvars import bind_contextvars, clear_contextvars, merge_contextvars
from structlog.dev import ConsoleRenderer
from structlog.processors import (
    JSONRenderer,
    StackInfoRenderer,
    UnicodeDecoder,
    add_log_level,
    format_exc_info,
)
from structlog.stdlib import (
    BoundLogger,
    LoggerFactory,
    PositionalArgumentsFormatter,
    ProcessorFormatter,
    add_logger_name,
    filter_by_level,
)
from structlog.types import EventDict, Processor, WrappedLogger

from smartops.configs.settings import Settings
from smartops.utils.helpers import today_str

# Order matters: more specific patterns come first
PII_PATTERNS: list[tuple[Pattern, str]] = [
    (re_compile(r"eyJ[a-zA-Z0-9_-]*\.eyJ[a-zA-Z0-9_-]*\.[a-zA-Z0-9_-]*"), "[REDACTED_JWT]"),
    (re_compile(r"\$argon2[a-z]*\$[^\s'\"]+"), "[REDACTED_HASH]"),
    (re_compile(r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"), "[REDACTED_EMAIL]"),
]

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {"password", "password_hash", "token", "access_token", "authorization"},
)

CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""})


def sanitize_log_message(message: str) -> str:
    r"""
    Escape control characters in a log message.

    Examples:
    --------
    >>> sanitize_log_message("Hello\nWorld")
    'Hello\\nWorld'
    """
    return message.translate(CONTROL_CHARS)


def redact_pii(message: str) -> str:
    """
    Redact PII patterns from log messages.

    Examples:
    --------
    >>> redact_pii("User user@example.com logged in")
    'User [REDACTED_EMAIL] logged in'
    """
    for pattern, replacement in PII_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def add_timestamp(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    event_dict["timestamp"] = today_str()
    return event_dict


def sanitize_event_dict(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Redact sensitive keys and PII from every string value of an event."""
    for key, value in event_dict.items():
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = "[REDACTED]"
        elif isinstance(value, str):
            event_dict[key] = redact_pii(sanitize_log_message(value))
    return event_dict


def get_processors(settings: Settings, *, colors: bool = True) -> list[Processor]:
    """
    Get the list of structlog processors based on environment.

    Args:
        settings: Application settings.
        colors: Whether to enable colors in ConsoleRenderer.

    Returns:
        List of processors, renderer last.
    """
    processors: list[Processor] = [
        merge_contextvars,
        add_log_level,
        add_timestamp,
        sanitize_event_dict,
    ]

    if settings.ENVIRONMENT == "development":
        processors.append(ConsoleRenderer(colors=colors, pad_level=False))
    else:
        processors.append(JSONRenderer())

    return processors


def configure_logging(settings: Settings) -> None:
    """Configure structlog over the stdlib root logger."""
    # Hot-reload safe: drop handlers installed by a previous run
    root.handlers.clear()
    root.setLevel(settings.LOG_LEVEL.upper())

    configure(
        processors=[
            filter_by_level,
            merge_contextvars,
            add_logger_name,
            add_log_level,
            PositionalArgumentsFormatter(),
            StackInfoRenderer(),
            format_exc_info,
            UnicodeDecoder(),
            ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=True,
    )

    pre_chain: list[Processor] = [add_log_level, add_timestamp]

    console_handler = StreamHandler()
    console_handler.setFormatter(
        ProcessorFormatter(
            processors=[
                ProcessorFormatter.remove_processors_meta,
                *get_processors(settings, colors=True),
            ],
            foreign_pre_chain=pre_chain,
        ),
    )
    root.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
        file_handler.setLevel(INFO)
        file_handler.setFormatter(
            ProcessorFormatter(
                processors=[
                    ProcessorFormatter.remove_processors_meta,
                    *get_processors(settings, colors=False),
                ],
                foreign_pre_chain=pre_chain,
            ),
        )
        root.addHandler(file_handler)


def get_logger(name: str) -> BoundLogger:
    """
    Get a structured logger instance.

    Examples:
    --------
    >>> logger = get_logger("smartops.services.access_management")
    >>> logger.info("User registered", user_id="123")
    """
    return struct_logger(name)


def bind_request_id(request_id: str) -> None:
    bind_contextvars(request_id=request_id)


def clear_context() -> None:
    clear_contextvars()
