from datetime import UTC, datetime

from fastapi import Request


def host(request: Request) -> str:
    """Return the host IP address."""
    return request.client.host if request.client else "unknown"


def today_str() -> str:
    """Return the current local time as a string."""
    return datetime.now(datetime.now().astimezone().tzinfo).strftime(
        "%Y-%m-%d %H:%M:%S",
    )


def utcnow() -> datetime:
    """Timezone-aware now, truncated to whole seconds."""
    return datetime.now(tz=UTC).replace(microsecond=0)
