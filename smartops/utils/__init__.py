from smartops.utils.helpers import host, today_str, utcnow

__all__ = ["host", "today_str", "utcnow"]
