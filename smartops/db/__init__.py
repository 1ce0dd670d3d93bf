"""Data-store handle construction."""

from smartops.db.database import Database, create_engine

__all__ = ["Database", "create_engine"]
