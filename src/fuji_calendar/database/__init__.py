"""Database module for the Fuji event store.

This module provides:
- SQLAlchemy async database connection
- Location and precomputed event models
"""

from fuji_calendar.database.connection import (
    close_db,
    create_tables,
    get_db,
    get_db_session,
    init_db,
)
from fuji_calendar.database.models import (
    Base,
    Location as LocationModel,
    LocationEvent,
)

__all__ = [
    # Connection
    "close_db",
    "create_tables",
    "get_db",
    "get_db_session",
    "init_db",
    # Models
    "Base",
    "LocationModel",
    "LocationEvent",
]
