"""
Database models

Import every model here so metadata.create_all and Alembic can see it.
"""

from .base import (
    Base,
    TimestampMixin,
    get_engine,
    open_session,
    init_db,
    close_db,
    utcnow,
)
from .address import CustomerAddress, Panchayat, DEFAULT_ADDRESS_LABEL

__all__ = [
    "Base",
    "TimestampMixin",
    "get_engine",
    "open_session",
    "init_db",
    "close_db",
    "utcnow",
    "CustomerAddress",
    "Panchayat",
    "DEFAULT_ADDRESS_LABEL",
]
