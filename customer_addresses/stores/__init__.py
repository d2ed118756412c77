"""
Remote relational store backends
"""

from .base import (
    Condition,
    Operator,
    OrderBy,
    RemoteStoreError,
    RemoteTableStore,
    Row,
)
from .sqlalchemy_store import SQLAlchemyTableStore
from .postgrest_store import PostgRESTTableStore

__all__ = [
    "Condition",
    "Operator",
    "OrderBy",
    "RemoteStoreError",
    "RemoteTableStore",
    "Row",
    "SQLAlchemyTableStore",
    "PostgRESTTableStore",
]
