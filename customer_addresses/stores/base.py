"""
Remote relational store interface

Row-level CRUD over a network-accessible table. Authorization is enforced by
the store itself; callers still filter on the owner as well. There is no
multi-row transaction: every call is its own unit of work.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence


Row = Dict[str, Any]


class Operator(str, enum.Enum):
    """Filter operators supported by every backend"""

    EQ = "eq"
    NEQ = "neq"


@dataclass(frozen=True)
class Condition:
    """column <operator> value"""

    column: str
    operator: Operator
    value: Any

    @classmethod
    def eq(cls, column: str, value: Any) -> "Condition":
        return cls(column, Operator.EQ, value)

    @classmethod
    def neq(cls, column: str, value: Any) -> "Condition":
        return cls(column, Operator.NEQ, value)


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = False


class RemoteStoreError(Exception):
    """
    Transport, authorization or constraint failure reported by a store

    Args:
        message: human-readable reason from the store
        operation: select, insert, update or delete
    """

    def __init__(self, message: str, operation: Optional[str] = None):
        self.message = message
        self.operation = operation
        super().__init__(message)


class RemoteTableStore(ABC):
    """
    Request/response access to relational tables

    Filters are ANDed together. Implementations translate their native
    failures into RemoteStoreError.
    """

    @abstractmethod
    async def select(
        self,
        table: str,
        filters: Sequence[Condition] = (),
        order: Sequence[OrderBy] = (),
    ) -> List[Row]:
        """Rows matching every filter, in the requested order"""

    @abstractmethod
    async def insert(self, table: str, row: Row) -> Row:
        """Insert one row and return it with store-populated fields"""

    @abstractmethod
    async def update(
        self, table: str, patch: Row, filters: Sequence[Condition]
    ) -> List[Row]:
        """Apply patch to every matching row and return the updated rows"""

    @abstractmethod
    async def delete(self, table: str, filters: Sequence[Condition]) -> None:
        """Delete every matching row; matching nothing is not an error"""
