"""
SQLAlchemy-backed table store

Runs each store call as its own committed statement on an AsyncSession, which
mirrors the one-request-per-call behavior of the PostgREST backend.
"""

import uuid
from typing import Any, List, Sequence

from sqlalchemy import Table, Uuid, select, insert, update, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from customer_addresses.models.base import Base
from customer_addresses.stores.base import (
    Condition,
    Operator,
    OrderBy,
    RemoteStoreError,
    RemoteTableStore,
    Row,
)


class SQLAlchemyTableStore(RemoteTableStore):
    """Table store over the declarative metadata"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    def _table(self, name: str) -> Table:
        try:
            return Base.metadata.tables[name]
        except KeyError:
            raise RemoteStoreError(f"relation \"{name}\" does not exist")

    @staticmethod
    def _coerce(table: Table, column: str, value: Any) -> Any:
        if column not in table.c:
            raise RemoteStoreError(f"column \"{column}\" does not exist")
        if isinstance(table.c[column].type, Uuid) and isinstance(value, str):
            try:
                return uuid.UUID(value)
            except ValueError:
                raise RemoteStoreError(f"invalid input syntax for type uuid: \"{value}\"")
        return value

    def _where(self, table: Table, filters: Sequence[Condition]) -> list:
        clauses = []
        for condition in filters:
            value = self._coerce(table, condition.column, condition.value)
            column = table.c[condition.column]
            if condition.operator == Operator.EQ:
                clauses.append(column == value)
            elif condition.operator == Operator.NEQ:
                clauses.append(column != value)
            else:
                raise RemoteStoreError(f"unsupported operator {condition.operator}")
        return clauses

    def _values(self, table: Table, row: Row) -> Row:
        return {key: self._coerce(table, key, value) for key, value in row.items()}

    async def select(
        self,
        table: str,
        filters: Sequence[Condition] = (),
        order: Sequence[OrderBy] = (),
    ) -> List[Row]:
        tbl = self._table(table)
        stmt = select(tbl).where(*self._where(tbl, filters))
        for order_by in order:
            column = tbl.c[order_by.column]
            stmt = stmt.order_by(column.desc() if order_by.descending else column.asc())

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise RemoteStoreError(str(e), operation="select") from e
        return [dict(row) for row in result.mappings().all()]

    async def insert(self, table: str, row: Row) -> Row:
        tbl = self._table(table)
        stmt = insert(tbl).values(**self._values(tbl, row)).returning(*tbl.c)

        try:
            result = await self.db.execute(stmt)
            inserted = dict(result.mappings().one())
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RemoteStoreError(str(e), operation="insert") from e
        return inserted

    async def update(
        self, table: str, patch: Row, filters: Sequence[Condition]
    ) -> List[Row]:
        tbl = self._table(table)
        stmt = (
            update(tbl)
            .where(*self._where(tbl, filters))
            .values(**self._values(tbl, patch))
            .returning(*tbl.c)
        )

        try:
            result = await self.db.execute(stmt)
            updated = [dict(r) for r in result.mappings().all()]
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RemoteStoreError(str(e), operation="update") from e
        return updated

    async def delete(self, table: str, filters: Sequence[Condition]) -> None:
        tbl = self._table(table)
        stmt = delete(tbl).where(*self._where(tbl, filters))

        try:
            await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise RemoteStoreError(str(e), operation="delete") from e
