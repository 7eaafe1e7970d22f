# blog/services/store.py

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
from sqlalchemy import select, insert, update, delete, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError

from blog.errors import ConstraintError, FetchError, UnknownTableError
from blog.models.content import TABLES

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
OrderBy = Sequence[Tuple[str, bool]]  # (column, descending)


class DataStore(ABC):
    """
    Table-style access to the blog database.
    Reads return plain dict rows; a missing row is None, never an exception.
    """

    @abstractmethod
    def select(
        self,
        table: str,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        not_null: Sequence[str] = (),
        order_by: OrderBy = (),
        limit: Optional[int] = None,
    ) -> List[Row]:
        ...

    @abstractmethod
    def select_one(
        self,
        table: str,
        *,
        eq: Optional[Mapping[str, Any]] = None,
        not_null: Sequence[str] = (),
    ) -> Optional[Row]:
        ...

    @abstractmethod
    def insert(self, table: str, payload: Mapping[str, Any]) -> Row:
        ...

    @abstractmethod
    def update(self, table: str, row_id: Any, payload: Mapping[str, Any]) -> Optional[Row]:
        ...

    @abstractmethod
    def delete(self, table: str, row_id: Any) -> bool:
        ...

    @abstractmethod
    def call(self, procedure: str, args: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    def ping(self) -> None:
        ...


# Procedures are single statements so each one is atomic on its own.
PROCEDURES = {
    "increment_view_count": text(
        "UPDATE posts SET view_count = view_count + 1 WHERE slug = :post_slug"
    ),
}


class SqlDataStore(DataStore):
    """DataStore over a SQLAlchemy engine (PostgreSQL in production, SQLite locally)."""

    def __init__(self, engine: Engine):
        self._engine = engine

    @staticmethod
    def _table(name: str):
        try:
            return TABLES[name]
        except KeyError:
            raise UnknownTableError(name) from None

    @staticmethod
    def _where(table, stmt, eq: Optional[Mapping[str, Any]], not_null: Sequence[str]):
        for column, value in (eq or {}).items():
            stmt = stmt.where(table.c[column] == value)
        for column in not_null:
            stmt = stmt.where(table.c[column].is_not(None))
        return stmt

    def select(self, table, *, eq=None, not_null=(), order_by=(), limit=None):
        t = self._table(table)
        stmt = self._where(t, select(t), eq, not_null)
        for column, descending in order_by:
            stmt = stmt.order_by(t.c[column].desc() if descending else t.c[column].asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            with self._engine.connect() as conn:
                return [dict(r) for r in conn.execute(stmt).mappings().all()]
        except SQLAlchemyError as ex:
            logger.error("store: select on %s failed: %s", table, ex)
            raise FetchError(str(ex)) from ex

    def select_one(self, table, *, eq=None, not_null=()):
        t = self._table(table)
        stmt = self._where(t, select(t), eq, not_null).limit(1)
        try:
            with self._engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as ex:
            logger.error("store: select_one on %s failed: %s", table, ex)
            raise FetchError(str(ex)) from ex
        return dict(row) if row is not None else None

    def _write(self, table: str, stmt) -> Optional[Row]:
        try:
            with self._engine.begin() as conn:
                row = conn.execute(stmt).mappings().first()
        except (IntegrityError, DataError) as ex:
            # Constraint violations are user errors; keep only the driver message
            raise ConstraintError(str(ex.orig)) from ex
        except SQLAlchemyError as ex:
            logger.error("store: write on %s failed: %s", table, ex)
            raise FetchError(str(ex)) from ex
        return dict(row) if row is not None else None

    def insert(self, table, payload):
        t = self._table(table)
        return self._write(table, insert(t).values(**payload).returning(*t.c))

    def update(self, table, row_id, payload):
        t = self._table(table)
        if not payload:
            return self.select_one(table, eq={"id": row_id})
        return self._write(table, update(t).where(t.c.id == row_id).values(**payload).returning(*t.c))

    def delete(self, table, row_id):
        t = self._table(table)
        return self._write(table, delete(t).where(t.c.id == row_id).returning(t.c.id)) is not None

    def call(self, procedure, args):
        stmt = PROCEDURES.get(procedure)
        if stmt is None:
            raise FetchError(f"unknown procedure: {procedure}")
        try:
            with self._engine.begin() as conn:
                conn.execute(stmt, dict(args))
        except SQLAlchemyError as ex:
            logger.error("store: call %s failed: %s", procedure, ex)
            raise FetchError(str(ex)) from ex

    def ping(self):
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as ex:
            raise FetchError(str(ex)) from ex
