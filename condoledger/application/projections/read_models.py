"""Storage port for projected read-model tables."""

import asyncio
import copy
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from contextvars import ContextVar
from typing import Any

Row = dict[str, Any]


class ReadModelStore(ABC):
    """Tables of rows keyed by a string primary key.

    Projectors write through ``upsert`` and query handlers read through
    ``get`` and ``find``. Writes made inside ``transaction()`` are undone
    if the block raises.
    """

    @abstractmethod
    async def get(self, table: str, key: str) -> Row | None:
        ...

    @abstractmethod
    async def upsert(self, table: str, key: str, row: Row) -> None:
        """Insert or fully replace the row stored under ``key``."""
        ...

    @abstractmethod
    async def find(self, table: str, **filters: Any) -> list[Row]:
        """Rows whose columns equal every given filter value, in key order."""
        ...

    @abstractmethod
    async def clear(self, *tables: str) -> None:
        ...

    @abstractmethod
    def transaction(self) -> AbstractAsyncContextManager[None]:
        ...


class InMemoryReadModelStore(ReadModelStore):
    def __init__(self) -> None:
        self.tables: dict[str, dict[str, Row]] = {}
        self._lock = asyncio.Lock()
        self._in_transaction: ContextVar[bool] = ContextVar(
            f"in_memory_read_models_{id(self)}", default=False
        )

    async def get(self, table: str, key: str) -> Row | None:
        row = self.tables.get(table, {}).get(key)
        return dict(row) if row is not None else None

    async def upsert(self, table: str, key: str, row: Row) -> None:
        self.tables.setdefault(table, {})[key] = dict(row)

    async def find(self, table: str, **filters: Any) -> list[Row]:
        rows = self.tables.get(table, {})
        return [
            dict(row)
            for _, row in sorted(rows.items())
            if all(row.get(column) == value for column, value in filters.items())
        ]

    async def clear(self, *tables: str) -> None:
        for table in tables or list(self.tables):
            self.tables.pop(table, None)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        if self._in_transaction.get():
            yield
            return
        async with self._lock:
            snapshot = copy.deepcopy(self.tables)
            token = self._in_transaction.set(True)
            try:
                yield
            except BaseException:
                self.tables = snapshot
                raise
            finally:
                self._in_transaction.reset(token)
