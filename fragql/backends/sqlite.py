"""SQLite backend over the standard-library ``sqlite3`` driver.

SQLite understands ``?N`` placeholders natively, so statements are executed
exactly as built.  Driver calls block, so each one runs in a worker thread
via :func:`asyncio.to_thread`; a lock serializes access to the connection,
which must therefore be opened with ``check_same_thread=False``
(:meth:`SQLiteBackend.connect` does this).

Transactions: every ``all``/``run`` commits on success.  A ``batch`` opens an
explicit savepoint before its first statement, so DDL and DML alike are
rolled back if any statement fails, whatever the connection's
``isolation_level`` (``None`` included).
"""
from __future__ import annotations

import asyncio
import os
import sqlite3
import threading
import time
from collections.abc import Sequence
from typing import Any, ClassVar

from fragql.backends.base import BoundStatement
from fragql.statement.results import QueryMeta, QueryResult, RunResult
from fragql.template.fragment import Primitive

_BATCH_SAVEPOINT = "fragql_batch"


class SQLiteBackend:
    """Executes statements on one ``sqlite3`` connection.

    Args:
        connection: An open connection usable from worker threads.
    """

    placeholder_style: ClassVar[str] = "numbered"

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection
        self._lock = threading.Lock()

    @classmethod
    def connect(cls, database: str | os.PathLike[str] = ":memory:", **kwargs: Any) -> SQLiteBackend:
        """Open ``database`` and wrap the connection.

        Extra keyword arguments are passed to :func:`sqlite3.connect`.
        """
        kwargs.setdefault("check_same_thread", False)
        return cls(sqlite3.connect(database, **kwargs))

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._conn.close()

    # ------------------------------------------------------------------
    # Capabilities
    # ------------------------------------------------------------------

    async def all(self, query: str, values: list[Primitive]) -> QueryResult:
        return await asyncio.to_thread(self._execute_one, query, values)

    async def run(self, query: str, values: list[Primitive]) -> RunResult:
        result = await asyncio.to_thread(self._execute_one, query, values)
        return RunResult(success=result.success, meta=result.meta)

    async def batch(self, statements: Sequence[BoundStatement]) -> list[QueryResult]:
        return await asyncio.to_thread(self._execute_many, list(statements))

    # ------------------------------------------------------------------
    # Blocking helpers (worker thread)
    # ------------------------------------------------------------------

    def _execute_one(self, query: str, values: list[Primitive]) -> QueryResult:
        with self._lock, self._conn:
            return self._execute(query, values)

    def _execute_many(self, statements: list[BoundStatement]) -> list[QueryResult]:
        with self._lock:
            self._conn.execute(f"SAVEPOINT {_BATCH_SAVEPOINT}")
            try:
                results = [self._execute(s.query, s.values) for s in statements]
            except BaseException:
                # some errors make SQLite abandon the transaction on its own
                if self._conn.in_transaction:
                    self._conn.execute(f"ROLLBACK TO SAVEPOINT {_BATCH_SAVEPOINT}")
                    self._conn.execute(f"RELEASE SAVEPOINT {_BATCH_SAVEPOINT}")
                raise
            self._conn.execute(f"RELEASE SAVEPOINT {_BATCH_SAVEPOINT}")
            if self._conn.in_transaction:
                self._conn.commit()
            return results

    def _execute(self, query: str, values: list[Primitive]) -> QueryResult:
        start = time.perf_counter()
        if values:
            cursor = self._conn.execute(query, values)
        else:
            cursor = self._conn.execute(query)
        rows = _fetch_dicts(cursor)
        duration = (time.perf_counter() - start) * 1000

        # rowcount is -1 for plain reads and final once RETURNING rows are fetched
        changes = max(cursor.rowcount, 0)
        return QueryResult(
            results=rows,
            meta=QueryMeta(
                duration=duration,
                changes=changes,
                last_row_id=cursor.lastrowid if changes else None,
                changed_db=changes > 0,
            ),
        )


def _fetch_dicts(cursor: sqlite3.Cursor) -> list[dict[str, Any]]:
    if cursor.description is None:
        return []
    columns = [d[0] for d in cursor.description]
    return [dict(zip(columns, row)) for row in cursor.fetchall()]
