"""SQLAlchemy backend: execute fragments on any SQLAlchemy ``Engine``.

Install the optional dependency before using this module::

    pip install "fragql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from fragql import create_sql_tag
    from fragql.backends.sqlalchemy_engine import SQLAlchemyBackend

    sql = create_sql_tag(SQLAlchemyBackend(create_engine("postgresql+psycopg://...")))

Statements are built with the ``named`` placeholder style (``:p1``, ``:p2``,
...) and executed through :func:`sqlalchemy.text`.  Engine calls block, so
each one runs in a worker thread.  ``all``/``run`` use their own transaction;
``batch`` runs every statement inside a single ``engine.begin()`` block.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, ClassVar

from fragql.backends.base import BoundStatement
from fragql.statement.results import QueryMeta, QueryResult, RunResult
from fragql.template.fragment import Primitive
from fragql.template.placeholders import NamedStyle

if TYPE_CHECKING:
    from sqlalchemy import Connection, Engine


class SQLAlchemyBackend:
    """Executes statements on a synchronous SQLAlchemy engine.

    Args:
        engine: The engine to execute on.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """

    placeholder_style: ClassVar[str] = NamedStyle.name

    def __init__(self, engine: Engine) -> None:
        try:
            import sqlalchemy  # noqa: F401
        except ImportError as exc:
            raise ImportError(
                "SQLAlchemy is required for SQLAlchemyBackend. "
                'Install it with: pip install "fragql[sqlalchemy]"'
            ) from exc
        self._engine = engine
        self._style = NamedStyle()

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> SQLAlchemyBackend:
        """Create the engine for ``url`` and wrap it.

        Extra keyword arguments are passed to :func:`sqlalchemy.create_engine`.
        """
        from sqlalchemy import create_engine

        return cls(create_engine(url, **kwargs))

    @property
    def engine(self) -> Engine:
        return self._engine

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
        with self._engine.begin() as conn:
            return self._execute(conn, query, values)

    def _execute_many(self, statements: list[BoundStatement]) -> list[QueryResult]:
        with self._engine.begin() as conn:
            return [self._execute(conn, s.query, s.values) for s in statements]

    def _execute(self, conn: Connection, query: str, values: list[Primitive]) -> QueryResult:
        from sqlalchemy import text

        start = time.perf_counter()
        if values:
            result = conn.execute(text(query), self._style.bind(values))
        else:
            result = conn.execute(text(query))

        if result.returns_rows:
            rows = [dict(row._mapping) for row in result]
            changes = 0
            last_row_id = None
        else:
            rows = []
            changes = max(result.rowcount, 0)
            last_row_id = result.lastrowid if changes else None
        duration = (time.perf_counter() - start) * 1000

        return QueryResult(
            results=rows,
            meta=QueryMeta(
                duration=duration,
                changes=changes,
                last_row_id=last_row_id,
                changed_db=changes > 0,
            ),
        )
