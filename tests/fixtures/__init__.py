"""Test fixtures: a recording fake backend and the sample SQLite DDL."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from fragql.backends.base import BoundStatement
from fragql.statement.results import QueryMeta, QueryResult, RunResult

_FIXTURES_DIR = Path(__file__).parent


def load_ddl() -> str:
    """Return the sample DDL SQL string for SQLite."""
    return (_FIXTURES_DIR / "ddl_sqlite.sql").read_text()


class RecordingBackend:
    """Backend double that records calls and answers with canned results.

    Args:
        rows: Rows returned by every ``all()``.
        error: When set, every capability raises it after recording the call.

    Batch slot ``i`` always contains the single row ``{"slot": i}``.
    """

    placeholder_style = "numbered"

    def __init__(
        self,
        rows: Sequence[dict[str, Any]] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.rows = [dict(r) for r in rows or []]
        self.error = error
        self.calls: list[tuple[Any, ...]] = []

    async def all(self, query: str, values: list[Any]) -> QueryResult:
        self.calls.append(("all", query, list(values)))
        if self.error is not None:
            raise self.error
        return QueryResult(
            results=[dict(r) for r in self.rows],
            meta=QueryMeta(duration=0.5),
        )

    async def run(self, query: str, values: list[Any]) -> RunResult:
        self.calls.append(("run", query, list(values)))
        if self.error is not None:
            raise self.error
        return RunResult(meta=QueryMeta(duration=0.5, changes=1, changed_db=True))

    async def batch(self, statements: Sequence[BoundStatement]) -> list[QueryResult]:
        self.calls.append(("batch", [(s.query, list(s.values)) for s in statements]))
        if self.error is not None:
            raise self.error
        return [
            QueryResult(results=[{"slot": i}], meta=QueryMeta(duration=0.5))
            for i, _ in enumerate(statements)
        ]
