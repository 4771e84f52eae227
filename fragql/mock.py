"""A sql tag that executes against a pluggable handler instead of a store.

Use it to unit-test code that builds statements::

    sql = create_mock_sql_tag()
    await find_user(sql, user_id=1)
    assert sql.handler.calls == [("all", "SELECT * FROM users WHERE id = ?1", [1])]

The handler receives exactly what a backend would: ``all(query, values)``,
``run(query, values)`` and ``batch(statements)``.  Its methods may be plain
functions or coroutines, so ``unittest.mock.Mock`` and ``AsyncMock`` work as
handlers too.  Mappers are applied as usual; instrumentation hooks never
fire.
"""
from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar

from fragql.backends.base import BoundStatement
from fragql.execute.executor import Executor
from fragql.statement.results import QueryMeta, QueryResult, RunResult
from fragql.tag import SqlTag
from fragql.template.fragment import Primitive

R = TypeVar("R")


class MockHandler(Protocol):
    """What a mock tag needs from its handler; results may be awaitable."""

    def all(self, query: str, values: list[Primitive]) -> Any: ...

    def run(self, query: str, values: list[Primitive]) -> Any: ...

    def batch(self, statements: Sequence[BoundStatement]) -> Any: ...


class MockSqlHandler:
    """Default handler: records every call and answers with canned rows.

    Args:
        rows: Rows returned by every ``all()`` and by each batch slot.

    Attributes:
        calls: ``(method, query, values)`` tuples in call order; a batch is
            recorded as ``("batch", [query, ...], [values, ...])``.
    """

    def __init__(self, rows: Sequence[Any] | None = None) -> None:
        self.rows: list[Any] = list(rows or [])
        self.calls: list[tuple[str, Any, Any]] = []

    def all(self, query: str, values: list[Primitive]) -> QueryResult:
        self.calls.append(("all", query, values))
        return QueryResult(results=list(self.rows), meta=QueryMeta())

    def run(self, query: str, values: list[Primitive]) -> RunResult:
        self.calls.append(("run", query, values))
        return RunResult(meta=QueryMeta())

    def batch(self, statements: Sequence[BoundStatement]) -> list[QueryResult]:
        self.calls.append(
            ("batch", [s.query for s in statements], [s.values for s in statements])
        )
        return [QueryResult(results=list(self.rows), meta=QueryMeta()) for _ in statements]


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class _HandlerBackend:
    """Adapts a possibly synchronous handler to the async backend contract."""

    def __init__(self, handler: MockHandler) -> None:
        self._handler = handler

    async def all(self, query: str, values: list[Primitive]) -> Any:
        return await _resolve(self._handler.all(query, values))

    async def run(self, query: str, values: list[Primitive]) -> Any:
        return await _resolve(self._handler.run(query, values))

    async def batch(self, statements: Sequence[BoundStatement]) -> Any:
        return await _resolve(self._handler.batch(statements))


class MockExecutor(Executor):
    """Executor that calls the handler directly, without ids or hooks.

    Mapping answers are validated into result models so mappers can run;
    any other answer (a model, a ``Mock``, a plain list) is returned as-is.
    """

    def __init__(self, handler: MockHandler) -> None:
        super().__init__(_HandlerBackend(handler))
        self.handler = handler

    async def dispatch(
        self,
        queries: list[str],
        call: Callable[[], Awaitable[list[R]]],
    ) -> list[R]:
        return await call()

    def query_result(self, raw: Any) -> Any:
        if isinstance(raw, Mapping):
            return super().query_result(raw)
        return raw

    def run_result(self, raw: Any) -> Any:
        if isinstance(raw, Mapping):
            return super().run_result(raw)
        return raw


class MockSqlTag(SqlTag):
    """A :class:`SqlTag` whose statements go to :attr:`handler`."""

    def __init__(self, handler: MockHandler) -> None:
        super().__init__(MockExecutor(handler))
        self.handler = handler


def create_mock_sql_tag(handler: MockHandler | None = None) -> MockSqlTag:
    """Create a mock tag; defaults to a fresh :class:`MockSqlHandler`."""
    return MockSqlTag(handler if handler is not None else MockSqlHandler())
