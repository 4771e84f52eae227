"""Statement execution and instrumentation.

An :class:`Executor` binds a backend to the hooks in :class:`TagOptions` and
to a placeholder style.  Every ``all()``, ``run()`` and ``batch()`` goes
through :meth:`Executor.dispatch`, which

1. takes the next id from the executor's own counter (first id is 1),
2. calls ``before_query(id, queries)``,
3. awaits the backend call, timing it with ``time.perf_counter``,
4. calls ``after_query(id, queries, results, duration_ms)``.

Ids are per executor, so independent tags (for example one per test) never
share a sequence.  The counter is lock-protected, which keeps ids unique when
one tag is used from several threads.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from fragql.backends.base import SqlBackend
from fragql.execute.options import TagOptions
from fragql.statement.prepared import CompiledStatement, MappedStatement
from fragql.statement.results import QueryResult, RunResult, as_query_result, as_run_result
from fragql.template.expander import TemplateExpander
from fragql.template.placeholders import PlaceholderStyle, PlaceholderStyles

logger = logging.getLogger(__name__)

R = TypeVar("R")


class Executor:
    """Runs compiled statements against a backend.

    Args:
        backend: Store implementing the :class:`SqlBackend` capabilities.
        options: Instrumentation hooks; defaults to none.
        placeholder_style: Style instance or registered name.  Defaults to
            the backend's ``placeholder_style`` attribute, then ``numbered``.
    """

    def __init__(
        self,
        backend: SqlBackend,
        options: TagOptions | None = None,
        *,
        placeholder_style: PlaceholderStyle | str | None = None,
    ) -> None:
        self._backend = backend
        self._options = options or TagOptions()
        style = PlaceholderStyles.resolve(
            placeholder_style, getattr(backend, "placeholder_style", None)
        )
        self._expander = TemplateExpander(style)
        self._last_id = 0
        self._id_lock = threading.Lock()

    @property
    def backend(self) -> SqlBackend:
        return self._backend

    @property
    def options(self) -> TagOptions:
        return self._options

    @property
    def expander(self) -> TemplateExpander:
        return self._expander

    def next_id(self) -> int:
        """Return the next query id (1, 2, 3, ...)."""
        with self._id_lock:
            self._last_id += 1
            return self._last_id

    # ------------------------------------------------------------------
    # Single statements
    # ------------------------------------------------------------------

    async def all(self, statement: CompiledStatement) -> QueryResult:
        """Execute ``statement`` for read, applying its mapper to the rows.

        The after-hook sees the rows as returned by the backend; mapping
        happens afterwards.
        """

        async def call() -> list[QueryResult]:
            raw = await self._backend.all(statement.query, list(statement.values))
            return [self.query_result(raw)]

        (result,) = await self.dispatch([statement.query], call)
        if isinstance(statement, MappedStatement) and isinstance(result, QueryResult):
            result.apply_mapper(statement.mapper)
        return result

    async def run(self, statement: CompiledStatement) -> RunResult:
        """Execute ``statement`` for effect and return its metadata."""

        async def call() -> list[RunResult]:
            raw = await self._backend.run(statement.query, list(statement.values))
            return [self.run_result(raw)]

        (result,) = await self.dispatch([statement.query], call)
        return result

    async def batch(self, statements: Sequence[CompiledStatement]) -> list[QueryResult]:
        """Execute ``statements`` as one atomic backend batch."""
        from fragql.execute.batch import BatchCoordinator

        return await BatchCoordinator(self).execute(statements)

    def query_result(self, raw: Any) -> QueryResult:
        """Coerce a backend answer to ``all`` or to a batch slot."""
        return as_query_result(raw)

    def run_result(self, raw: Any) -> RunResult:
        """Coerce a backend answer to ``run``."""
        return as_run_result(raw)

    # ------------------------------------------------------------------
    # Instrumented dispatch
    # ------------------------------------------------------------------

    async def dispatch(
        self,
        queries: list[str],
        call: Callable[[], Awaitable[list[R]]],
    ) -> list[R]:
        """Await ``call`` between the before and after hooks.

        Args:
            queries: Query texts reported to the hooks.
            call: Zero-argument coroutine function performing the backend
                call and returning one result per query.

        Returns:
            The results returned by ``call``.

        Raises:
            Exception: Whatever the hooks or the backend raise, unchanged.
        """
        query_id = self.next_id()
        before_query = self._options.before_query
        after_query = self._options.after_query

        if before_query is not None:
            before_query(query_id, queries)

        logger.debug("query %d: dispatching %d statement(s)", query_id, len(queries))
        start = time.perf_counter()
        results = await call()
        duration = (time.perf_counter() - start) * 1000
        logger.debug("query %d: finished in %.2f ms", query_id, duration)

        if after_query is not None:
            try:
                after_query(query_id, queries, list(results), duration)
            except Exception:
                logger.warning(
                    "after_query hook failed for query %d; its %d statement(s) "
                    "already executed",
                    query_id,
                    len(queries),
                )
                raise
        return results
