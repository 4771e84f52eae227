"""Atomic multi-statement execution.

``BatchCoordinator`` sends an ordered list of compiled statements to the
backend's ``batch`` capability in a single call, under a single query id.
The backend guarantees that result *i* belongs to statement *i*; the
coordinator does not reorder and does not retry.  Once the call returns,
each :class:`MappedStatement` gets its own mapper applied to its own result
slot; every other slot is returned as the backend produced it.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from fragql.errors import BatchResultMismatchError, UncompiledBatchMemberError
from fragql.statement.prepared import CompiledStatement, MappedStatement, PreparedStatement
from fragql.statement.results import QueryResult

if TYPE_CHECKING:
    from fragql.execute.executor import Executor


class BatchCoordinator:
    """Runs one batch through an :class:`Executor`.

    Args:
        executor: Supplies the backend, the hooks and the id counter.
    """

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    async def execute(self, statements: Sequence[CompiledStatement]) -> list[QueryResult]:
        """Execute ``statements`` in one backend round trip.

        Args:
            statements: Compiled statements, typically ``fragment.build()``
                or ``fragment.build().map(fn)``.

        Returns:
            One :class:`QueryResult` per statement, in request order.

        Raises:
            UncompiledBatchMemberError: If a member is not a compiled
                statement (e.g. a fragment that was never built).
            BatchResultMismatchError: If the backend answers with a
                different number of results.
        """
        members = list(statements)
        for position, statement in enumerate(members):
            if not isinstance(statement, (PreparedStatement, MappedStatement)):
                raise UncompiledBatchMemberError(position, type(statement).__name__)

        bound = [statement.bound() for statement in members]
        executor = self._executor

        async def call() -> list[QueryResult]:
            raw_results = await executor.backend.batch(bound)
            results = [executor.query_result(raw) for raw in raw_results]
            if len(results) != len(members):
                raise BatchResultMismatchError(len(members), len(results))
            return results

        results = await executor.dispatch([s.query for s in bound], call)

        for statement, result in zip(members, results):
            if isinstance(statement, MappedStatement) and isinstance(result, QueryResult):
                result.apply_mapper(statement.mapper)
        return results
