"""Compiled, executable statements.

``Fragment.build()`` expands a fragment tree once and returns a
:class:`PreparedStatement`.  A prepared statement can be executed directly
or given exactly one row mapper with :meth:`PreparedStatement.map`, which
returns a :class:`MappedStatement`.  Mapped statements have no ``map`` of
their own: to transform rows further, compose inside the one mapper::

    stmt = (
        sql("SELECT id, name FROM users WHERE id = {}", 1)
        .build()
        .map(lambda row: {**row, "name": row["name"].upper()})
    )
    result = await stmt.all()

The row type parameters are for static type checkers only.
"""
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

from fragql.backends.base import BoundStatement
from fragql.errors import UnboundStatementError
from fragql.statement.results import QueryResult, RunResult
from fragql.template.expander import TemplateExpander
from fragql.template.fragment import Fragment, Primitive

if TYPE_CHECKING:
    from fragql.execute.executor import Executor

RowT = TypeVar("RowT")
MappedT = TypeVar("MappedT")


class _Executable:
    """Execution entry points shared by both statement variants."""

    query: str
    values: list[Primitive]
    executor: Executor | None

    def bound(self) -> BoundStatement:
        """Return the ``(query, values)`` pair handed to backends."""
        return BoundStatement(self.query, list(self.values))

    def _require_executor(self) -> Executor:
        if self.executor is None:
            raise UnboundStatementError(self.query)
        return self.executor

    async def all(self) -> QueryResult:
        """Execute for read and return every row plus metadata."""
        return await self._require_executor().all(self)

    async def run(self) -> RunResult:
        """Execute for effect and return metadata only.

        A mapper, if any, is not applied: there are no rows to map.
        """
        return await self._require_executor().run(self)


@dataclass(frozen=True)
class PreparedStatement(_Executable, Generic[RowT]):
    """A compiled statement without a row mapper.

    Statements hash by query text and compare by query and values.  Mapped
    variants, bound pairs and backends each receive their own copy of
    ``values``.

    Attributes:
        query: Flat SQL text with placeholders.
        values: Deduplicated parameters; entry N binds placeholder N.
        executor: Executor that runs the statement, if any.
    """

    query: str
    values: list[Primitive] = field(hash=False)
    executor: Executor | None = field(default=None, compare=False, repr=False)

    @classmethod
    def compile(
        cls,
        fragment: Fragment,
        executor: Executor | None = None,
    ) -> PreparedStatement[dict[str, Any]]:
        """Expand ``fragment`` with the executor's placeholder style.

        Unbound fragments are expanded with the default ``?N`` style.
        """
        expander = executor.expander if executor is not None else TemplateExpander()
        query, values = expander.expand(fragment)
        return cls(query, values, executor)

    def map(self, mapper: Callable[[RowT], MappedT]) -> MappedStatement[RowT, MappedT]:
        """Return a statement sharing this query whose rows pass through ``mapper``."""
        return MappedStatement(self.query, list(self.values), mapper, self.executor)


@dataclass(frozen=True)
class MappedStatement(_Executable, Generic[RowT, MappedT]):
    """A compiled statement with its single row mapper.

    Attributes:
        query: Flat SQL text with placeholders.
        values: Deduplicated parameters; entry N binds placeholder N.
        mapper: Applied to each raw row returned by ``all()`` or ``batch()``.
        executor: Executor that runs the statement, if any.
    """

    query: str
    values: list[Primitive] = field(hash=False)
    mapper: Callable[[RowT], MappedT]
    executor: Executor | None = field(default=None, compare=False, repr=False)


#: Anything ``batch()`` accepts.
CompiledStatement = Union[PreparedStatement[Any], MappedStatement[Any, Any]]
