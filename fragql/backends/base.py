"""Backend capability contract.

The executor never talks to a driver directly.  It needs exactly three
coroutines from the store, described by :class:`SqlBackend`:

- ``all(query, values)`` – execute for read and return a :class:`QueryResult`.
- ``run(query, values)`` – execute for effect and return a :class:`RunResult`.
- ``batch(statements)`` – execute every :class:`BoundStatement` atomically,
  in one round trip, and return one :class:`QueryResult` per statement in
  request order.

Implementations must not bind parameters at all when ``values`` is empty.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, ClassVar, NamedTuple, Protocol

from fragql.template.fragment import Primitive

if TYPE_CHECKING:
    from fragql.statement.results import QueryResult, RunResult


class BoundStatement(NamedTuple):
    """A compiled ``{query, values}`` pair as handed to a backend."""

    query: str
    values: list[Primitive]


class SqlBackend(Protocol):
    """Structural type for stores a sql tag can execute against."""

    #: Name of the placeholder style the store's driver understands.
    placeholder_style: ClassVar[str]

    async def all(self, query: str, values: list[Primitive]) -> QueryResult: ...

    async def run(self, query: str, values: list[Primitive]) -> RunResult: ...

    async def batch(self, statements: Sequence[BoundStatement]) -> list[QueryResult]: ...
