"""Composable SQL fragments and join lists.

A :class:`Fragment` is the value produced by invoking a sql tag: the literal
text of a template split around its interpolations, plus the interpolated
values themselves.  Fragments may be interleaved into other fragments; the
expander inlines them when the outermost fragment is built.

A :class:`JoinList` marks a list of primitives that should expand to
comma-separated placeholders, e.g. for ``IN (...)`` lists::

    ids = sql.join([1, 2, 3])
    sql("SELECT * FROM users WHERE id IN ({})", ids)
    # SELECT * FROM users WHERE id IN (?1, ?2, ?3)
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Union

from fragql.errors import SegmentMismatchError

if TYPE_CHECKING:
    from fragql.execute.executor import Executor
    from fragql.statement.prepared import PreparedStatement
    from fragql.statement.results import QueryResult, RunResult

#: A value that is bound as a single statement parameter.
Primitive = Union[str, int, float, bool, bytes, None]

#: Runtime types accepted as :data:`Primitive`.
PRIMITIVE_TYPES: tuple[type, ...] = (str, int, float, bool, bytes, type(None))

#: Anything that may be interleaved into a fragment.
Value = Union[Primitive, "Fragment", "JoinList"]


@dataclass(frozen=True)
class Fragment:
    """An immutable, reusable piece of templated SQL.

    Attributes:
        segments: Literal SQL text, one more entry than ``values``.
        values: Interleaved values (primitives, fragments or join lists).
        executor: The executor of the tag that created this fragment.  Only
            used by the ``build``/``all``/``run`` conveniences; it plays no
            part in expansion, so fragments from different tags compose.
    """

    segments: tuple[str, ...]
    values: tuple[Value, ...] = ()
    executor: Executor | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "segments", tuple(self.segments))
        object.__setattr__(self, "values", tuple(self.values))
        if len(self.segments) != len(self.values) + 1:
            raise SegmentMismatchError(len(self.segments), len(self.values))

    def build(self) -> PreparedStatement[dict[str, Any]]:
        """Compile this fragment into a statement without executing it."""
        from fragql.statement.prepared import PreparedStatement

        return PreparedStatement.compile(self, self.executor)

    async def all(self) -> QueryResult:
        """Build and execute for read, returning every row."""
        return await self.build().all()

    async def run(self) -> RunResult:
        """Build and execute for effect, returning metadata only."""
        return await self.build().run()


@dataclass(frozen=True)
class JoinList:
    """Primitives destined to expand as comma-separated placeholders."""

    values: tuple[Primitive, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def __len__(self) -> int:
        return len(self.values)

    def as_fragment(self) -> Fragment:
        """Return the synthetic fragment ``["", ", ", ..., ""]`` over the values.

        Only meaningful for a non-empty list; the expander renders an empty
        list as ``NULL`` without calling this.
        """
        if not self.values:
            return Fragment(("",))
        separators = (", ",) * (len(self.values) - 1)
        return Fragment(("",) + separators + ("",), self.values)


def join(values: Iterable[Primitive]) -> JoinList:
    """Return a :class:`JoinList` over ``values``.

    ``join([])`` expands to the literal ``NULL`` so that ``IN (...)`` stays
    valid SQL; any other list expands to one placeholder per element.
    """
    return JoinList(tuple(values))


def fragment(segments: Sequence[str], *values: Value) -> Fragment:
    """Create an unbound fragment from literal segments and interleaved values.

    This is the composition primitive without an executor; fragments made
    this way can be built and nested but not executed.
    """
    return Fragment(tuple(segments), values)
