"""The sql tag: fragment construction, batching and join lists.

A tag is created once per backend and then used to write every statement::

    sql = create_sql_tag(SQLiteBackend.connect("app.db"))

    active = sql("active = {}", True)
    stmt = sql("SELECT * FROM users WHERE {} AND name = {name}", active, name="Alice")

    rows = await stmt.all()
    await sql("DELETE FROM users WHERE id IN ({})", sql.join([1, 2, 3])).run()

Two invocation forms produce the same :class:`Fragment`:

- ``sql("... {} ... {name}", *args, **kwargs)`` – a ``str.format``-style
  template whose replacement fields become interleaved values.  Write
  literal braces as ``{{`` and ``}}``.
- ``sql(["... ", " ... ", ""], *values)`` (or :meth:`SqlTag.fragment`) – the
  literal segments and values given directly.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from fragql.backends.base import SqlBackend
from fragql.errors import TemplateFormatError
from fragql.execute.executor import Executor
from fragql.execute.options import AfterQueryHook, BeforeQueryHook, TagOptions
from fragql.statement.prepared import CompiledStatement
from fragql.statement.results import QueryResult
from fragql.template.formatting import split_format_template
from fragql.template.fragment import Fragment, JoinList, Primitive, Value, join
from fragql.template.placeholders import PlaceholderStyle


class SqlTag:
    """Creates fragments bound to one :class:`Executor`.

    Args:
        executor: Runs the statements built from this tag's fragments.
    """

    def __init__(self, executor: Executor) -> None:
        self._executor = executor

    @property
    def executor(self) -> Executor:
        return self._executor

    def __call__(self, template: str | Sequence[str], *args: Any, **kwargs: Any) -> Fragment:
        """Create a fragment from a format-string template or from literal segments.

        Raises:
            TemplateFormatError: If the template is malformed, an argument is
                missing, or keyword arguments accompany a segment list.
            SegmentMismatchError: If a segment list does not have exactly one
                more entry than there are values.
        """
        if isinstance(template, str):
            segments, values = split_format_template(template, args, kwargs)
            return self.fragment(segments, *values)
        if kwargs:
            raise TemplateFormatError(
                "Keyword arguments are only accepted together with a format-string template."
            )
        return self.fragment(template, *args)

    def fragment(self, segments: Sequence[str], *values: Value) -> Fragment:
        """Create a fragment from literal ``segments`` and interleaved ``values``."""
        return Fragment(tuple(segments), values, self._executor)

    async def batch(self, statements: Sequence[CompiledStatement]) -> list[QueryResult]:
        """Execute compiled statements atomically; see :class:`BatchCoordinator`."""
        return await self._executor.batch(statements)

    @staticmethod
    def join(values: Iterable[Primitive]) -> JoinList:
        """Return a join list; ``join([])`` expands to ``NULL``."""
        return join(values)


def create_sql_tag(
    backend: SqlBackend,
    options: TagOptions | None = None,
    *,
    before_query: BeforeQueryHook | None = None,
    after_query: AfterQueryHook | None = None,
    placeholder_style: PlaceholderStyle | str | None = None,
) -> SqlTag:
    """Create a sql tag executing against ``backend``.

    Args:
        backend: Store implementing ``all``, ``run`` and ``batch``.
        options: Instrumentation hooks.
        before_query: Shortcut for ``TagOptions(before_query=...)``; overrides
            the hook in ``options`` when both are given.
        after_query: Shortcut for ``TagOptions(after_query=...)``; overrides
            the hook in ``options`` when both are given.
        placeholder_style: Overrides the backend's placeholder style.

    Returns:
        A :class:`SqlTag` with its own query id sequence.
    """
    options = options or TagOptions()
    overrides = {
        name: hook
        for name, hook in (("before_query", before_query), ("after_query", after_query))
        if hook is not None
    }
    if overrides:
        options = options.model_copy(update=overrides)
    return SqlTag(Executor(backend, options, placeholder_style=placeholder_style))
