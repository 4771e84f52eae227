"""Pydantic model for the instrumentation hooks supplied to a sql tag.

Both hooks are optional and are called synchronously around every backend
dispatch::

    def before_query(query_id: int, queries: list[str]) -> None: ...

    def after_query(
        query_id: int,
        queries: list[str],
        results: list[RunResult],
        duration: float,
    ) -> None: ...

``query_id`` is shared by the two calls for one dispatch; a batch gets one
id for all of its statements.  ``duration`` is the wall-clock time of the
dispatch in milliseconds.  Exceptions raised by a hook propagate to the
caller.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict

#: ``(query_id, queries) -> None``
BeforeQueryHook = Callable[[int, list[str]], Any]

#: ``(query_id, queries, results, duration_ms) -> None``
AfterQueryHook = Callable[[int, list[str], list[Any], float], Any]


class TagOptions(BaseModel):
    """Construction-time configuration of a sql tag.

    Attributes:
        before_query: Called with the id and query texts before dispatch.
        after_query: Called with the id, query texts, raw results and
            duration after a successful dispatch.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    before_query: BeforeQueryHook | None = None
    after_query: AfterQueryHook | None = None
