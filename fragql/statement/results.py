"""Pydantic models for execution results.

``QueryResult`` is what ``all()`` and ``batch()`` return: the rows plus
metadata.  ``RunResult`` is what ``run()`` returns: metadata only.  Backends
may return these models directly or any mapping with the same shape; the
executor validates the latter into the models.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class QueryMeta(BaseModel):
    """Execution metadata reported by a backend.

    Attributes:
        duration: Time the store spent on the statement, in milliseconds.
        changes: Rows inserted, updated or deleted.
        last_row_id: Row id of the last inserted row, when the store has one.
        changed_db: Whether the statement modified the database.
        rows_read: Rows scanned, for stores that report it.
        rows_written: Rows written, for stores that report it.

    Stores may report extra fields; they are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    duration: float = 0.0
    changes: int = 0
    last_row_id: int | None = None
    changed_db: bool = False
    rows_read: int | None = None
    rows_written: int | None = None


class RunResult(BaseModel):
    """Outcome of executing a statement for effect.

    Attributes:
        success: Whether the store reported success.
        meta: Execution metadata.
    """

    model_config = ConfigDict(extra="allow")

    success: bool = True
    meta: QueryMeta = Field(default_factory=QueryMeta)


class QueryResult(RunResult):
    """Outcome of executing a statement for read.

    Attributes:
        results: Returned rows, in store order.  After a mapped statement
            executes, each entry is the mapper's output for the raw row.
    """

    results: list[Any] = Field(default_factory=list)

    def apply_mapper(self, mapper: Callable[[Any], Any]) -> None:
        """Replace every row with ``mapper(row)``, in place."""
        self.results = [mapper(row) for row in self.results]


def as_query_result(raw: Any) -> QueryResult:
    """Return ``raw`` as a :class:`QueryResult`, validating mappings."""
    if isinstance(raw, QueryResult):
        return raw
    return QueryResult.model_validate(raw)


def as_run_result(raw: Any) -> RunResult:
    """Return ``raw`` as a :class:`RunResult`, validating mappings."""
    if isinstance(raw, RunResult):
        return raw
    return RunResult.model_validate(raw)
