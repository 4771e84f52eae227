"""Report executed queries through :mod:`logging`.

``log_query_results`` has the shape of an after-query hook minus the id, and
``logging_options`` wires it into a :class:`TagOptions`::

    sql = create_sql_tag(backend, logging_options())

Each dispatch then logs a summary line followed by two lines per query::

    batch: 3.20ms · 2 queries
    1: SELECT * FROM users WHERE id = ?1
       ↳ 0.41ms · 0 changed
    2: UPDATE users SET name = ?1 WHERE id = ?2
       ↳ 0.87ms · 1 changed · 1 read · 1 written
"""
from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from typing import Any

from fragql.execute.options import TagOptions
from fragql.statement.results import RunResult

_WHITESPACE = re.compile(r"\s+")

logger = logging.getLogger(__name__)


def cleanup_query(query: str) -> str:
    """Collapse newlines and runs of whitespace so a query fits on one line."""
    return _WHITESPACE.sub(" ", query.replace("\n", " "))


def _format_meta(result: RunResult) -> str:
    meta = result.meta
    line = f"{meta.duration:g}ms · {meta.changes} changed"
    if meta.rows_read is not None:
        line += f" · {meta.rows_read} read · {meta.rows_written or 0} written"
    return line


def log_query_results(
    queries: Sequence[str],
    results: Sequence[RunResult],
    duration: float | None = None,
    *,
    target: logging.Logger | None = None,
    level: int = logging.INFO,
) -> None:
    """Log ``queries`` with the metadata of their ``results``.

    Args:
        queries: Query texts, in dispatch order.
        results: One result per query.
        duration: Wall-clock duration of the whole dispatch in milliseconds.
        target: Destination logger; defaults to this module's logger.
        level: Log level for every line.
    """
    log = target or logger
    if not log.isEnabledFor(level):
        return

    prefix = f"{duration:.2f}ms · " if duration is not None else ""
    log.log(level, "batch: %s%d queries", prefix, len(queries))
    for position, (query, result) in enumerate(zip(queries, results), start=1):
        log.log(level, "%d: %s", position, cleanup_query(query))
        log.log(level, "   ↳ %s", _format_meta(result))


def logging_options(
    target: logging.Logger | None = None,
    level: int = logging.INFO,
) -> TagOptions:
    """Return :class:`TagOptions` whose after-hook calls :func:`log_query_results`."""

    def after_query(
        query_id: int,
        queries: list[str],
        results: list[Any],
        duration: float,
    ) -> None:
        log_query_results(queries, results, duration, target=target, level=level)

    return TagOptions(after_query=after_query)
