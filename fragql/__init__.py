"""fragql – compose parameterized SQL from reusable fragments.

Write statements as small templates, nest them freely, and let fragql
flatten the tree into one query with ``?N`` placeholders and a
deduplicated parameter list.

Public API
----------
``create_sql_tag``
    Bind a tag to a backend (and optional instrumentation hooks).

``create_mock_sql_tag``
    Same surface, executing against a test handler instead of a store.

Example::

    import asyncio
    from fragql import SQLiteBackend, create_sql_tag

    sql = create_sql_tag(SQLiteBackend.connect(":memory:"))

    async def main():
        await sql("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT)").run()
        await sql.batch([
            sql("INSERT INTO users (name) VALUES ({})", "alice").build(),
            sql("INSERT INTO users (name) VALUES ({})", "bob").build(),
        ])
        by_name = sql("name IN ({})", sql.join(["alice", "bob"]))
        result = await (
            sql("SELECT id, name FROM users WHERE {} ORDER BY id", by_name)
            .build()
            .map(lambda row: row["name"].title())
            .all()
        )
        print(result.results)  # ['Alice', 'Bob']

    asyncio.run(main())

Extensibility
-------------
Backends for other drivers only need ``all``, ``run`` and ``batch``
coroutines (see :class:`~fragql.backends.base.SqlBackend`).  Drivers with a
different parameter syntax register a placeholder style::

    from fragql.template.placeholders import PlaceholderStyle, PlaceholderStyles

    @PlaceholderStyles.register("dollar")
    class DollarStyle(PlaceholderStyle):
        name = "dollar"

        def placeholder(self, index: int) -> str:
            return f"${index}"
"""

from __future__ import annotations

from fragql.backends.base import BoundStatement, SqlBackend
from fragql.backends.sqlalchemy_engine import SQLAlchemyBackend
from fragql.backends.sqlite import SQLiteBackend
from fragql.errors import (
    BatchResultMismatchError,
    FragQLError,
    PlaceholderStyleError,
    SegmentMismatchError,
    StructuralError,
    TemplateFormatError,
    UnboundStatementError,
    UncompiledBatchMemberError,
    UnsupportedValueError,
)
from fragql.execute.batch import BatchCoordinator
from fragql.execute.executor import Executor
from fragql.execute.options import TagOptions
from fragql.mock import MockSqlHandler, MockSqlTag, create_mock_sql_tag
from fragql.query_log import log_query_results, logging_options
from fragql.statement.prepared import MappedStatement, PreparedStatement
from fragql.statement.results import QueryMeta, QueryResult, RunResult
from fragql.tag import SqlTag, create_sql_tag
from fragql.template.expander import TemplateExpander
from fragql.template.fragment import Fragment, JoinList, Primitive, join
from fragql.template.placeholders import NamedStyle, NumberedStyle, PlaceholderStyles

# ---------------------------------------------------------------------------
# Register built-in placeholder styles
# ---------------------------------------------------------------------------

PlaceholderStyles.register_class(NumberedStyle.name, NumberedStyle)
PlaceholderStyles.register_class(NamedStyle.name, NamedStyle)

__all__ = [
    # Entry points
    "create_sql_tag",
    "create_mock_sql_tag",
    "SqlTag",
    "MockSqlTag",
    "MockSqlHandler",
    "TagOptions",
    # Composition
    "Fragment",
    "JoinList",
    "Primitive",
    "join",
    "TemplateExpander",
    "PlaceholderStyles",
    "NumberedStyle",
    "NamedStyle",
    # Statements and results
    "PreparedStatement",
    "MappedStatement",
    "QueryResult",
    "RunResult",
    "QueryMeta",
    # Execution
    "Executor",
    "BatchCoordinator",
    # Backends
    "SqlBackend",
    "BoundStatement",
    "SQLiteBackend",
    "SQLAlchemyBackend",
    # Logging
    "log_query_results",
    "logging_options",
    # Errors
    "FragQLError",
    "StructuralError",
    "SegmentMismatchError",
    "UncompiledBatchMemberError",
    "UnboundStatementError",
    "BatchResultMismatchError",
    "TemplateFormatError",
    "UnsupportedValueError",
    "PlaceholderStyleError",
]
