"""fragql statement layer: compiled statements and their results."""
from fragql.statement.prepared import CompiledStatement, MappedStatement, PreparedStatement
from fragql.statement.results import QueryMeta, QueryResult, RunResult

__all__ = [
    "CompiledStatement",
    "MappedStatement",
    "PreparedStatement",
    "QueryMeta",
    "QueryResult",
    "RunResult",
]
