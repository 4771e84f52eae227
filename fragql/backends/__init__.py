"""fragql backends: the capability contract and bundled store adapters."""
from fragql.backends.base import BoundStatement, SqlBackend
from fragql.backends.sqlalchemy_engine import SQLAlchemyBackend
from fragql.backends.sqlite import SQLiteBackend

__all__ = [
    "BoundStatement",
    "SQLAlchemyBackend",
    "SQLiteBackend",
    "SqlBackend",
]
