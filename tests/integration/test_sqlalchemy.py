"""Integration tests: build → execute through SQLAlchemy on in-memory SQLite.

Exercises the ``named`` placeholder style end to end, including literal
colons that ``text()`` would otherwise parse as bind parameters.
"""
from __future__ import annotations

import asyncio
from collections.abc import Iterator

import pytest

sqlalchemy = pytest.importorskip("sqlalchemy")

from sqlalchemy.exc import IntegrityError  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from fragql import SQLAlchemyBackend, SqlTag, create_sql_tag  # noqa: E402
from tests.fixtures import load_ddl  # noqa: E402


@pytest.fixture()
def backend() -> Iterator[SQLAlchemyBackend]:
    engine = sqlalchemy.create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.exec_driver_sql(load_ddl())
        conn.exec_driver_sql(
            "INSERT INTO test_users (name, email) VALUES ('alice', 'alice@example.com'), ('bob', NULL)"
        )
    yield SQLAlchemyBackend(engine)
    engine.dispose()


@pytest.fixture()
def sql(backend: SQLAlchemyBackend) -> SqlTag:
    return create_sql_tag(backend)


def test_builds_named_placeholders(sql: SqlTag):
    stmt = sql("SELECT * FROM test_users WHERE name = {} OR email = {}", "a", "a").build()
    assert stmt.query == "SELECT * FROM test_users WHERE name = :p1 OR email = :p1"
    assert stmt.values == ["a"]


def test_select_and_join(sql: SqlTag):
    result = asyncio.run(
        sql("SELECT id, name FROM test_users WHERE id IN ({}) ORDER BY id", sql.join([1, 2])).all()
    )
    assert result.results == [{"id": 1, "name": "alice"}, {"id": 2, "name": "bob"}]


def test_literal_colon_is_not_a_parameter(sql: SqlTag):
    result = asyncio.run(sql("SELECT '10:30' AS t, {} AS n", 7).all())
    assert result.results == [{"t": "10:30", "n": 7}]


def test_run_reports_changes(sql: SqlTag):
    result = asyncio.run(sql("INSERT INTO test_users (name) VALUES ({})", "carol").run())
    assert result.meta.changes == 1
    assert result.meta.last_row_id == 3


def test_batch_rolls_back_on_failure(sql: SqlTag):
    with pytest.raises(IntegrityError):
        asyncio.run(
            sql.batch(
                [
                    sql("INSERT INTO test_users (name) VALUES ({})", "dave").build(),
                    sql("INSERT INTO test_users (name) VALUES ({})", None).build(),
                ]
            )
        )
    names = asyncio.run(
        sql("SELECT name FROM test_users ORDER BY id").build().map(lambda row: row["name"]).all()
    )
    assert names.results == ["alice", "bob"]
