"""Shared pytest fixtures for fragql unit tests."""
from __future__ import annotations

import pytest

from fragql import MockSqlTag, SqlTag, create_mock_sql_tag, create_sql_tag
from tests.fixtures import RecordingBackend


@pytest.fixture()
def backend() -> RecordingBackend:
    """Fake backend returning two user rows from every ``all()``."""
    return RecordingBackend(
        rows=[{"id": 1, "name": "alice"}, {"id": 2, "name": "bob"}]
    )


@pytest.fixture()
def sql(backend: RecordingBackend) -> SqlTag:
    """Tag bound to the fake backend, without hooks."""
    return create_sql_tag(backend)


@pytest.fixture()
def mock_sql() -> MockSqlTag:
    """Mock tag with the default recording handler."""
    return create_mock_sql_tag()
