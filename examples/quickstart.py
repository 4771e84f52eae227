"""fragql quickstart.

Seeds a small ``test_users`` table, then composes and runs a handful of
statements through the sql tag with query logging switched on.

Usage
-----
Run against an in-memory database::

    python examples/quickstart.py

Keep the data in a file and show the executor's debug lines too::

    python examples/quickstart.py --db users.db -v
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Adjust sys.path so the package is importable when run as a script
# ---------------------------------------------------------------------------
_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from fragql import SQLiteBackend, SqlTag, create_sql_tag, logging_options

_DDL_PATH = _REPO_ROOT / "tests" / "fixtures" / "ddl_sqlite.sql"

# (name, email, active)
_USERS = [
    ("alice", "alice@example.com", 1),
    ("bob", None, 1),
    ("carol", "carol@example.com", 0),
    ("dave", "dave@example.com", 1),
]


async def seed(sql: SqlTag) -> None:
    """Create the schema and insert the sample users in one batch."""
    await sql([_DDL_PATH.read_text()]).run()
    await sql.batch(
        [
            sql("INSERT INTO test_users (name, email, active) VALUES ({}, {}, {})", *user).build()
            for user in _USERS
        ]
    )


async def demo(sql: SqlTag) -> None:
    active = sql("active = {}", 1)
    with_email = sql("email IS NOT {}", None)

    result = await (
        sql("SELECT id, name FROM test_users WHERE {} AND {} ORDER BY id", active, with_email)
        .build()
        .map(lambda row: f"#{row['id']} {row['name']}")
        .all()
    )
    print("active users with email:", result.results)

    wanted = sql.join(["bob", "carol", "zed"])
    result = await sql("SELECT name FROM test_users WHERE name IN ({})", wanted).all()
    print("found by name:", [row["name"] for row in result.results])

    nobody = await sql("SELECT * FROM test_users WHERE id IN ({})", sql.join([])).all()
    print("empty join matches:", len(nobody.results))

    counts, _ = await sql.batch(
        [
            sql("SELECT active, COUNT(*) AS n FROM test_users GROUP BY active ORDER BY active")
            .build()
            .map(lambda row: (row["active"], row["n"])),
            sql("UPDATE test_users SET active = {} WHERE name = {}", 1, "carol").build(),
        ]
    )
    print("counts before update:", counts.results)


def _parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Compose and run fragql statements against SQLite.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    p.add_argument(
        "--db", default=":memory:",
        help="SQLite database path (default: in-memory).",
    )
    p.add_argument(
        "--verbose", "-v", action="store_true",
        help="Also print the executor's debug log lines.",
    )
    return p.parse_args()


def main() -> None:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(name)s: %(message)s",
    )

    backend = SQLiteBackend.connect(args.db)
    sql = create_sql_tag(backend, logging_options())
    try:
        asyncio.run(seed(sql))
        asyncio.run(demo(sql))
    finally:
        backend.close()


if __name__ == "__main__":
    main()
