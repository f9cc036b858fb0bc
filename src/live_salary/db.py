"""SQLite key-value layer for the persisted salary settings."""

from __future__ import annotations

import json
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping

logger = logging.getLogger(__name__)

DATETIME_FMT = "%Y-%m-%d %H:%M:%S.%f"


class Keys:
    MONTH_KEY = "monthKey"
    MONTH_SALARY = "monthSalary"
    MONTH_SALARY_SET = "monthSalarySet"
    NON_WORK_DAYS = "nonWorkDays"
    NON_WORK_DAYS_SET = "nonWorkDaysSet"
    START_SECONDS = "startSeconds"
    END_SECONDS = "endSeconds"
    REFRESH_INTERVAL = "refreshInterval"

    ALL = (
        MONTH_KEY,
        MONTH_SALARY,
        MONTH_SALARY_SET,
        NON_WORK_DAYS,
        NON_WORK_DAYS_SET,
        START_SECONDS,
        END_SECONDS,
        REFRESH_INTERVAL,
    )


def open_database(path: Path, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """Open (and initialize) the SQLite database."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(
        path,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row
    initialize_schema(conn)
    return conn


@contextmanager
def database_connection(
    path: Path, *, check_same_thread: bool = True
) -> Iterator[sqlite3.Connection]:
    conn = open_database(path, check_same_thread=check_same_thread)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Group writes on an autocommit connection into one transaction."""
    conn.execute("BEGIN IMMEDIATE;")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK;")
        raise
    else:
        conn.execute("COMMIT;")


def initialize_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL
        );
        """
    )


def write_values(conn: sqlite3.Connection, values: Mapping[str, Any]) -> None:
    """Upsert every key in ``values`` atomically."""
    if not values:
        return
    updated_at = datetime.now().strftime(DATETIME_FMT)
    with transaction(conn):
        conn.executemany(
            """
            INSERT INTO settings (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            [
                (key, json.dumps(_encode(value)), updated_at)
                for key, value in values.items()
            ],
        )


def read_values(
    conn: sqlite3.Connection, keys: Iterable[str] = Keys.ALL
) -> dict[str, Any]:
    """Return the stored value for each requested key that exists."""
    keys = list(keys)
    if not keys:
        return {}
    placeholders = ", ".join("?" for _ in keys)
    rows = conn.execute(
        f"SELECT key, value FROM settings WHERE key IN ({placeholders})",
        keys,
    ).fetchall()
    values: dict[str, Any] = {}
    for row in rows:
        try:
            values[row["key"]] = json.loads(row["value"])
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable value stored for %s", row["key"])
    return values


def _encode(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return value
