"""Driver seam between the admin layer and a DB-API 2.0 engine.

A ``Driver`` turns an opaque connection string into a ``Handle``.  The admin
layer never interprets the string; the handle exposes the handful of calls
the core needs (ping, query, execute, close) plus the engine's dialect for
listing and describing tables.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Protocol, Sequence

from dbadmin.db.errors import InvalidConnectionString, StatementError, StatementTimeout

logger = logging.getLogger(__name__)


class CursorLike(Protocol):  # pragma: no cover - structural typing helper
    description: Optional[Sequence[Sequence[Any]]]

    def fetchmany(self, size: int = ...) -> list[Sequence[Any]]: ...


class Handle(Protocol):  # pragma: no cover - structural typing helper
    def ping(self) -> None: ...
    def query(self, sql: str, timeout: Optional[float] = None): ...
    def execute(self, sql: str, timeout: Optional[float] = None) -> int: ...
    def close(self) -> None: ...
    def list_tables_sql(self) -> str: ...
    def describe_sql(self, table: str) -> str: ...


class Driver(Protocol):  # pragma: no cover - structural typing helper
    name: str

    def open(self, connection_string: str) -> Handle: ...


# -- SQLite -------------------------------------------------------------------


class _Deadline:
    """Progress-handler callback that aborts a statement once time runs out."""

    def __init__(self, timeout: Optional[float]):
        self.expires_at = time.monotonic() + timeout if timeout else None
        self.expired = False

    def __call__(self) -> int:
        if self.expires_at is not None and time.monotonic() >= self.expires_at:
            self.expired = True
            return 1
        return 0


class _GuardedCursor:
    """Cursor proxy that reports deadline expiry as ``StatementTimeout``."""

    def __init__(self, cursor: sqlite3.Cursor, deadline: _Deadline):
        self._cursor = cursor
        self._deadline = deadline

    @property
    def description(self):
        return self._cursor.description

    def fetchmany(self, size: int = 1) -> list[Any]:
        try:
            return self._cursor.fetchmany(size)
        except sqlite3.OperationalError as e:
            if self._deadline.expired:
                raise StatementTimeout("statement exceeded its deadline", cause=e) from e
            raise


class SQLiteHandle:
    """A live SQLite connection in autocommit mode.

    Statements on one handle are serialized by the handle's own lock, held
    for the whole life of a query cursor.
    """

    # Progress handler granularity, in SQLite VM instructions.
    PROGRESS_STEPS = 1000

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn
        self._lock = threading.RLock()

    def ping(self) -> None:
        with self._lock:
            self._conn.execute("SELECT 1").fetchone()

    @contextmanager
    def query(self, sql: str, timeout: Optional[float] = None) -> Iterator[_GuardedCursor]:
        with self._lock:
            deadline = _Deadline(timeout)
            self._conn.set_progress_handler(deadline, self.PROGRESS_STEPS)
            try:
                try:
                    cursor = self._conn.execute(sql)
                except sqlite3.Error as e:
                    raise _statement_error(e, deadline) from e
                try:
                    yield _GuardedCursor(cursor, deadline)
                finally:
                    cursor.close()
            finally:
                self._conn.set_progress_handler(None, 0)

    def execute(self, sql: str, timeout: Optional[float] = None) -> int:
        with self._lock:
            deadline = _Deadline(timeout)
            self._conn.set_progress_handler(deadline, self.PROGRESS_STEPS)
            try:
                cursor = self._conn.execute(sql)
                rowcount = cursor.rowcount
                cursor.close()
                return rowcount
            except sqlite3.Error as e:
                raise _statement_error(e, deadline) from e
            finally:
                self._conn.set_progress_handler(None, 0)

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def list_tables_sql(self) -> str:
        return (
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )

    def describe_sql(self, table: str) -> str:
        escaped = table.replace("'", "''")
        return f"SELECT name, type FROM pragma_table_info('{escaped}') ORDER BY cid"


def _statement_error(exc: sqlite3.Error, deadline: _Deadline) -> StatementError:
    if deadline.expired:
        return StatementTimeout("statement exceeded its deadline", cause=exc)
    return StatementError(str(exc), cause=exc)


class SQLiteDriver:
    """Opens SQLite databases.

    The connection string is handed to ``sqlite3.connect`` with URI parsing
    enabled, so both plain paths and ``file:`` URIs work.  A leading
    ``sqlite://`` scheme is stripped.
    """

    name = "sqlite"
    SCHEME = "sqlite://"

    def open(self, connection_string: str) -> SQLiteHandle:
        target = connection_string.strip()
        if target.startswith(self.SCHEME):
            target = target[len(self.SCHEME):]
        if not target:
            raise InvalidConnectionString("empty connection string")
        try:
            conn = sqlite3.connect(
                target,
                uri=True,
                check_same_thread=False,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            raise InvalidConnectionString(str(e), cause=e) from e
        logger.debug(f"Opened sqlite handle for {target!r}")
        return SQLiteHandle(conn)


# -- registry -----------------------------------------------------------------

DRIVERS: dict[str, type] = {
    SQLiteDriver.name: SQLiteDriver,
}


def get_driver(name: str) -> Driver:
    try:
        return DRIVERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown DB_DRIVER {name!r}; available: {', '.join(sorted(DRIVERS))}"
        ) from None
