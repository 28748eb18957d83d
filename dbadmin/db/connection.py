"""Connection manager — the single live handle to the data engine."""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import Enum
from typing import Generator, Optional

from dbadmin.db.driver import Driver, Handle
from dbadmin.db.errors import EngineConnectionError, NoActiveConnection
from dbadmin.models.table import ConnectionStatus

logger = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class ReadWriteLock:
    """Many concurrent readers or one writer.

    Writers are given priority: once a writer is waiting, new readers block
    until it has finished.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def shared(self) -> Generator[None, None, None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def exclusive(self) -> Generator[None, None, None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class ConnectionManager:
    """
    Owns at most one handle to the data engine.

    ``connect`` and ``close`` take the lock exclusively; data access goes
    through ``reading()``, which holds it shared for the duration of the
    operation.  Connecting while connected releases the old handle first, so
    a failed reconnect leaves the manager disconnected.
    """

    def __init__(self, driver: Driver):
        self.driver = driver
        self._handle: Optional[Handle] = None
        self._since: Optional[str] = None
        self._lock = ReadWriteLock()

    # -- state -----------------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return ConnectionState.CONNECTED if self._handle is not None else ConnectionState.DISCONNECTED

    def status(self) -> ConnectionStatus:
        with self._lock.shared():
            return ConnectionStatus(
                connected=self._handle is not None,
                driver=self.driver.name,
                since=self._since,
            )

    # -- lifecycle -------------------------------------------------------------

    def connect(self, connection_string: str) -> None:
        """Open and probe a new handle, replacing any current one.

        Raises ``InvalidConnectionString`` when the driver refuses the string
        and ``EngineConnectionError`` when the probe fails.
        """
        with self._lock.exclusive():
            self._release()
            handle = self.driver.open(connection_string)
            try:
                handle.ping()
            except Exception as e:
                logger.error(f"Probe failed on new {self.driver.name} handle: {e}")
                self._discard(handle)
                raise EngineConnectionError(str(e), cause=e) from e
            self._handle = handle
            self._since = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
            logger.info(f"Connected ({self.driver.name})")

    def close(self) -> bool:
        """Release the active handle.

        Idempotent: returns True if a handle was released and False if there
        was nothing to close.
        """
        with self._lock.exclusive():
            if self._handle is None:
                logger.info("Close requested with no active connection")
                return False
            self._release()
            logger.info("Connection closed")
            return True

    def _release(self) -> None:
        handle, self._handle, self._since = self._handle, None, None
        if handle is not None:
            self._discard(handle)

    @staticmethod
    def _discard(handle: Handle) -> None:
        try:
            handle.close()
        except Exception as e:
            logger.warning(f"Error while closing handle: {e}")

    # -- data access -----------------------------------------------------------

    @contextmanager
    def reading(self) -> Generator[Handle, None, None]:
        """Yield the live handle under the shared lock."""
        with self._lock.shared():
            if self._handle is None:
                raise NoActiveConnection("no active connection")
            yield self._handle
