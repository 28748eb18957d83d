"""Fakes shared by the test modules."""
from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Optional, Sequence


class FakeCursor:
    """DB-API style cursor over canned rows.

    ``fail_at`` makes the cursor itself break once that many rows have been
    handed out, like a connection dropping mid-stream.
    """

    def __init__(
        self,
        columns: Optional[Sequence[str]],
        rows: Sequence[Any] = (),
        fail_at: Optional[int] = None,
    ):
        self.description = None if columns is None else [(c, None, None, None, None, None, None) for c in columns]
        self._rows = list(rows)
        self._pos = 0
        self._fail_at = fail_at

    def fetchmany(self, size: int = 1) -> list[Any]:
        if self._fail_at is not None and self._pos >= self._fail_at:
            raise RuntimeError("connection reset by peer")
        end = self._pos + size
        if self._fail_at is not None:
            end = min(end, self._fail_at)
        batch = self._rows[self._pos:end]
        self._pos += len(batch)
        return batch


def temp_db_path() -> str:
    """Return the path of a fresh temporary database file."""
    tmp = tempfile.NamedTemporaryFile(suffix=".db", delete=False)
    tmp.close()
    return str(Path(tmp.name))
