"""Result transcoder — turns any DB-API cursor into a generic ``Table``.

Nothing here knows the queried table's shape.  Column names come from the
cursor metadata and every value goes through ``encode_scalar``, which
accepts the closed set of scalar kinds a flat relational cursor can yield:

    None, bool, int, float, str, bytes-like, date/time, Decimal

Binary values become base64 text and temporal values ISO-8601 text.  A row
holding anything else (or a non-finite float, which JSON cannot carry) is
skipped and recorded in ``Table.skipped``; a cursor that breaks mid-stream
fails the whole operation.
"""

from __future__ import annotations

import base64
import datetime as dt
import logging
import math
from decimal import Decimal
from typing import Any, Sequence

from dbadmin.db.driver import CursorLike
from dbadmin.db.errors import AdminError, CursorError, RowDecodeError
from dbadmin.models.table import RowSkip, Scalar, Table

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 500


def encode_scalar(value: Any) -> Scalar:
    """Normalize one driver value into a JSON-safe scalar."""
    if value is None or isinstance(value, (bool, str)):
        return value
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise RowDecodeError(f"non-finite float {value!r}")
        return value
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise RowDecodeError(f"non-finite decimal {value!r}")
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, (dt.datetime, dt.date, dt.time)):
        return value.isoformat()
    raise RowDecodeError(f"unsupported value type {type(value).__name__}")


def column_names(cursor: CursorLike) -> list[str]:
    """Read column names in cursor order; no columns is a cursor error."""
    try:
        description = cursor.description
        columns = [str(col[0]) for col in description]
    except Exception as e:
        raise CursorError(f"could not read cursor metadata: {e}", cause=e) from e
    if not columns:
        raise CursorError("cursor reported zero columns")
    return columns


def decode_row(row: Sequence[Any], width: int) -> list[Scalar]:
    try:
        values = list(row)
    except TypeError as e:
        raise RowDecodeError(f"row is not a sequence: {e}") from e
    if len(values) != width:
        raise RowDecodeError(f"expected {width} values, got {len(values)}")
    return [encode_scalar(v) for v in values]


def iter_batches(cursor: CursorLike, batch_size: int):
    """Yield row batches until the cursor is exhausted.

    Errors raised by the cursor itself surface as ``CursorError`` (admin
    errors raised by the driver pass through unchanged).
    """
    while True:
        try:
            batch = cursor.fetchmany(batch_size)
        except AdminError:
            raise
        except Exception as e:
            raise CursorError(f"cursor failed while fetching: {e}", cause=e) from e
        if not batch:
            return
        yield batch


def transcode(cursor: CursorLike, batch_size: int = DEFAULT_BATCH_SIZE) -> Table:
    """Drain ``cursor`` into a ``Table``, skipping rows that fail to decode."""
    table = Table(columns=column_names(cursor))
    width = len(table.columns)
    index = 0
    for batch in iter_batches(cursor, batch_size):
        for row in batch:
            try:
                table.rows.append(decode_row(row, width))
            except RowDecodeError as e:
                logger.warning(f"Skipping row {index}: {e}")
                table.skipped.append(RowSkip(index=index, reason=str(e)))
            index += 1
    if table.skipped:
        logger.warning(f"Transcoded {len(table.rows)} rows, skipped {len(table.skipped)}")
    return table
