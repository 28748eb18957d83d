"""Schema descriptor — table listings and column-to-type mappings."""

from __future__ import annotations

import logging

from dbadmin.db.driver import CursorLike
from dbadmin.db.transcoder import DEFAULT_BATCH_SIZE, iter_batches

logger = logging.getLogger(__name__)


def describe(cursor: CursorLike, batch_size: int = DEFAULT_BATCH_SIZE) -> dict[str, str]:
    """Fold (field-name, field-type) rows into ``{name: type}``.

    Malformed rows are skipped with a warning.  A repeated field name
    overwrites the earlier entry.
    """
    description: dict[str, str] = {}
    for batch in iter_batches(cursor, batch_size):
        for row in batch:
            try:
                name, field_type = row[0], row[1]
            except (IndexError, TypeError, KeyError):
                logger.warning(f"could not parse table description row {row!r}")
                continue
            if not isinstance(name, str) or not isinstance(field_type, str):
                logger.warning(f"could not parse table description row {row!r}")
                continue
            if name in description:
                logger.warning(f"duplicate field {name!r} in table description")
            description[name] = field_type
    return description


def table_names(cursor: CursorLike, batch_size: int = DEFAULT_BATCH_SIZE) -> list[str]:
    tables: list[str] = []
    for batch in iter_batches(cursor, batch_size):
        for row in batch:
            try:
                name = row[0]
            except (IndexError, TypeError, KeyError):
                name = None
            if not isinstance(name, str):
                logger.warning(f"couldn't parse table name from {row!r}")
                continue
            tables.append(name)
    return tables
