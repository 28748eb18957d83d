"""Statement builders for create/drop/select.

Builders only produce text; running it is the connection handle's job.
Field types are forwarded verbatim, the engine is the authority on them.
Identifiers are checked against ``IDENTIFIER_RE`` unless strict mode is off,
in which case they pass through unquoted.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from dbadmin.db.errors import BadInput
from dbadmin.models.table import ColumnSpec

IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def check_identifier(name: str, strict: bool = True, kind: str = "identifier") -> str:
    if not isinstance(name, str) or not name:
        raise BadInput(f"empty {kind}")
    if strict and not IDENTIFIER_RE.fullmatch(name):
        raise BadInput(f"invalid {kind} {name!r}")
    return name


def field_clause(fields: Iterable[ColumnSpec], strict: bool = True) -> str:
    """``[ColumnSpec("id", "INT"), ColumnSpec("name", "TEXT")]`` -> ``"id INT, name TEXT"``."""
    parts = []
    for f in fields:
        check_identifier(f.name, strict, kind="column name")
        if not f.field_type or not f.field_type.strip():
            raise BadInput(f"missing type for column {f.name!r}")
        parts.append(f"{f.name} {f.field_type}")
    if not parts:
        raise BadInput("at least one field is required")
    return ", ".join(parts)


def create_table(table_name: str, fields: Iterable[ColumnSpec], strict: bool = True) -> str:
    check_identifier(table_name, strict, kind="table name")
    return f"CREATE TABLE IF NOT EXISTS {table_name} ({field_clause(fields, strict)})"


def drop_table(table_name: str, strict: bool = True) -> str:
    check_identifier(table_name, strict, kind="table name")
    return f"DROP TABLE IF EXISTS {table_name}"


def select_all(table_name: str, limit: Optional[int] = None, strict: bool = True) -> str:
    check_identifier(table_name, strict, kind="table name")
    sql = f"SELECT * FROM {table_name}"
    if limit is not None:
        if limit < 0:
            raise BadInput("limit must be non-negative")
        sql += f" LIMIT {int(limit)}"
    return sql
