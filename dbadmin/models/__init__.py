"""Transport models for the admin service."""

from dbadmin.models.table import (
    ColumnSpec,
    ConnectionStatus,
    CreateTableArg,
    RowSkip,
    Scalar,
    Table,
)

__all__ = [
    "ColumnSpec", "ConnectionStatus", "CreateTableArg",
    "RowSkip", "Scalar", "Table",
]
