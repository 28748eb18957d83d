"""Transport models — generic tables, skipped rows and create-table requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

Scalar = Union[None, bool, int, float, str]


@dataclass(frozen=True)
class RowSkip:
    """A cursor row dropped during transcoding."""
    index: int
    reason: str


@dataclass
class Table:
    """Ordered column names plus rows aligned positionally with them."""

    columns: list[str]
    rows: list[list[Scalar]] = field(default_factory=list)
    skipped: list[RowSkip] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped

    def to_dict(self) -> dict[str, Any]:
        return {"columns": list(self.columns), "rows": [list(r) for r in self.rows]}


@dataclass(frozen=True)
class ColumnSpec:
    """A caller-supplied column. ``field_type`` goes to the engine verbatim."""
    name: str
    field_type: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ColumnSpec":
        return cls(name=raw["name"], field_type=raw["field_type"])


@dataclass
class CreateTableArg:
    table_name: str
    fields: list[ColumnSpec] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "CreateTableArg":
        return cls(
            table_name=raw["table_name"],
            fields=[ColumnSpec.from_dict(f) for f in raw.get("fields") or []],
        )


@dataclass(frozen=True)
class ConnectionStatus:
    connected: bool
    driver: str
    since: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {"connected": self.connected, "driver": self.driver, "since": self.since}
