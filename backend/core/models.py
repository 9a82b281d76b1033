"""Schema-agnostic shapes shared by the admin data-access layer."""

import datetime
import decimal
import json
import uuid
from dataclasses import dataclass, field
from typing import Any


CellValue = bool | int | float | str | None
GenericRecord = dict[str, CellValue]

INTEGER_TYPES = {
    "INTEGER",
    "INT",
    "INT2",
    "INT4",
    "INT8",
    "SMALLINT",
    "BIGINT",
    "SERIAL",
    "SMALLSERIAL",
    "BIGSERIAL",
    "SERIAL2",
    "SERIAL4",
    "SERIAL8",
}


def is_integer_type(type_name: str) -> bool:
    """Check whether a declared column type is one of the integer types."""
    return type_name.strip().upper() in INTEGER_TYPES


def to_cell(value: Any) -> CellValue:
    """Normalize a value returned by the database into a CellValue."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, decimal.Decimal):
        return float(value)
    if isinstance(value, memoryview):
        value = value.tobytes()
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    # json/jsonb documents and arrays
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    return str(value)


@dataclass
class ColumnDescriptor:
    """One column of a live table, as reported by the catalog."""

    name: str
    type: str
    not_null: bool = False
    default_value: str = ""
    primary_key: bool = False

    @property
    def is_integer(self) -> bool:
        return is_integer_type(self.type)


@dataclass
class TableDescriptor:
    name: str
    columns: list[ColumnDescriptor] = field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def single_integer_pk(self) -> ColumnDescriptor | None:
        """Return the primary key column if it is the only one and an integer."""
        pks = [c for c in self.columns if c.primary_key]
        if len(pks) == 1 and pks[0].is_integer:
            return pks[0]
        return None


@dataclass
class QueryResult:
    """Ordered column names plus rows, used for table reads and raw queries."""

    columns: list[str] = field(default_factory=list)
    rows: list[GenericRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.rows)
