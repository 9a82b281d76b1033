from dataclasses import dataclass
from typing import Any

from core.models import ColumnDescriptor, QueryResult, TableDescriptor, is_integer_type


NUMERIC_TYPES = {"NUMERIC", "DECIMAL", "REAL", "DOUBLE PRECISION", "FLOAT4", "FLOAT8"}


@dataclass
class ColumnMeta:
    """Metadata for a column in a table response."""

    key: str
    label: str
    type: str  # "string", "number", "date", "datetime", "boolean"


@dataclass
class MultiRowResponse:
    """Response containing multiple rows with column metadata."""

    columns: list[ColumnMeta]
    data: list[dict[str, Any]]


@dataclass
class QueryResponse:
    """Result of a raw query from the admin panel."""

    columns: list[str]
    results: list[dict[str, Any]]
    count: int


@dataclass
class WriteResponse:
    message: str
    rows_affected: int | None = None


def display_type(type_name: str) -> str:
    """Map a declared database type onto the front-end's column types."""
    base = type_name.split("(")[0].strip().upper()
    if base == "BOOLEAN":
        return "boolean"
    if base.startswith("TIMESTAMP"):
        return "datetime"
    if base == "DATE":
        return "date"
    if is_integer_type(base) or base in NUMERIC_TYPES:
        return "number"
    return "string"


def column_meta(column: ColumnDescriptor) -> ColumnMeta:
    return ColumnMeta(key=column.name, label=column.name, type=display_type(column.type))


def table_response(table: TableDescriptor, result: QueryResult) -> MultiRowResponse:
    """Rows of a table together with metadata derived from its live columns."""
    return MultiRowResponse(
        columns=[column_meta(c) for c in table.columns],
        data=result.rows,
    )


def query_response(result: QueryResult) -> QueryResponse:
    return QueryResponse(columns=result.columns, results=result.rows, count=result.count)
