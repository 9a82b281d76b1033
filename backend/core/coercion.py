"""Filtering and normalization of loosely-typed admin payloads.

Payloads arrive as JSON objects from the admin UI, where every form field is
a string and "empty" means "no value". This module decides which fields end
up in a statement and what gets bound for them.
"""

from typing import Any

from core.errors import ValidationError
from core.identifiers import validate_identifier
from core.models import CellValue, TableDescriptor


def normalize_value(column: str, value: Any) -> CellValue:
    """Convert a payload value to a bindable CellValue ("" becomes NULL)."""
    if isinstance(value, str) and value == "":
        return None
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    raise ValidationError(
        f"Unsupported value for column {column}: {type(value).__name__}"
    )


def is_unset_identity(value: Any) -> bool:
    """True when a primary key value means "let the database assign it"."""
    if value is None or value == "" or value == "0":
        return True
    return isinstance(value, int) and not isinstance(value, bool) and value == 0


def prepare_insert(
    table: TableDescriptor, raw: dict[str, Any]
) -> tuple[list[str], list[CellValue]]:
    """Pick the columns and values for an INSERT into table.

    A single integer primary key supplied as null, "", "0" or 0 is left out
    so the database generates it; any other value for it is kept as an
    explicit override.

    Raises:
        ValidationError: On a bad column name, an unsupported value, or when
            no columns are left to insert
    """
    pk = table.single_integer_pk()
    columns: list[str] = []
    values: list[CellValue] = []
    for column, value in raw.items():
        validate_identifier(column)
        if pk is not None and column == pk.name and is_unset_identity(value):
            continue
        columns.append(column)
        values.append(normalize_value(column, value))

    if not columns:
        raise ValidationError("No valid columns to insert")
    return columns, values


def prepare_update(
    raw: dict[str, Any], id_field: str = "id"
) -> tuple[list[str], list[CellValue]]:
    """Pick the SET columns and values for an UPDATE; id_field is never written."""
    columns: list[str] = []
    values: list[CellValue] = []
    for column, value in raw.items():
        if column == id_field:
            continue
        validate_identifier(column)
        columns.append(column)
        values.append(normalize_value(column, value))

    if not columns:
        raise ValidationError("No columns to update")
    return columns, values
