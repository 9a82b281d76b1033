"""CREATE TABLE / DROP TABLE statements built from column descriptions."""

import logging
from dataclasses import dataclass

import psycopg

import core.db as db
from core.errors import ValidationError
from core.identifiers import quote_identifier, validate_type_name
from core.models import is_integer_type


logger = logging.getLogger(__name__)


@dataclass
class ColumnSpec:
    """A column as requested by the operator when creating a table."""

    name: str
    type: str
    not_null: bool = False
    default_value: str = ""
    primary_key: bool = False


def column_definition(col: ColumnSpec) -> str:
    """Render one column definition.

    The default literal is emitted verbatim: the admin API is an operator
    tool and defaults may be expressions such as now().
    """
    if not col.name:
        raise ValidationError("Column name is required")
    type_name = validate_type_name(col.type)
    parts = [quote_identifier(col.name), type_name.upper()]

    # serial types already carry their own sequence
    if col.primary_key and is_integer_type(type_name) and "SERIAL" not in parts[1]:
        parts.append("GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY")
    elif col.primary_key:
        parts.append("PRIMARY KEY")

    if col.not_null and not col.primary_key:
        parts.append("NOT NULL")

    if col.default_value:
        parts.append(f"DEFAULT {col.default_value}")

    return " ".join(parts)


def sql_create_table(name: str, columns: list[ColumnSpec]) -> str:
    """Build a CREATE TABLE statement; columns keep their input order."""
    if not name:
        raise ValidationError("Table name is required")
    if not columns:
        raise ValidationError("At least one column is required")
    definitions = ", ".join(column_definition(c) for c in columns)
    return f"CREATE TABLE {quote_identifier(name)} ({definitions})"


def sql_drop_table(name: str) -> str:
    if not name:
        raise ValidationError("Table name is required")
    return f"DROP TABLE IF EXISTS {quote_identifier(name)}"


async def create_table(
    conn: psycopg.AsyncConnection, name: str, columns: list[ColumnSpec]
) -> None:
    """Create a table.

    An existing table of the same name is reported by the database and
    surfaces as ConflictError; there is no pre-check.
    """
    query = sql_create_table(name, columns)
    await db.execute(conn, query)
    logger.info("Created table %s: %s", name, query)


async def drop_table(conn: psycopg.AsyncConnection, name: str) -> None:
    await db.execute(conn, sql_drop_table(name))
    logger.info("Dropped table %s", name)
