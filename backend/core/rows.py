"""Generic CRUD over arbitrary tables.

Table and column names are validated and quoted before they reach SQL text;
every value is bound as a positional parameter.
"""

import logging
from typing import Any

import psycopg

import core.db as db
from core.coercion import prepare_insert, prepare_update
from core.identifiers import quote_identifier
from core.models import QueryResult, TableDescriptor, to_cell
from core.schema import SchemaIntrospector


logger = logging.getLogger(__name__)

ID_FIELD = "id"


# ---------------------------------------------------------------------------
# SQL Queries
# ---------------------------------------------------------------------------


def sql_select_all(table: str) -> str:
    """Unfiltered scan of a table."""
    return f"SELECT * FROM {quote_identifier(table)}"


def sql_insert_row(table: str, columns: list[str]) -> str:
    """Insert one row with a placeholder per column."""
    names = ", ".join(quote_identifier(c) for c in columns)
    placeholders = ", ".join(["%s"] * len(columns))
    return f"INSERT INTO {quote_identifier(table)} ({names}) VALUES ({placeholders})"


def sql_update_row(table: str, columns: list[str], id_field: str = ID_FIELD) -> str:
    """Update one row by id; the id value is the last parameter."""
    updates = ", ".join(f"{quote_identifier(c)} = %s" for c in columns)
    return (
        f"UPDATE {quote_identifier(table)} SET {updates} "
        f"WHERE {quote_identifier(id_field)} = %s"
    )


def sql_delete_row(table: str, id_field: str = ID_FIELD) -> str:
    """Delete one row by id."""
    return f"DELETE FROM {quote_identifier(table)} WHERE {quote_identifier(id_field)} = %s"


class RowStore:
    """Whole-table reads and single-row writes for any table in the schema."""

    def __init__(
        self,
        conn: psycopg.AsyncConnection,
        introspector: SchemaIntrospector,
    ) -> None:
        self.conn = conn
        self.introspector = introspector

    async def read_table(self, table: str) -> tuple[TableDescriptor, QueryResult]:
        """Read every row of a table along with the descriptor used to shape them.

        Raises:
            NotFoundError: If the table does not exist
        """
        descriptor = await self.introspector.describe_table(table)
        rows = await db.fetch_all(self.conn, sql_select_all(table))
        columns = descriptor.column_names
        return descriptor, QueryResult(
            columns=columns,
            rows=[{c: to_cell(row.get(c)) for c in columns} for row in rows],
        )

    async def read_all(self, table: str) -> QueryResult:
        """Read every row of a table.

        Raises:
            NotFoundError: If the table does not exist
        """
        _, result = await self.read_table(table)
        return result

    async def insert(self, table: str, raw: dict[str, Any]) -> int:
        """Insert one row built from a loosely-typed payload.

        Raises:
            NotFoundError: If the table does not exist
            ValidationError: If nothing is left to insert after coercion
        """
        descriptor = await self.introspector.describe_table(table)
        columns, values = prepare_insert(descriptor, raw)
        count = await db.execute(self.conn, sql_insert_row(table, columns), tuple(values))
        logger.info("Inserted into %s (%s): %d row(s)", table, ", ".join(columns), count)
        return count

    async def update_by_id(self, table: str, row_id: int, raw: dict[str, Any]) -> int:
        """Update the row whose id is row_id; the id itself is never written.

        Raises:
            ValidationError: If the payload is empty once the id is removed
        """
        columns, values = prepare_update(raw, ID_FIELD)
        count = await db.execute(
            self.conn,
            sql_update_row(table, columns),
            (*values, row_id),
        )
        logger.info("Updated %s id=%s: %d row(s)", table, row_id, count)
        return count

    async def delete_by_id(self, table: str, row_id: int) -> int:
        """Delete the row whose id is row_id; deleting a missing row is not an error."""
        count = await db.execute(self.conn, sql_delete_row(table), (row_id,))
        logger.info("Deleted from %s id=%s: %d row(s)", table, row_id, count)
        return count
