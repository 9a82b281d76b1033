"""Runtime introspection of the live database catalog.

Nothing here is cached: every call goes back to information_schema so the
descriptors always reflect the current schema, including tables created
through the admin API a moment ago.
"""

import logging

import psycopg
from litestar.datastructures import State

import core.db as db
from core.errors import NotFoundError, ValidationError
from core.identifiers import validate_identifier
from core.models import ColumnDescriptor, TableDescriptor


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# SQL Queries
# ---------------------------------------------------------------------------


def sql_select_tables() -> str:
    """List base tables of one schema (system catalogs live elsewhere)."""
    return """
        SELECT table_name
        FROM information_schema.tables
        WHERE table_schema = %(schema)s
            AND table_type = 'BASE TABLE'
        ORDER BY table_name
    """


def sql_select_table() -> str:
    """One base table of one schema by name."""
    return """
        SELECT table_name
        FROM information_schema.tables
        WHERE table_schema = %(schema)s
            AND table_name = %(table)s
            AND table_type = 'BASE TABLE'
    """


def sql_select_columns() -> str:
    """Columns of one table in ordinal order, with a primary key flag."""
    return """
        SELECT
            c.column_name,
            c.data_type,
            c.is_nullable,
            c.column_default,
            EXISTS (
                SELECT 1
                FROM information_schema.table_constraints tc
                JOIN information_schema.key_column_usage k
                    ON k.constraint_schema = tc.constraint_schema
                    AND k.constraint_name = tc.constraint_name
                    AND k.table_name = tc.table_name
                WHERE tc.constraint_type = 'PRIMARY KEY'
                    AND tc.table_schema = c.table_schema
                    AND tc.table_name = c.table_name
                    AND k.column_name = c.column_name
            ) AS primary_key
        FROM information_schema.columns c
        WHERE c.table_schema = %(schema)s
            AND c.table_name = %(table)s
        ORDER BY c.ordinal_position
    """


def transform_column_row(row: dict) -> ColumnDescriptor:
    """Turn an information_schema.columns row into a ColumnDescriptor."""
    return ColumnDescriptor(
        name=row["column_name"],
        type=(row["data_type"] or "").upper(),
        not_null=row["is_nullable"] == "NO",
        default_value=row["column_default"] or "",
        primary_key=bool(row["primary_key"]),
    )


class SchemaIntrospector:
    """Reads table and column metadata for one database schema."""

    def __init__(self, conn: psycopg.AsyncConnection, schema: str = "public") -> None:
        self.conn = conn
        self.schema = schema

    async def list_tables(self) -> list[str]:
        """Names of all base tables in the schema, sorted."""
        rows = await db.fetch_all(self.conn, sql_select_tables(), {"schema": self.schema})
        return [row["table_name"] for row in rows]

    async def table_exists(self, name: str) -> bool:
        row = await db.fetch_one(
            self.conn,
            sql_select_table(),
            {"schema": self.schema, "table": name},
        )
        return row is not None

    async def describe_table(self, name: str) -> TableDescriptor:
        """Describe one table.

        Raises:
            ValidationError: If the name is not a valid identifier
            NotFoundError: If the table does not exist
        """
        validate_identifier(name)
        rows = await db.fetch_all(
            self.conn,
            sql_select_columns(),
            {"schema": self.schema, "table": name},
        )

        # a table may legitimately have zero columns
        if not rows and not await self.table_exists(name):
            raise NotFoundError(f"Table not found: {name}")
        return TableDescriptor(
            name=name,
            columns=[transform_column_row(row) for row in rows],
        )

    async def describe_schema(self) -> list[TableDescriptor]:
        """Describe every table in the schema."""
        tables = []
        for name in await self.list_tables():
            try:
                tables.append(await self.describe_table(name))
            except NotFoundError:
                # dropped between the two catalog reads
                logger.debug("Table %s disappeared during introspection", name)
            except ValidationError:
                logger.warning("Skipping table with unsupported name: %r", name)
        return tables


async def provide_introspector(
    conn: psycopg.AsyncConnection, state: State
) -> SchemaIntrospector:
    """Litestar dependency provider for a per-request introspector."""
    return SchemaIntrospector(conn, state.get("db_schema", "public"))
