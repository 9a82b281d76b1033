from dataclasses import dataclass, field
from typing import Any

import psycopg
from litestar import Controller, delete, get, post, put

import core.ddl as ddl
from core.models import TableDescriptor
from core.query import QueryExecutor
from core.responses import (
    MultiRowResponse,
    QueryResponse,
    WriteResponse,
    query_response,
    table_response,
)
from core.rows import RowStore
from core.schema import SchemaIntrospector


@dataclass
class QueryRequest:
    query: str


@dataclass
class ExecuteRequest:
    query: str
    params: list[Any] = field(default_factory=list)


@dataclass
class CreateTableRequest:
    table_name: str
    columns: list[ddl.ColumnSpec]


class AdminController(Controller):
    """Schema-agnostic database administration."""

    path = "/admin/api"
    tags = ["admin"]

    @get("/schema")
    async def get_schema(self, introspector: SchemaIntrospector) -> list[TableDescriptor]:
        """Every table with its columns, as currently defined in the database."""
        return await introspector.describe_schema()

    @get("/table/{table:str}")
    async def get_table_data(
        self,
        conn: psycopg.AsyncConnection,
        introspector: SchemaIntrospector,
        table: str,
    ) -> MultiRowResponse:
        """All rows of a table."""
        descriptor, result = await RowStore(conn, introspector).read_table(table)
        return table_response(descriptor, result)

    @post("/table/{table:str}", status_code=201)
    async def insert_table_data(
        self,
        conn: psycopg.AsyncConnection,
        introspector: SchemaIntrospector,
        table: str,
        data: dict[str, Any],
    ) -> WriteResponse:
        """Insert a row from a form payload."""
        count = await RowStore(conn, introspector).insert(table, data)
        return WriteResponse(message="Data inserted successfully", rows_affected=count)

    @put("/table/{table:str}/{row_id:int}")
    async def update_table_data(
        self,
        conn: psycopg.AsyncConnection,
        introspector: SchemaIntrospector,
        table: str,
        row_id: int,
        data: dict[str, Any],
    ) -> WriteResponse:
        """Update a row by id."""
        count = await RowStore(conn, introspector).update_by_id(table, row_id, data)
        return WriteResponse(message="Data updated successfully", rows_affected=count)

    @delete("/table/{table:str}/{row_id:int}", status_code=200)
    async def delete_table_data(
        self,
        conn: psycopg.AsyncConnection,
        introspector: SchemaIntrospector,
        table: str,
        row_id: int,
    ) -> WriteResponse:
        """Delete a row by id. Missing rows are not an error."""
        count = await RowStore(conn, introspector).delete_by_id(table, row_id)
        return WriteResponse(message="Data deleted successfully", rows_affected=count)

    @delete("/table/{table:str}", status_code=200)
    async def drop_table(
        self,
        conn: psycopg.AsyncConnection,
        table: str,
    ) -> WriteResponse:
        await ddl.drop_table(conn, table)
        return WriteResponse(message="Table dropped successfully")

    @post("/create-table", status_code=201)
    async def create_table(
        self,
        conn: psycopg.AsyncConnection,
        data: CreateTableRequest,
    ) -> WriteResponse:
        """Create a table from a list of column definitions."""
        await ddl.create_table(conn, data.table_name, data.columns)
        return WriteResponse(message="Table created successfully")

    @post("/query", status_code=200)
    async def execute_query(
        self,
        conn: psycopg.AsyncConnection,
        data: QueryRequest,
    ) -> QueryResponse:
        """Run arbitrary SQL and return its result set."""
        result = await QueryExecutor(conn).execute(data.query)
        return query_response(result)

    @post("/execute", status_code=200)
    async def execute_statement(
        self,
        conn: psycopg.AsyncConnection,
        data: ExecuteRequest,
    ) -> WriteResponse:
        """Run arbitrary SQL with bound values and report rows affected."""
        count = await QueryExecutor(conn).execute_write(data.query, *data.params)
        return WriteResponse(message="Statement executed successfully", rows_affected=count)
