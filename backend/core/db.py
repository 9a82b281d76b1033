from collections.abc import AsyncGenerator
from typing import Any
import logging

import psycopg
import psycopg.rows
import psycopg_pool
from litestar.datastructures import State

from core.errors import translate_db_error


logger = logging.getLogger(__name__)

Params = tuple[Any, ...] | list[Any] | dict[str, Any] | None


async def init_pool(
    conninfo: str, min_size: int = 2, max_size: int = 10
) -> psycopg_pool.AsyncConnectionPool:
    """Open an async connection pool and wait until it is ready."""
    pool = psycopg_pool.AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )
    await pool.open()
    await pool.wait()
    return pool


async def close_pool(pool: psycopg_pool.AsyncConnectionPool | None) -> None:
    """Close the connection pool."""
    if pool:
        await pool.close()


async def provide_connection(
    state: State,
) -> AsyncGenerator[psycopg.AsyncConnection, None]:
    """Litestar dependency provider for database connections.

    The pool lives on the application state; the connection is committed when
    the handler returns and rolled back if it raises.
    """
    pool: psycopg_pool.AsyncConnectionPool | None = state.get("pool")
    if not pool:
        raise RuntimeError("Database pool not initialized")
    async with pool.connection() as conn:
        yield conn


async def fetch_all(
    conn: psycopg.AsyncConnection,
    query: str,
    params: Params = None,
) -> list[dict[str, Any]]:
    """Execute a query and return all rows as dicts."""
    try:
        async with conn.cursor(row_factory=psycopg.rows.dict_row) as cur:
            await cur.execute(query, params)
            return [dict(row) for row in await cur.fetchall()]
    except psycopg.Error as e:
        logger.warning("Query failed: %s", e)
        raise translate_db_error(e) from e


async def fetch_one(
    conn: psycopg.AsyncConnection,
    query: str,
    params: Params = None,
) -> dict[str, Any] | None:
    """Execute a query and return one row as dict."""
    try:
        async with conn.cursor(row_factory=psycopg.rows.dict_row) as cur:
            await cur.execute(query, params)
            row = await cur.fetchone()
            return dict(row) if row else None
    except psycopg.Error as e:
        logger.warning("Query failed: %s", e)
        raise translate_db_error(e) from e


async def execute(
    conn: psycopg.AsyncConnection,
    query: str,
    params: Params = None,
) -> int:
    """Execute a statement and return the row count."""
    try:
        async with conn.cursor() as cur:
            await cur.execute(query, params)
            return cur.rowcount
    except psycopg.Error as e:
        logger.warning("Statement failed: %s", e)
        raise translate_db_error(e) from e


async def execute_returning(
    conn: psycopg.AsyncConnection,
    query: str,
    params: Params = None,
) -> dict[str, Any] | None:
    """Execute a statement with RETURNING and return the row as dict."""
    return await fetch_one(conn, query, params)
