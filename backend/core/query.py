"""Execution of operator-supplied SQL text.

No statement classification and no restrictions: the caller picks the entry
point, and whatever the database reports is handed back unchanged. Access
control belongs in front of this module, not in it.
"""

import logging
from typing import Any

import psycopg

import core.db as db
from core.errors import ValidationError, translate_db_error
from core.models import QueryResult, to_cell


logger = logging.getLogger(__name__)


def _require_text(sql: str) -> str:
    if not sql or not sql.strip():
        raise ValidationError("Query is required")
    return sql


def unique_column_names(names: list[str]) -> list[str]:
    """Suffix repeated result names (id, id_2, id_3) so no cell is lost."""
    seen: set[str] = set()
    unique = []
    for name in names:
        candidate, n = name, 1
        while candidate in seen:
            n += 1
            candidate = f"{name}_{n}"
        seen.add(candidate)
        unique.append(candidate)
    return unique


class QueryExecutor:
    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self.conn = conn

    async def execute(self, sql: str) -> QueryResult:
        """Run a statement and return its result set.

        A statement that produces no result set yields an empty QueryResult.
        Repeated column names in the result are made unique.
        """
        _require_text(sql)
        try:
            async with self.conn.cursor() as cur:
                await cur.execute(sql)
                if cur.description is None:
                    return QueryResult()
                columns = unique_column_names([d.name for d in cur.description])
                rows = await cur.fetchall()
        except psycopg.Error as e:
            logger.warning("Raw query failed: %s", e)
            raise translate_db_error(e) from e

        return QueryResult(
            columns=columns,
            rows=[
                {name: to_cell(value) for name, value in zip(columns, row)}
                for row in rows
            ],
        )

    async def execute_write(self, sql: str, *values: Any) -> int:
        """Run a mutating statement with optional bound values; return rows affected."""
        _require_text(sql)
        count = await db.execute(self.conn, sql, values or None)
        logger.info("Raw statement affected %d row(s)", count)
        return count
