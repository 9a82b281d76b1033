"""Shared fixtures: an in-memory stand-in for a psycopg async connection."""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import psycopg
import psycopg.rows
import pytest


@dataclass
class FakeColumn:
    name: str


@dataclass
class Rule:
    fragment: str
    columns: list[str] | None = None
    rows: list[tuple] = field(default_factory=list)
    rowcount: int | None = None
    error: Exception | None = None
    when: Callable[[Any], bool] | None = None

    def matches(self, query: str, params: Any) -> bool:
        if self.fragment not in query:
            return False
        return self.when is None or self.when(params)


class FakeCursor:
    def __init__(self, conn: "FakeConnection", row_factory=None) -> None:
        self.conn = conn
        self.row_factory = row_factory
        self.rule: Rule | None = None
        self.rowcount = -1

    async def __aenter__(self) -> "FakeCursor":
        return self

    async def __aexit__(self, *exc) -> bool:
        return False

    async def execute(self, query: str, params: Any = None) -> None:
        self.conn.executed.append((query, params))
        self.rule = self.conn.find_rule(query, params)
        if self.rule and self.rule.error is not None:
            raise self.rule.error
        if self.rule is None:
            self.rowcount = 0
        elif self.rule.rowcount is not None:
            self.rowcount = self.rule.rowcount
        else:
            self.rowcount = len(self.rule.rows)

    @property
    def description(self) -> list[FakeColumn] | None:
        if self.rule is None or self.rule.columns is None:
            return None
        return [FakeColumn(name) for name in self.rule.columns]

    def _shape(self, row: tuple) -> Any:
        if self.row_factory is psycopg.rows.dict_row:
            return dict(zip(self.rule.columns or [], row))
        return row

    async def fetchall(self) -> list:
        if self.rule is None:
            return []
        return [self._shape(row) for row in self.rule.rows]

    async def fetchone(self) -> Any:
        rows = await self.fetchall()
        return rows[0] if rows else None


class FakeConnection(psycopg.AsyncConnection):
    """Records every statement and answers from rules registered with on()."""

    def __init__(self) -> None:
        # psycopg's own initializer needs a live libpq connection
        self.rules: list[Rule] = []
        self.executed: list[tuple[str, Any]] = []

    def cursor(self, *args, row_factory=None, **kwargs) -> FakeCursor:
        return FakeCursor(self, row_factory)

    def on(self, fragment: str, **kwargs) -> "FakeConnection":
        self.rules.append(Rule(fragment, **kwargs))
        return self

    def find_rule(self, query: str, params: Any) -> Rule | None:
        for rule in self.rules:
            if rule.matches(query, params):
                return rule
        return None

    def describe(self, table: str, columns: list[tuple]) -> "FakeConnection":
        """Register catalog rows: (name, data_type, is_nullable, default, pk)."""
        return self.on(
            "information_schema.columns",
            columns=["column_name", "data_type", "is_nullable", "column_default", "primary_key"],
            rows=columns,
            when=lambda params, table=table: params["table"] == table,
        )

    def tables(self, names: list[str]) -> "FakeConnection":
        """Register base tables for both the listing and by-name lookups."""
        self.on(
            "information_schema.tables",
            columns=["table_name"],
            rows=[(name,) for name in names],
            when=lambda params: "table" not in params,
        )
        for name in names:
            self.on(
                "information_schema.tables",
                columns=["table_name"],
                rows=[(name,)],
                when=lambda params, name=name: params.get("table") == name,
            )
        return self

    def statements(self, prefix: str) -> list[tuple[str, Any]]:
        return [(q, p) for q, p in self.executed if q.lstrip().startswith(prefix)]


ITEMS_COLUMNS = [
    ("id", "integer", "NO", None, True),
    ("label", "text", "NO", None, False),
    ("price", "numeric", "YES", None, False),
]


@pytest.fixture
def fake_conn() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def items_conn(fake_conn: FakeConnection) -> FakeConnection:
    """A connection whose catalog holds an "items" table with an integer id."""
    fake_conn.tables(["items"])
    fake_conn.describe("items", ITEMS_COLUMNS)
    return fake_conn


# (id, name, category, description, [(resource_id, resource_name, quantity)])
CATALOG_ROWS = [
    (1, "Wooden Club", "Weapons", "", [(1, "Wood", 5), (2, "Stone", 2)]),
    (2, "Stone Pickaxe", "Tools", "", [(1, "Wood", 5), (2, "Stone", 5)]),
]


@pytest.fixture
def recipes_conn(fake_conn: FakeConnection) -> FakeConnection:
    """A connection that answers single-recipe lookups for CATALOG_ROWS."""
    for recipe_id, name, category, description, requirements in CATALOG_ROWS:
        fake_conn.on(
            "FROM crafting_recipes",
            columns=["id", "name", "category", "description"],
            rows=[(recipe_id, name, category, description)],
            when=lambda params, rid=recipe_id: params == {"id": rid},
        )
        fake_conn.on(
            "FROM recipe_resources",
            columns=["recipe_id", "id", "name", "quantity"],
            rows=[(recipe_id, *req) for req in requirements],
            when=lambda params, rid=recipe_id: params == {"recipe_id": rid},
        )
    return fake_conn
