import psycopg.errors
import pytest
from litestar.di import Provide
from litestar.testing import create_test_client

from api.admin import AdminController
from api.health import HealthController, PingController
from api.recipes import CalculateController, RecipesController
from app import exception_handlers
from core.schema import provide_introspector


def client_for(conn, *handlers):
    return create_test_client(
        route_handlers=list(handlers),
        dependencies={
            "conn": Provide(lambda: conn, sync_to_thread=False),
            "introspector": Provide(provide_introspector),
        },
        exception_handlers=exception_handlers,
    )


class TestAdminApi:
    def test_schema(self, items_conn):
        with client_for(items_conn, AdminController) as client:
            response = client.get("/admin/api/schema")
        assert response.status_code == 200
        body = response.json()
        assert body[0]["name"] == "items"
        assert [c["name"] for c in body[0]["columns"]] == ["id", "label", "price"]
        assert body[0]["columns"][0]["primary_key"] is True

    def test_table_data(self, items_conn):
        items_conn.on('SELECT * FROM "items"', columns=["id", "label", "price"], rows=[(1, "Axe", None)])
        with client_for(items_conn, AdminController) as client:
            response = client.get("/admin/api/table/items")
        assert response.status_code == 200
        body = response.json()
        assert [c["type"] for c in body["columns"]] == ["number", "string", "number"]
        assert body["data"] == [{"id": 1, "label": "Axe", "price": None}]

    def test_table_data_missing_table(self, fake_conn):
        with client_for(fake_conn, AdminController) as client:
            response = client.get("/admin/api/table/ghosts")
        assert response.status_code == 404
        assert response.json()["detail"] == "Table not found: ghosts"

    def test_insert(self, items_conn):
        items_conn.on("INSERT INTO", rowcount=1)
        with client_for(items_conn, AdminController) as client:
            response = client.post("/admin/api/table/items", json={"id": "", "label": "Axe"})
        assert response.status_code == 201
        assert response.json()["rows_affected"] == 1
        assert items_conn.statements("INSERT INTO")[0][1] == ("Axe",)

    def test_insert_nothing(self, items_conn):
        with client_for(items_conn, AdminController) as client:
            response = client.post("/admin/api/table/items", json={"id": "0"})
        assert response.status_code == 400
        assert response.json()["detail"] == "No valid columns to insert"

    def test_update(self, fake_conn):
        fake_conn.on("UPDATE", rowcount=1)
        with client_for(fake_conn, AdminController) as client:
            response = client.put("/admin/api/table/items/4", json={"id": 8, "label": "Club"})
        assert response.status_code == 200
        assert fake_conn.executed[0][1] == ("Club", 4)

    def test_delete_missing_row(self, fake_conn):
        fake_conn.on("DELETE FROM", rowcount=0)
        with client_for(fake_conn, AdminController) as client:
            response = client.delete("/admin/api/table/items/404")
        assert response.status_code == 200
        assert response.json()["rows_affected"] == 0

    def test_create_table(self, fake_conn):
        payload = {
            "table_name": "tags",
            "columns": [
                {"name": "id", "type": "INTEGER", "primary_key": True},
                {"name": "label", "type": "TEXT", "not_null": True},
            ],
        }
        with client_for(fake_conn, AdminController) as client:
            response = client.post("/admin/api/create-table", json=payload)
        assert response.status_code == 201
        query = fake_conn.executed[0][0]
        assert '"id" INTEGER GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY' in query
        assert '"label" TEXT NOT NULL' in query

    def test_create_existing_table(self, fake_conn):
        fake_conn.on("CREATE TABLE", error=psycopg.errors.DuplicateTable('relation "tags" already exists'))
        payload = {"table_name": "tags", "columns": [{"name": "id", "type": "INTEGER"}]}
        with client_for(fake_conn, AdminController) as client:
            response = client.post("/admin/api/create-table", json=payload)
        assert response.status_code == 409
        assert response.json()["detail"] == 'relation "tags" already exists'

    def test_query(self, fake_conn):
        fake_conn.on("SELECT 1", columns=["one"], rows=[(1,)])
        with client_for(fake_conn, AdminController) as client:
            response = client.post("/admin/api/query", json={"query": "SELECT 1 AS one"})
        assert response.status_code == 200
        assert response.json() == {"columns": ["one"], "results": [{"one": 1}], "count": 1}

    def test_query_error_is_verbatim(self, fake_conn):
        fake_conn.on("SELEC", error=psycopg.errors.SyntaxError('syntax error at or near "SELEC"'))
        with client_for(fake_conn, AdminController) as client:
            response = client.post("/admin/api/query", json={"query": "SELEC 1"})
        assert response.status_code == 400
        assert response.json()["detail"] == 'syntax error at or near "SELEC"'

    def test_execute(self, fake_conn):
        fake_conn.on("UPDATE", rowcount=5)
        with client_for(fake_conn, AdminController) as client:
            response = client.post(
                "/admin/api/execute",
                json={"query": "UPDATE items SET label = %s", "params": ["x"]},
            )
        assert response.status_code == 200
        assert response.json()["rows_affected"] == 5

    def test_drop_table(self, fake_conn):
        with client_for(fake_conn, AdminController) as client:
            response = client.delete("/admin/api/table/tags")
        assert response.status_code == 200
        assert fake_conn.executed[0][0] == 'DROP TABLE IF EXISTS "tags"'


class TestRecipesApi:
    def test_calculate(self, recipes_conn):
        with client_for(recipes_conn, CalculateController) as client:
            response = client.post(
                "/api/calculate",
                json={"items": [{"id": 1, "quantity": 2}, {"id": 2, "quantity": 1}]},
            )
        assert response.status_code == 200
        assert response.json() == [{"name": "Stone", "total": 9}, {"name": "Wood", "total": 15}]

    def test_get_recipe(self, recipes_conn):
        with client_for(recipes_conn, RecipesController) as client:
            response = client.get("/api/recipes/1")
        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Wooden Club"
        assert {r["name"]: r["quantity"] for r in body["resources"]} == {"Wood": 5, "Stone": 2}

    def test_get_missing_recipe(self, fake_conn):
        with client_for(fake_conn, RecipesController) as client:
            response = client.get("/api/recipes/404")
        assert response.status_code == 404

    def test_delete_missing_recipe(self, fake_conn):
        fake_conn.on("DELETE FROM crafting_recipes", rowcount=0)
        with client_for(fake_conn, RecipesController) as client:
            response = client.delete("/api/recipes/404")
        assert response.status_code == 404


class TestHealthApi:
    def test_ping(self):
        with create_test_client(route_handlers=[PingController]) as client:
            response = client.get("/api/ping")
        assert response.json() == {"message": "pong"}

    def test_health_without_pool(self):
        with create_test_client(route_handlers=[HealthController]) as client:
            response = client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["database_connected"] is False
