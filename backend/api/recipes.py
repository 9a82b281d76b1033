from dataclasses import dataclass

import psycopg
from litestar import Controller, delete, get, post, put

from core.crafting import (
    CartItem,
    Recipe,
    RecipeStore,
    Resource,
    ResourceTotal,
    calculate_resources,
)
from core.errors import NotFoundError
from core.responses import WriteResponse


@dataclass
class RecipeCreate:
    name: str
    category: str
    description: str = ""


@dataclass
class RecipeResourceCreate:
    resource_id: int
    quantity: int


@dataclass
class ResourceCreate:
    name: str


@dataclass
class CalculateRequest:
    items: list[CartItem]


def _require_found(count: int, what: str) -> None:
    if count == 0:
        raise NotFoundError(f"{what} not found")


class RecipesController(Controller):
    path = "/api/recipes"
    tags = ["recipes"]

    @get()
    async def list_recipes(self, conn: psycopg.AsyncConnection) -> list[Recipe]:
        """List all recipes with their required resources."""
        return await RecipeStore(conn).list_recipes()

    @get("/{recipe_id:int}")
    async def get_recipe(self, conn: psycopg.AsyncConnection, recipe_id: int) -> Recipe:
        recipe = await RecipeStore(conn).get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    @post(status_code=201)
    async def create_recipe(
        self,
        conn: psycopg.AsyncConnection,
        data: RecipeCreate,
    ) -> Recipe:
        store = RecipeStore(conn)
        recipe_id = await store.create_recipe(data.name, data.category, data.description)
        recipe = await store.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    @put("/{recipe_id:int}")
    async def update_recipe(
        self,
        conn: psycopg.AsyncConnection,
        recipe_id: int,
        data: RecipeCreate,
    ) -> Recipe:
        store = RecipeStore(conn)
        count = await store.update_recipe(recipe_id, data.name, data.category, data.description)
        _require_found(count, "Recipe")
        recipe = await store.get_recipe(recipe_id)
        if recipe is None:
            raise NotFoundError("Recipe not found")
        return recipe

    @delete("/{recipe_id:int}", status_code=204)
    async def delete_recipe(self, conn: psycopg.AsyncConnection, recipe_id: int) -> None:
        _require_found(await RecipeStore(conn).delete_recipe(recipe_id), "Recipe")

    @post("/{recipe_id:int}/resources", status_code=201)
    async def add_recipe_resource(
        self,
        conn: psycopg.AsyncConnection,
        recipe_id: int,
        data: RecipeResourceCreate,
    ) -> WriteResponse:
        """Attach a resource requirement to a recipe."""
        await RecipeStore(conn).add_recipe_resource(recipe_id, data.resource_id, data.quantity)
        return WriteResponse(message="Resource added to recipe", rows_affected=1)

    @delete("/{recipe_id:int}/resources/{resource_id:int}", status_code=204)
    async def remove_recipe_resource(
        self,
        conn: psycopg.AsyncConnection,
        recipe_id: int,
        resource_id: int,
    ) -> None:
        count = await RecipeStore(conn).remove_recipe_resource(recipe_id, resource_id)
        _require_found(count, "Recipe resource")


class CategoriesController(Controller):
    path = "/api/categories"
    tags = ["recipes"]

    @get()
    async def list_categories(self, conn: psycopg.AsyncConnection) -> list[str]:
        """Distinct recipe categories, sorted."""
        return await RecipeStore(conn).list_categories()


class ResourcesController(Controller):
    path = "/api/resources"
    tags = ["resources"]

    @get()
    async def list_resources(self, conn: psycopg.AsyncConnection) -> list[Resource]:
        return await RecipeStore(conn).list_resources()

    @post(status_code=201)
    async def create_resource(
        self,
        conn: psycopg.AsyncConnection,
        data: ResourceCreate,
    ) -> Resource:
        resource_id = await RecipeStore(conn).create_resource(data.name)
        return Resource(id=resource_id, name=data.name)

    @put("/{resource_id:int}")
    async def update_resource(
        self,
        conn: psycopg.AsyncConnection,
        resource_id: int,
        data: ResourceCreate,
    ) -> Resource:
        _require_found(
            await RecipeStore(conn).update_resource(resource_id, data.name), "Resource"
        )
        return Resource(id=resource_id, name=data.name)

    @delete("/{resource_id:int}", status_code=204)
    async def delete_resource(self, conn: psycopg.AsyncConnection, resource_id: int) -> None:
        _require_found(await RecipeStore(conn).delete_resource(resource_id), "Resource")


class CalculateController(Controller):
    path = "/api/calculate"
    tags = ["recipes"]

    @post(status_code=200)
    async def calculate(
        self,
        conn: psycopg.AsyncConnection,
        data: CalculateRequest,
    ) -> list[ResourceTotal]:
        """Total resources needed to craft every item in the cart."""
        return await calculate_resources(RecipeStore(conn), data.items)
