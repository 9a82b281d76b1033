"""Recipe catalog access and the cart resource calculation."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import psycopg

import core.db as db
from core.errors import ValidationError


logger = logging.getLogger(__name__)


@dataclass
class ResourceRequirement:
    id: int
    name: str
    quantity: int


@dataclass
class Recipe:
    id: int
    name: str
    category: str
    description: str
    resources: list[ResourceRequirement] = field(default_factory=list)


@dataclass
class Resource:
    id: int
    name: str


@dataclass
class CartItem:
    """One line of a cart: a recipe id and how many to craft."""

    id: int
    quantity: int


@dataclass
class ResourceTotal:
    name: str
    total: int


# ---------------------------------------------------------------------------
# SQL Queries
# ---------------------------------------------------------------------------


def sql_select_recipes() -> str:
    return """
        SELECT id, name, category, description
        FROM crafting_recipes
        ORDER BY name
    """


def sql_select_recipe_by_id() -> str:
    return """
        SELECT id, name, category, description
        FROM crafting_recipes
        WHERE id = %(id)s
    """


def sql_select_requirements(by_recipe: bool = False) -> str:
    """Resource requirements, for one recipe or for all of them."""
    recipe_filter = "WHERE rr.recipe_id = %(recipe_id)s" if by_recipe else ""
    return f"""
        SELECT rr.recipe_id, r.id, r.name, rr.quantity
        FROM recipe_resources rr
        JOIN resources r ON r.id = rr.resource_id
        {recipe_filter}
        ORDER BY r.name
    """


def sql_select_categories() -> str:
    return """
        SELECT DISTINCT category
        FROM crafting_recipes
        ORDER BY category
    """


def sql_select_resources() -> str:
    return "SELECT id, name FROM resources ORDER BY name"


def sql_insert_recipe() -> str:
    return """
        INSERT INTO crafting_recipes (name, category, description)
        VALUES (%(name)s, %(category)s, %(description)s)
        RETURNING id
    """


def sql_update_recipe() -> str:
    return """
        UPDATE crafting_recipes
        SET name = %(name)s, category = %(category)s, description = %(description)s
        WHERE id = %(id)s
    """


def sql_delete_recipe() -> str:
    return "DELETE FROM crafting_recipes WHERE id = %(id)s"


def sql_insert_resource() -> str:
    return "INSERT INTO resources (name) VALUES (%(name)s) RETURNING id"


def sql_update_resource() -> str:
    return "UPDATE resources SET name = %(name)s WHERE id = %(id)s"


def sql_delete_resource() -> str:
    return "DELETE FROM resources WHERE id = %(id)s"


def sql_insert_recipe_resource() -> str:
    return """
        INSERT INTO recipe_resources (recipe_id, resource_id, quantity)
        VALUES (%(recipe_id)s, %(resource_id)s, %(quantity)s)
        RETURNING id
    """


def sql_delete_recipe_resource() -> str:
    return """
        DELETE FROM recipe_resources
        WHERE recipe_id = %(recipe_id)s AND resource_id = %(resource_id)s
    """


def transform_requirement_row(row: dict) -> ResourceRequirement:
    return ResourceRequirement(id=row["id"], name=row["name"], quantity=row["quantity"])


class RecipeStore:
    """Fixed-shape queries over the recipe, resource and link tables."""

    def __init__(self, conn: psycopg.AsyncConnection) -> None:
        self.conn = conn

    async def list_recipes(self) -> list[Recipe]:
        """All recipes ordered by name, each with its resources ordered by name."""
        recipe_rows = await db.fetch_all(self.conn, sql_select_recipes())
        requirement_rows = await db.fetch_all(self.conn, sql_select_requirements())

        by_recipe: dict[int, list[ResourceRequirement]] = {}
        for row in requirement_rows:
            by_recipe.setdefault(row["recipe_id"], []).append(transform_requirement_row(row))

        return [
            Recipe(
                id=row["id"],
                name=row["name"],
                category=row["category"],
                description=row["description"] or "",
                resources=by_recipe.get(row["id"], []),
            )
            for row in recipe_rows
        ]

    async def get_recipe(self, recipe_id: int) -> Recipe | None:
        """A single recipe with its resources, or None if it does not exist."""
        row = await db.fetch_one(self.conn, sql_select_recipe_by_id(), {"id": recipe_id})
        if not row:
            return None
        requirement_rows = await db.fetch_all(
            self.conn,
            sql_select_requirements(by_recipe=True),
            {"recipe_id": recipe_id},
        )
        return Recipe(
            id=row["id"],
            name=row["name"],
            category=row["category"],
            description=row["description"] or "",
            resources=[transform_requirement_row(r) for r in requirement_rows],
        )

    async def list_categories(self) -> list[str]:
        rows = await db.fetch_all(self.conn, sql_select_categories())
        return [row["category"] for row in rows]

    async def list_resources(self) -> list[Resource]:
        rows = await db.fetch_all(self.conn, sql_select_resources())
        return [Resource(id=row["id"], name=row["name"]) for row in rows]

    async def create_recipe(self, name: str, category: str, description: str = "") -> int:
        if not name or not category:
            raise ValidationError("Recipe name and category are required")
        row = await db.execute_returning(
            self.conn,
            sql_insert_recipe(),
            {"name": name, "category": category, "description": description},
        )
        return row["id"] if row else 0

    async def update_recipe(
        self, recipe_id: int, name: str, category: str, description: str = ""
    ) -> int:
        if not name or not category:
            raise ValidationError("Recipe name and category are required")
        return await db.execute(
            self.conn,
            sql_update_recipe(),
            {"id": recipe_id, "name": name, "category": category, "description": description},
        )

    async def delete_recipe(self, recipe_id: int) -> int:
        return await db.execute(self.conn, sql_delete_recipe(), {"id": recipe_id})

    async def create_resource(self, name: str) -> int:
        if not name:
            raise ValidationError("Resource name is required")
        row = await db.execute_returning(self.conn, sql_insert_resource(), {"name": name})
        return row["id"] if row else 0

    async def update_resource(self, resource_id: int, name: str) -> int:
        if not name:
            raise ValidationError("Resource name is required")
        return await db.execute(
            self.conn, sql_update_resource(), {"id": resource_id, "name": name}
        )

    async def delete_resource(self, resource_id: int) -> int:
        return await db.execute(self.conn, sql_delete_resource(), {"id": resource_id})

    async def add_recipe_resource(self, recipe_id: int, resource_id: int, quantity: int) -> int:
        if quantity <= 0:
            raise ValidationError("Quantity must be a positive integer")
        row = await db.execute_returning(
            self.conn,
            sql_insert_recipe_resource(),
            {"recipe_id": recipe_id, "resource_id": resource_id, "quantity": quantity},
        )
        return row["id"] if row else 0

    async def remove_recipe_resource(self, recipe_id: int, resource_id: int) -> int:
        return await db.execute(
            self.conn,
            sql_delete_recipe_resource(),
            {"recipe_id": recipe_id, "resource_id": resource_id},
        )


def aggregate_resources(
    recipes: Mapping[int, Recipe], cart: Iterable[CartItem]
) -> list[ResourceTotal]:
    """Sum resource quantities over a cart, sorted by resource name.

    Cart items whose recipe is unknown are skipped. Quantities are multiplied
    as given, zero and negative included.
    """
    totals: dict[str, int] = {}
    for item in cart:
        recipe = recipes.get(item.id)
        if recipe is None:
            continue
        for requirement in recipe.resources:
            totals[requirement.name] = (
                totals.get(requirement.name, 0) + requirement.quantity * item.quantity
            )
    return [ResourceTotal(name=name, total=totals[name]) for name in sorted(totals)]


async def calculate_resources(store: RecipeStore, cart: list[CartItem]) -> list[ResourceTotal]:
    """Resolve every recipe in the cart and aggregate their resources."""
    recipes: dict[int, Recipe] = {}
    for item in cart:
        if item.id in recipes:
            continue
        recipe = await store.get_recipe(item.id)
        if recipe is None:
            logger.debug("Skipping unknown recipe id %s", item.id)
            continue
        recipes[item.id] = recipe
    return aggregate_resources(recipes, cart)
