"""Tables backing the recipe catalog."""

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS resources (
        id INTEGER GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
        name TEXT NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS crafting_recipes (
        id INTEGER GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
        name TEXT NOT NULL,
        category TEXT NOT NULL,
        description TEXT NOT NULL DEFAULT ''
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS recipe_resources (
        id INTEGER GENERATED BY DEFAULT AS IDENTITY PRIMARY KEY,
        recipe_id INTEGER NOT NULL REFERENCES crafting_recipes(id) ON DELETE CASCADE,
        resource_id INTEGER NOT NULL REFERENCES resources(id) ON DELETE CASCADE,
        quantity INTEGER NOT NULL CHECK (quantity > 0),
        UNIQUE (recipe_id, resource_id)
    )
    """,
]


async def create_schema(conn) -> None:
    """Create the catalog tables that do not exist yet."""
    async with conn.cursor() as cur:
        for statement in SCHEMA:
            await cur.execute(statement)
    print("Catalog tables ready")
