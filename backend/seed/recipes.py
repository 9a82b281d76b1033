"""Seed data for the recipe catalog."""

RESOURCES = [
    "Wood",
    "Stone",
    "Cloth",
    "Paldium Fragment",
    "Metal Ore",
    "Coal",
    "Fiber",
]

# Format: (name, category, description, {resource: quantity})
RECIPES = [
    ("Wooden Club", "Weapons", "A simple wooden weapon for early combat", {"Wood": 5, "Stone": 2}),
    ("Stone Pickaxe", "Tools", "Essential tool for mining stone and ore", {"Wood": 5, "Stone": 5}),
    ("Stone Axe", "Tools", "Efficient tool for cutting trees", {"Wood": 5, "Stone": 5}),
    ("Campfire", "Structures", "Cook food and provide warmth", {"Wood": 10, "Stone": 5}),
    ("Wooden Chest", "Storage", "Basic storage container", {"Wood": 15, "Stone": 5}),
    ("Cloth Outfit", "Armor", "Basic protection from elements", {"Cloth": 10}),
    ("Pal Sphere", "Pal Items", "Capture wild Pals", {"Paldium Fragment": 3, "Wood": 3, "Stone": 3}),
    ("Workbench", "Structures", "Craft advanced items", {"Wood": 20, "Stone": 10}),
    ("Wooden Foundation", "Building", "Foundation for wooden structures", {"Wood": 8}),
    ("Wooden Wall", "Building", "Wall for wooden structures", {"Wood": 6}),
]


async def seed_recipes(conn) -> None:
    """Insert resources, then recipes with their requirements, if the catalog is empty."""
    async with conn.cursor() as cur:
        await cur.execute("SELECT COUNT(*) FROM crafting_recipes")
        row = await cur.fetchone()
        if row and row[0] > 0:
            print(f"Catalog already has {row[0]} recipes, skipping")
            return

        for name in RESOURCES:
            await cur.execute(
                """
                INSERT INTO resources (name)
                VALUES (%(name)s)
                ON CONFLICT (name) DO NOTHING
                """,
                {"name": name},
            )
        print(f"Ensured {len(RESOURCES)} resources")

        for name, category, description, requirements in RECIPES:
            await cur.execute(
                """
                INSERT INTO crafting_recipes (name, category, description)
                VALUES (%(name)s, %(category)s, %(description)s)
                RETURNING id
                """,
                {"name": name, "category": category, "description": description},
            )
            recipe_row = await cur.fetchone()
            recipe_id = recipe_row[0]

            for resource_name, quantity in requirements.items():
                await cur.execute(
                    "SELECT id FROM resources WHERE name = %(name)s",
                    {"name": resource_name},
                )
                resource_row = await cur.fetchone()
                if not resource_row:
                    print(f"  Warning: Resource not found: {resource_name}")
                    continue

                await cur.execute(
                    """
                    INSERT INTO recipe_resources (recipe_id, resource_id, quantity)
                    VALUES (%(recipe_id)s, %(resource_id)s, %(quantity)s)
                    """,
                    {
                        "recipe_id": recipe_id,
                        "resource_id": resource_row[0],
                        "quantity": quantity,
                    },
                )
            print(f"Created recipe: {name} (id: {recipe_id})")


async def clear_recipes(conn) -> None:
    """Remove the catalog contents."""
    async with conn.cursor() as cur:
        await cur.execute("DELETE FROM recipe_resources")
        print("Cleared recipe requirements")

        await cur.execute("DELETE FROM crafting_recipes")
        print("Cleared recipes")

        await cur.execute("DELETE FROM resources")
        print("Cleared resources")
