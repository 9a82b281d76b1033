#!/usr/bin/env python3
"""Create the catalog tables and populate them with sample recipes.

Usage:
    python -m seed.run [--clear]

Options:
    --clear     Remove the catalog contents before inserting
"""

import argparse
import asyncio
import sys

import psycopg

from core.config import AppConfig
from seed.schema import create_schema
from seed.recipes import seed_recipes, clear_recipes


async def main(clear: bool = False) -> int:
    """Run all seed scripts."""
    config = AppConfig.load()

    if not config.database.host:
        print("Error: No database configured")
        return 1

    print(f"Connecting to database: {config.database.host}/{config.database.name}")

    async with await psycopg.AsyncConnection.connect(
        config.database.conninfo
    ) as conn:
        # Each statement commits on its own; an interrupted run leaves partial data
        await conn.set_autocommit(True)

        print("\n=== Creating schema ===")
        await create_schema(conn)

        if clear:
            print("\n=== Clearing seed data ===")
            await clear_recipes(conn)

        print("\n=== Seeding recipes ===")
        await seed_recipes(conn)

        print("\n=== Seed complete ===")
        return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the database with sample recipes")
    parser.add_argument(
        "--clear",
        action="store_true",
        help="Clear existing catalog data before inserting",
    )
    args = parser.parse_args()

    sys.exit(asyncio.run(main(clear=args.clear)))
