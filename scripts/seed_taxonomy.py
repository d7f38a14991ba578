#!/usr/bin/env python3
"""Seed taxonomy script.

Creates a small example taxonomy (Vehicle > Car > Tesla) with inherited
params and one product, using the configured database.

Usage:
    python scripts/seed_taxonomy.py
    python scripts/seed_taxonomy.py --database-url sqlite+aiosqlite:///classtree.db
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from classtree.application.taxonomy_service import TaxonomyService
from classtree.domain.entities import (
    ClassNode,
    OrganizationalUnit,
    Param,
    ParamValue,
    Product,
)
from classtree.domain.exceptions import NotFoundError
from classtree.infrastructure.config import settings
from classtree.infrastructure.database import Database


def example_tree(unit: OrganizationalUnit) -> ClassNode:
    """Build the example Vehicle subtree."""
    return ClassNode(
        name="Vehicle",
        unit=unit,
        params=[Param(name="color", value_type="string", unit=unit)],
        children=[
            ClassNode(
                name="Car",
                unit=unit,
                params=[Param(name="doors", value_type="int", unit=unit)],
                children=[
                    ClassNode(
                        name="Tesla",
                        unit=unit,
                        params=[Param(name="range_km", value_type="int", unit=unit)],
                    ),
                ],
            ),
        ],
    )


async def seed(database: Database) -> dict:
    """Seed the example taxonomy.

    Does nothing when the Vehicle class already exists, so the script can be
    run again against a seeded database.

    Args:
        database: Target database.

    Returns:
        Seeding result.
    """
    service = TaxonomyService(database)
    try:
        existing = await service.read_class_children("Vehicle")
    except NotFoundError:
        pass
    else:
        return {"class_ids": [existing.id], "product_ids": [], "already_seeded": True}

    unit = OrganizationalUnit(name="Fleet", short_name="FLT")

    await service.ensure_units([unit])
    await service.ensure_value_types(["string", "int"])
    class_ids = await service.create_classes([example_tree(unit)])
    product_ids = await service.create_products(
        [
            Product(
                name="Model S",
                parent_class=ClassNode(name="Tesla"),
                values=[
                    ParamValue(param=Param(name="color", value_type="string"), value="red"),
                    ParamValue(param=Param(name="doors", value_type="int"), value="4"),
                    ParamValue(param=Param(name="range_km", value_type="int"), value="600"),
                ],
            ),
        ]
    )
    return {"class_ids": class_ids, "product_ids": product_ids, "already_seeded": False}


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed an example class taxonomy",
    )
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="SQLAlchemy async database URL (default: from settings)",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("classtree Taxonomy Seeder")
    print("=" * 60)

    database = Database(args.database_url)
    try:
        print("Creating database tables...")
        await database.create_schema()
        print("Tables ready.")
        print()

        result = await seed(database)
        if result["already_seeded"]:
            print(f"  - Taxonomy already seeded (Vehicle id {result['class_ids'][0]})")
        else:
            print(f"  ✓ Root classes: {result['class_ids']}")
            print(f"  ✓ Products: {result['product_ids']}")
    finally:
        await database.dispose()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
