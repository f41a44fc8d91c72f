#!/usr/bin/env python3
"""Seed product catalog script.

Creates the catalog tables and fills them with demo categories and
products. Writes go through CatalogMutationService so the image store
and cache behave exactly as they do for live mutations.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --products-per-category 20
    python scripts/seed_catalog.py --database-url sqlite+aiosqlite:///./demo.db
"""

import argparse
import asyncio
import random
import sys
from decimal import Decimal
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from shopcatalog.catalog.schemas import ProductData
from shopcatalog.container import CatalogContainer
from shopcatalog.domain.exceptions import CategoryAlreadyExistsError
from shopcatalog.infrastructure.config import Settings
from shopcatalog.infrastructure.logging_setup import configure_logging

CATEGORIES = {
    "Floral": ["Rosebud", "Wild Poppy", "Lavender Sprig", "Sunflower", "Peony"],
    "Animals": ["Fox", "Hummingbird", "Owl", "Koi", "Hedgehog"],
    "Lettering": ["Monogram", "Home Sweet Home", "Birthday Script", "Alphabet Sampler"],
    "Seasonal": ["Snowflake", "Pumpkin", "Easter Egg", "Holly Wreath"],
}

# 1x1 transparent PNG
PLACEHOLDER_IMAGE = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


async def seed(container: CatalogContainer, products_per_category: int, seed_value: int) -> dict:
    """Seed categories and products.

    Args:
        container: Catalog container.
        products_per_category: Products to create per category.
        seed_value: Random seed for prices and name variants.

    Returns:
        Seeding result with counts.
    """
    rng = random.Random(seed_value)
    categories_created = 0
    products_created = 0

    async with container.session() as services:
        for category_name, designs in CATEGORIES.items():
            try:
                await services.mutations.create_category(category_name)
                categories_created += 1
            except CategoryAlreadyExistsError:
                pass

            for i in range(products_per_category):
                design = designs[i % len(designs)]
                edition = i // len(designs) + 1
                name = design if edition == 1 else f"{design} No. {edition}"
                price = Decimal(rng.randrange(499, 4999)) / 100

                await services.mutations.create_product(
                    ProductData(
                        name=name,
                        description=f"Embroidery pattern: {name.lower()}",
                        price=price,
                    ),
                    category_name=category_name,
                    image_bytes=PLACEHOLDER_IMAGE,
                    image_name=f"{name.lower().replace(' ', '-')}.png",
                )
                products_created += 1

    return {
        "categories_created": categories_created,
        "products_created": products_created,
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the shop catalog with demo data",
    )
    parser.add_argument(
        "--products-per-category",
        type=int,
        default=6,
        help="Products to create in each category (default: 6)",
    )
    parser.add_argument(
        "--database-url",
        default=None,
        help="Override DATABASE_URL",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed (default: 42)",
    )

    args = parser.parse_args()

    config = Settings()
    if args.database_url:
        config = config.model_copy(update={"database_url": args.database_url})

    configure_logging(config.log_level, json=config.log_json)

    print("=" * 60)
    print("Shop Catalog Seeder")
    print("=" * 60)
    print(f"Database: {config.database_url}")
    print(f"Products per category: {args.products_per_category}")
    print()

    container = CatalogContainer(config)
    try:
        print("Creating database tables...")
        await container.init_schema()
        print("Tables ready.")
        print()

        result = await seed(container, args.products_per_category, args.seed)

        print(f"  ✓ Categories: {result['categories_created']}")
        print(f"  ✓ Products: {result['products_created']}")
        print()
    finally:
        await container.shutdown()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
