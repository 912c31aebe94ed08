"""Category Seed - loads the fixed category tree into an empty database.

Usage: python -m plub.seed

Invariants:
    - Idempotent: categories already present (by name) are left untouched
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from plub.config import get_settings
from plub.db.session import create_session_factory
from plub.infrastructure.observability import setup_logging
from plub.models.category import Category, SubCategory

logger = logging.getLogger(__name__)

CATEGORY_TREE: dict[str, list[str]] = {
    "Art": ["Drawing", "Calligraphy", "Crafts", "Photography"],
    "Sports": ["Running", "Climbing", "Football", "Yoga", "Swimming"],
    "Music": ["Band", "Singing", "Piano", "Guitar"],
    "Study": ["Language", "Certificate", "Coding", "Reading"],
    "Cooking": ["Baking", "Home Cooking", "Coffee"],
    "Culture": ["Movies", "Exhibitions", "Theater"],
    "Travel": ["Domestic", "Abroad", "Camping"],
    "Games": ["Board Games", "Video Games"],
}


async def seed_categories(db: AsyncSession) -> int:
    """Insert missing categories with their sub-categories. Returns how many were added."""
    existing = set((await db.execute(select(Category.name))).scalars().all())
    added = 0
    for order, (name, subs) in enumerate(CATEGORY_TREE.items()):
        if name in existing:
            continue
        category = Category(name=name, sort_order=order)
        db.add(category)
        await db.flush()
        for sub_order, sub_name in enumerate(subs):
            db.add(SubCategory(
                category_id=category.id, name=sub_name, sort_order=sub_order,
            ))
        added += 1
    await db.commit()
    return added


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    session_factory = create_session_factory(settings.database_url)
    async with session_factory() as db:
        added = await seed_categories(db)
    logger.info(f"Seeded {added} categories")


if __name__ == "__main__":
    asyncio.run(main())
