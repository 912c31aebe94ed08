"""Category Service - seeded tree, per-category listing and cache version."""

import pytest

from plub.core.errors import ErrorKind, PlubError
from plub.seed import CATEGORY_TREE, seed_categories
from plub.services.category_service import CategoryService


async def test_seed_is_idempotent(test_db):
    assert await seed_categories(test_db) == len(CATEGORY_TREE)
    assert await seed_categories(test_db) == 0


async def test_lists_follow_seed_order(test_db):
    await seed_categories(test_db)
    service = CategoryService(test_db)

    categories = await service.list_categories()
    assert [c.name for c in categories] == list(CATEGORY_TREE)

    sports = next(c for c in categories if c.name == "Sports")
    subs = await service.list_sub_categories(sports.id)
    assert [s.name for s in subs] == CATEGORY_TREE["Sports"]
    assert {s.category_name for s in subs} == {"Sports"}


async def test_unknown_category_rejected(test_db):
    with pytest.raises(PlubError) as exc:
        await CategoryService(test_db).list_sub_categories(999)
    assert exc.value.kind is ErrorKind.NOT_FOUND_CATEGORY


async def test_version_needs_data(test_db):
    with pytest.raises(PlubError) as exc:
        await CategoryService(test_db).get_version()
    assert exc.value.kind is ErrorKind.NOT_FOUND_CATEGORY


async def test_version_reports_a_table(test_db):
    await seed_categories(test_db)
    version = await CategoryService(test_db).get_version()
    assert version.latest_table in ("category", "categorySub")
