"""
Tests for the category service.
"""

import pytest

from bizdesk.services.category_service import (
    CategoryInUseError,
    _flatten_product_count,
    create_category,
    delete_category,
    get_all_categories,
    update_category,
)


class TestProductCount:

    def test_embedded_count_is_flattened(self):
        flattened = _flatten_product_count({"category_id": 1, "products": [{"count": 7}]})

        assert flattened == {"category_id": 1, "products_count": 7}

    def test_missing_embed_counts_zero(self):
        assert _flatten_product_count({"category_id": 1})["products_count"] == 0
        assert _flatten_product_count({"category_id": 1, "products": []})["products_count"] == 0

    @pytest.mark.asyncio
    async def test_listing(self, fake_supabase):
        fake_supabase["categories"].queue([
            {"category_id": 2, "category_name": "Paper", "products": [{"count": 3}]},
            {"category_id": 1, "category_name": "Ink", "products": [{"count": 0}]},
        ])

        categories = await get_all_categories(fake_supabase)

        assert [c["products_count"] for c in categories] == [3, 0]
        assert fake_supabase["categories"].calls("select") == [(("*, products(count)",), {})]


class TestWrites:

    @pytest.mark.asyncio
    async def test_create(self, fake_supabase):
        fake_supabase["categories"].queue([])
        fake_supabase["categories"].queue([{"category_id": 3, "category_name": "Binding"}])

        created = await create_category(fake_supabase, {"category_name": "Binding", "description": None})

        assert created["products_count"] == 0
        assert fake_supabase["categories"].calls("insert") == [(({"category_name": "Binding", "description": None},), {})]

    @pytest.mark.asyncio
    async def test_create_duplicate_name(self, fake_supabase):
        fake_supabase["categories"].queue([{"category_id": 1}])

        with pytest.raises(ValueError, match="has already been taken"):
            await create_category(fake_supabase, {"category_name": "Paper"})

    @pytest.mark.asyncio
    async def test_update_keeps_count(self, fake_supabase):
        fake_supabase["categories"].queue([{"category_id": 2, "category_name": "Paper", "products": [{"count": 3}]}])
        fake_supabase["categories"].queue([])
        fake_supabase["categories"].queue([{"category_id": 2, "category_name": "Paper Goods"}])

        updated = await update_category(fake_supabase, 2, {"category_name": "Paper Goods"})

        assert updated["products_count"] == 3
        assert fake_supabase["categories"].calls("neq") == [(("category_id", 2), {})]


class TestDeleteCategory:

    @pytest.mark.asyncio
    async def test_in_use(self, fake_supabase):
        fake_supabase["categories"].queue([{"category_id": 2, "products": [{"count": 1}]}])

        with pytest.raises(CategoryInUseError, match="reassign or delete the products first"):
            await delete_category(fake_supabase, 2)

        assert fake_supabase["categories"].calls("delete") == []

    @pytest.mark.asyncio
    async def test_empty_category(self, fake_supabase):
        fake_supabase["categories"].queue([{"category_id": 2, "products": [{"count": 0}]}])

        assert await delete_category(fake_supabase, 2) is True
        assert fake_supabase["categories"].calls("delete") == [((), {})]

    @pytest.mark.asyncio
    async def test_missing(self, fake_supabase):
        assert await delete_category(fake_supabase, 2) is False
