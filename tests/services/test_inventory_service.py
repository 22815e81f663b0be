"""
Tests for the inventory service.
"""

from datetime import date

import pytest

from bizdesk.services.inventory_service import (
    adjust_product_stock,
    create_inventory,
    get_all_inventories,
    inventory_status,
    is_product_active,
    restock_inventory,
    update_inventory,
)


def inventory_row(**overrides):
    row = {
        "inventory_id": 30,
        "product_id": 21,
        "quantity": 4,
        "reorder_level": 5,
        "reorder_quantity": 20,
        "product": [{"product_id": 21, "product_name": "Bond Paper A4", "price": 2.5, "expiration_date": None}],
    }
    row.update(overrides)
    return row


class TestInventoryStatus:

    @pytest.mark.parametrize("quantity,reorder_level,expected", [
        (0, 5, "out"),
        (0, 0, "out"),
        (3, 5, "low"),
        (5, 5, "low"),
        (6, 5, "available"),
    ])
    def test_status(self, quantity, reorder_level, expected):
        assert inventory_status(quantity, reorder_level) == expected


class TestIsProductActive:

    TODAY = date(2025, 6, 15)

    def test_in_stock_without_expiry(self):
        assert is_product_active(None, 3, today=self.TODAY) is True

    def test_out_of_stock(self):
        assert is_product_active(None, 0, today=self.TODAY) is False

    def test_expired(self):
        assert is_product_active("2025-06-01", 10, today=self.TODAY) is False

    def test_expiring_today_is_inactive(self):
        assert is_product_active("2025-06-15", 10, today=self.TODAY) is False

    def test_future_expiry_timestamp(self):
        assert is_product_active("2025-07-01T00:00:00", 10, today=self.TODAY) is True


class TestQueries:

    @pytest.mark.asyncio
    async def test_list_adds_status_and_unwraps_product(self, fake_supabase):
        fake_supabase["inventories"].queue([inventory_row(), inventory_row(inventory_id=31, quantity=0)])

        rows = await get_all_inventories(fake_supabase)

        assert [r["status"] for r in rows] == ["low", "out"]
        assert rows[0]["product"]["product_name"] == "Bond Paper A4"
        assert fake_supabase["inventories"].calls("order") == [(("updated_at",), {"desc": True})]


class TestAdjustProductStock:

    @pytest.mark.asyncio
    async def test_applies_delta(self, fake_supabase):
        fake_supabase["inventories"].queue([{"inventory_id": 30, "quantity": 12}])

        assert await adjust_product_stock(fake_supabase, 21, -5) == 7
        assert fake_supabase["inventories"].calls("update") == [(({"quantity": 7},), {})]

    @pytest.mark.asyncio
    async def test_product_without_inventory(self, fake_supabase):
        assert await adjust_product_stock(fake_supabase, 21, 4) is None
        assert fake_supabase["inventories"].calls("update") == []


class TestCreateInventory:

    @pytest.mark.asyncio
    async def test_missing_product(self, fake_supabase):
        fake_supabase["products"].queue([])

        with pytest.raises(ValueError, match="does not exist"):
            await create_inventory(fake_supabase, {"product_id": 21, "quantity": 1, "reorder_level": 1})

    @pytest.mark.asyncio
    async def test_one_row_per_product(self, fake_supabase):
        fake_supabase["products"].queue([{"product_id": 21}])
        fake_supabase["inventories"].queue([{"inventory_id": 30}])

        with pytest.raises(ValueError, match="already has an inventory record"):
            await create_inventory(fake_supabase, {"product_id": 21, "quantity": 1, "reorder_level": 1})

        assert fake_supabase["inventories"].calls("insert") == []


class TestUpdateAndRestock:

    @pytest.mark.asyncio
    async def test_update_refreshes_active_flag(self, fake_supabase):
        inventories = fake_supabase["inventories"]
        inventories.queue([inventory_row()])
        inventories.queue([inventory_row(quantity=0)])
        inventories.queue([inventory_row(quantity=0)])
        fake_supabase["products"].queue([{"product_id": 21, "expiration_date": None}])

        updated = await update_inventory(fake_supabase, 30, {"quantity": 0, "reorder_level": 5})

        assert fake_supabase["products"].calls("update") == [(({"is_active": False},), {})]
        assert updated["status"] == "out"

    @pytest.mark.asyncio
    async def test_restock_adds_stock_and_logs_movement(self, fake_supabase):
        inventories = fake_supabase["inventories"]
        inventories.queue([inventory_row()])
        inventories.queue([{"inventory_id": 30}])
        inventories.queue([inventory_row(quantity=24)])
        fake_supabase["products"].queue([{"product_id": 21, "expiration_date": None}])

        restocked = await restock_inventory(fake_supabase, 30, 20, user_id="staff-1")

        update = inventories.calls("update")[0][0][0]
        assert update["quantity"] == 24
        assert update["last_restock_quantity"] == 20
        assert update["last_restock_date"] == date.today().isoformat()

        assert fake_supabase["products"].calls("update") == [(({"is_active": True},), {})]

        movement = fake_supabase["product_transactions"].calls("insert")[0][0][0]
        assert movement["type"] == "IN"
        assert movement["quantity"] == 20
        assert movement["previous_quantity"] == 4
        assert movement["new_quantity"] == 24
        assert movement["total_amount"] == 50.0
        assert movement["reference_type"] == "restock"
        assert movement["user_id"] == "staff-1"
        assert movement["notes"] == "Restock - Added 20 units"

        assert restocked["status"] == "available"

    @pytest.mark.asyncio
    async def test_restock_missing_row(self, fake_supabase):
        assert await restock_inventory(fake_supabase, 99, 5) is None
        assert fake_supabase["product_transactions"].calls("insert") == []
