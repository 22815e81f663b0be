"""Tests for the shop resource clients (categories, products, inventory, orders)."""

import json

import httpx
import pytest

from bizdesk.client.dashboard import get_dashboard_stats
from bizdesk.client.http import create_api_client
from bizdesk.client.resources import (
    CategoriesAPI,
    InventoryAPI,
    OrdersAPI,
    ProductsAPI,
    ResourceAPI,
)


@pytest.fixture
def requests_seen():
    return []


@pytest.fixture
def api(requests_seen):
    def handler(request: httpx.Request) -> httpx.Response:
        requests_seen.append(request)
        return httpx.Response(200, json={"echo": request.url.path})

    return create_api_client(base_url="http://testserver/api", transport=httpx.MockTransport(handler))


class TestResourceAPI:

    def test_requires_path(self, api):
        with pytest.raises(ValueError):
            ResourceAPI(api)

    @pytest.mark.asyncio
    async def test_crud_urls(self, api, requests_seen):
        products = ProductsAPI(api)

        await products.get_all()
        await products.get_by_id(4)
        await products.create({"product_name": "Bond paper"})
        await products.update(4, {"price": 5})
        await products.delete(4)

        assert [(r.method, r.url.path) for r in requests_seen] == [
            ("GET", "/api/products"),
            ("GET", "/api/products/4"),
            ("POST", "/api/products"),
            ("PUT", "/api/products/4"),
            ("DELETE", "/api/products/4"),
        ]

    @pytest.mark.asyncio
    async def test_update_forwards_payload_unmodified(self, api, requests_seen):
        payload = {"category_name": "Paper", "status": None, "weird": [{"a": 1}]}

        await CategoriesAPI(api).update(2, payload)

        assert json.loads(requests_seen[0].content) == payload

    @pytest.mark.asyncio
    async def test_returns_decoded_body(self, api):
        result = await CategoriesAPI(api).get_by_id(8)

        assert result == {"echo": "/api/categories/8"}


class TestInventoryAPI:

    @pytest.mark.asyncio
    async def test_restock_posts_quantity(self, api, requests_seen):
        await InventoryAPI(api).restock(3, 25)

        request = requests_seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/inventories/3/restock"
        assert json.loads(request.content) == {"quantity": 25}


class TestOrdersAPI:

    @pytest.mark.asyncio
    async def test_complete_posts_payment_data_verbatim(self, api, requests_seen):
        payment = {"payment_method": "GCash", "amount": 150.0, "reference_number": "GC-1"}

        await OrdersAPI(api).complete(12, payment)

        request = requests_seen[0]
        assert request.method == "POST"
        assert request.url.path == "/api/orders/12/complete"
        assert json.loads(request.content) == payment

    @pytest.mark.asyncio
    async def test_void(self, api, requests_seen):
        await OrdersAPI(api).void(12, {"void_reason": "Customer cancelled"})

        assert requests_seen[0].url.path == "/api/orders/12/void"
        assert json.loads(requests_seen[0].content) == {"void_reason": "Customer cancelled"}

    @pytest.mark.asyncio
    async def test_search_by_order_number(self, api, requests_seen):
        await OrdersAPI(api).search_by_order_number("ORD-2025-0007")

        request = requests_seen[0]
        assert request.url.path == "/api/orders"
        assert request.url.params["order_number"] == "ORD-2025-0007"

    @pytest.mark.asyncio
    async def test_sales_history_params(self, api, requests_seen):
        await OrdersAPI(api).get_sales_history({"start_date": "2025-01-01", "end_date": "2025-01-31"})

        request = requests_seen[0]
        assert request.url.path == "/api/orders/sales/history"
        assert request.url.params["start_date"] == "2025-01-01"
        assert request.url.params["end_date"] == "2025-01-31"


@pytest.mark.asyncio
async def test_dashboard_stats(api, requests_seen):
    result = await get_dashboard_stats(api)

    assert len(requests_seen) == 1
    assert requests_seen[0].method == "GET"
    assert result == {"echo": "/api/dashboard"}
