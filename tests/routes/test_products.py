"""Tests for /api/products endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from bizdesk.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def mock_get_supabase_client(supabase_client):
    with patch("bizdesk.routes.products.get_supabase_client") as mock:
        mock.return_value = supabase_client
        yield mock


@pytest.fixture
def product_payload():
    return {
        "product_name": "Bond Paper A4",
        "barcode": "4800016644283",
        "category_id": 4,
        "price": 5.5,
        "cost": 3.2,
        "unit": "pcs",
        "expiration_date": None,
        "status": "active",
    }


@pytest.fixture
def mock_product(product_payload):
    return {
        "product_id": 21,
        **product_payload,
        "is_active": False,
        "category": {"category_id": 4, "category_name": "School Supplies"},
        "inventory": {"inventory_id": 30, "quantity": 0, "reorder_level": 20, "reorder_quantity": 50},
    }


class TestListProducts:

    @patch("bizdesk.routes.products.get_all_products")
    def test_list(self, mock_list, mock_product):
        mock_list.return_value = [mock_product]

        response = client.get("/api/products")

        assert response.status_code == 200
        assert response.json()[0]["inventory"]["reorder_level"] == 20
        assert response.headers["cache-control"] == "public, max-age=30, s-maxage=30"

    @patch("bizdesk.routes.products.get_all_products")
    def test_barcode_search_is_forwarded(self, mock_list):
        mock_list.return_value = []

        client.get("/api/products", params={"search": "4800016644283"})

        assert mock_list.call_args.kwargs["search"] == "4800016644283"


class TestCreateProduct:

    @patch("bizdesk.routes.products.create_product")
    def test_create(self, mock_create, product_payload, mock_product):
        mock_create.return_value = mock_product

        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 201
        assert response.json()["product_id"] == 21
        assert response.json()["inventory"]["quantity"] == 0

    def test_negative_price(self, product_payload):
        product_payload["price"] = -1

        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 422

    def test_missing_barcode(self, product_payload):
        product_payload.pop("barcode")

        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 422

    @patch("bizdesk.routes.products.create_product")
    def test_unknown_category(self, mock_create, product_payload):
        mock_create.side_effect = ValueError("Category 4 does not exist")

        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 422
        assert response.json()["detail"]["details"] == "Category 4 does not exist"

    @patch("bizdesk.routes.products.create_product")
    def test_barcode_race_is_conflict(self, mock_create, product_payload):
        mock_create.side_effect = APIError({"message": "duplicate key value violates unique constraint", "code": "23505"})

        response = client.post("/api/products", json=product_payload)

        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "duplicate"


class TestProductById:

    @patch("bizdesk.routes.products.get_product_by_id")
    def test_show(self, mock_get, mock_product):
        mock_get.return_value = mock_product

        response = client.get("/api/products/21")

        assert response.status_code == 200
        assert response.json()["category"]["category_name"] == "School Supplies"

    @patch("bizdesk.routes.products.update_product")
    def test_update_missing(self, mock_update, product_payload):
        mock_update.return_value = None

        response = client.put("/api/products/21", json=product_payload)

        assert response.status_code == 404

    @patch("bizdesk.routes.products.delete_product")
    def test_delete(self, mock_delete):
        mock_delete.return_value = True

        response = client.delete("/api/products/21")

        assert response.status_code == 200
        assert response.json() == {"message": "Product deleted successfully"}
