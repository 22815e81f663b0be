"""
Tests for /api/orders endpoints.

Covers listing, creation with items, completion (payment + 400 on repeat),
voiding, sales history and route ordering (/sales/history vs /{order_id}).
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from bizdesk.main import app
from bizdesk.services.order_service import OrderAlreadyCompletedError, OrderAlreadyVoidedError

client = TestClient(app)


@pytest.fixture(autouse=True)
def mock_get_supabase_client(supabase_client):
    with patch("bizdesk.routes.orders.get_supabase_client") as mock:
        mock.return_value = supabase_client
        yield mock


@pytest.fixture
def mock_order():
    return {
        "order_id": 12,
        "order_number": "ORD-2025-0012",
        "customer_name": "Maria Santos",
        "service_type": "Printing",
        "status": "Pending",
        "notes": None,
        "preferred_pickup_date": "2025-03-15",
        "total_amount": 55.0,
        "completed_date": None,
        "is_voided": False,
        "order_items": [
            {
                "order_item_id": 1,
                "order_id": 12,
                "product_id": 21,
                "product_name": "Bond Paper A4",
                "quantity": 10,
                "unit_price": 5.5,
                "subtotal": 55.0,
            }
        ],
        "payment": None,
        "created_at": "2025-03-10T08:00:00Z",
    }


@pytest.fixture
def order_payload():
    return {
        "customer_name": "Maria Santos",
        "service_type": "Printing",
        "preferred_pickup_date": "2025-03-15",
        "order_items": [{"product_id": 21, "quantity": 10, "unit_price": 5.5}],
    }


class TestListOrders:

    @patch("bizdesk.routes.orders.get_orders")
    def test_list(self, mock_list, mock_order):
        mock_list.return_value = [mock_order]

        response = client.get("/api/orders")

        assert response.status_code == 200
        assert response.json()[0]["order_items"][0]["subtotal"] == 55.0
        assert mock_list.call_args.kwargs["order_number"] is None
        # orders are not in the cacheable table
        assert response.headers["x-cache-status"] == "NO-CACHE"

    @patch("bizdesk.routes.orders.get_orders")
    def test_filter_by_order_number(self, mock_list, mock_order):
        mock_list.return_value = [mock_order]

        client.get("/api/orders", params={"order_number": "ORD-2025-0012"})

        assert mock_list.call_args.kwargs["order_number"] == "ORD-2025-0012"


class TestCreateOrder:

    @patch("bizdesk.routes.orders.create_order")
    def test_create(self, mock_create, order_payload, mock_order):
        mock_create.return_value = mock_order

        response = client.post("/api/orders", json=order_payload)

        assert response.status_code == 201
        assert response.json()["order_number"] == "ORD-2025-0012"
        sent = mock_create.call_args.args[1]
        assert sent["order_items"] == [{"product_id": 21, "quantity": 10, "unit_price": 5.5, "notes": None}]

    def test_requires_items(self, order_payload):
        order_payload["order_items"] = []

        response = client.post("/api/orders", json=order_payload)

        assert response.status_code == 422

    def test_rejects_unknown_service_type(self, order_payload):
        order_payload["service_type"] = "Catering"

        response = client.post("/api/orders", json=order_payload)

        assert response.status_code == 422

    @patch("bizdesk.routes.orders.create_order")
    def test_missing_product(self, mock_create, order_payload):
        mock_create.side_effect = ValueError("Product 21 does not exist")

        response = client.post("/api/orders", json=order_payload)

        assert response.status_code == 422


class TestUpdateOrder:

    @patch("bizdesk.routes.orders.update_order")
    def test_only_sent_fields_are_forwarded(self, mock_update, mock_order):
        mock_update.return_value = {**mock_order, "status": "In Progress"}

        response = client.put("/api/orders/12", json={"status": "In Progress"})

        assert response.status_code == 200
        assert mock_update.call_args.args[2] == {"status": "In Progress"}

    @patch("bizdesk.routes.orders.update_order")
    def test_missing(self, mock_update):
        mock_update.return_value = None

        response = client.put("/api/orders/12", json={"notes": "rush"})

        assert response.status_code == 404


class TestCompleteOrder:

    @patch("bizdesk.routes.orders.complete_order")
    def test_complete(self, mock_complete, mock_order):
        payment = {"payment_id": 3, "order_id": 12, "payment_method": "Cash", "amount": 55.0}
        mock_complete.return_value = ({**mock_order, "status": "Completed"}, payment)

        response = client.post(
            "/api/orders/12/complete",
            json={"payment_method": "Cash", "amount": 55.0},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Order completed successfully"
        assert body["order"]["status"] == "Completed"
        assert body["payment"]["payment_id"] == 3

    @patch("bizdesk.routes.orders.complete_order")
    def test_already_completed_is_400(self, mock_complete):
        mock_complete.side_effect = OrderAlreadyCompletedError("Order is already completed")

        response = client.post(
            "/api/orders/12/complete",
            json={"payment_method": "GCash", "amount": 55.0, "reference_number": "GC123"},
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "already_completed"

    def test_rejects_unknown_payment_method(self):
        response = client.post(
            "/api/orders/12/complete",
            json={"payment_method": "Card", "amount": 55.0},
        )

        assert response.status_code == 422


class TestVoidOrder:

    @patch("bizdesk.routes.orders.void_order")
    def test_void(self, mock_void, mock_order):
        mock_void.return_value = {
            **mock_order,
            "status": "Cancelled",
            "is_voided": True,
            "void_reason": "Duplicate order",
        }

        response = client.post("/api/orders/12/void", json={"void_reason": "Duplicate order"})

        assert response.status_code == 200
        assert response.json()["order"]["is_voided"] is True
        assert mock_void.call_args.args[2] == "Duplicate order"

    def test_reason_required(self):
        response = client.post("/api/orders/12/void", json={})

        assert response.status_code == 422

    @patch("bizdesk.routes.orders.void_order")
    def test_void_twice_is_400(self, mock_void):
        mock_void.side_effect = OrderAlreadyVoidedError("Order is already voided")

        response = client.post("/api/orders/12/void", json={"void_reason": "again"})

        assert response.status_code == 400


class TestSalesHistory:

    @patch("bizdesk.routes.orders.get_order_by_id")
    @patch("bizdesk.routes.orders.get_sales_history")
    def test_not_captured_by_order_id_route(self, mock_history, mock_get):
        mock_history.return_value = []

        response = client.get("/api/orders/sales/history")

        assert response.status_code == 200
        mock_get.assert_not_called()

    @patch("bizdesk.routes.orders.get_sales_history")
    def test_date_bounds_are_parsed(self, mock_history):
        mock_history.return_value = []

        client.get("/api/orders/sales/history", params={"start_date": "2025-03-01", "end_date": "2025-03-31"})

        kwargs = mock_history.call_args.kwargs
        assert kwargs["start_date"].isoformat() == "2025-03-01"
        assert kwargs["end_date"].isoformat() == "2025-03-31"

    def test_inverted_range_is_400(self):
        response = client.get(
            "/api/orders/sales/history",
            params={"start_date": "2025-03-31", "end_date": "2025-03-01"},
        )

        assert response.status_code == 400


class TestDeleteOrder:

    @patch("bizdesk.routes.orders.delete_order")
    def test_delete(self, mock_delete):
        mock_delete.return_value = True

        response = client.delete("/api/orders/12")

        assert response.status_code == 200
        assert response.json() == {"message": "Order deleted successfully"}
