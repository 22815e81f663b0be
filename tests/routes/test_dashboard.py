"""Tests for GET /api/dashboard."""

from datetime import date
from unittest.mock import patch

from fastapi.testclient import TestClient

from bizdesk.main import app
from bizdesk.services.dashboard_service import daily_sales, monthly_sales, weekly_sales

client = TestClient(app)


def dashboard_payload():
    today = date(2025, 3, 14)
    return {
        "stats": {
            "total_products": 40,
            "low_stock_count": 1,
            "active_orders": 3,
            "today_revenue": 120.0,
            "total_revenue": 5400.0,
        },
        "orders_by_status": {"pending": 2, "in_progress": 1, "completed": 30, "cancelled": 1},
        "low_stock_items": [{"product_name": "Folder", "quantity": 4, "reorder_level": 20}],
        "recent_orders": [{"order_id": 34, "order_number": "ORD-2025-0034"}],
        "top_products": [{"product_name": "Bond Paper A4", "total_sold": 310}],
        "revenue_by_service": [{"service_type": "Printing", "revenue": 3200.0}],
        "daily_sales": daily_sales([], today),
        "weekly_sales": weekly_sales([], today),
        "monthly_sales": monthly_sales([], today),
    }


@patch("bizdesk.routes.dashboard.get_supabase_client")
@patch("bizdesk.routes.dashboard.get_dashboard")
def test_dashboard(mock_dashboard, mock_client):
    mock_dashboard.return_value = dashboard_payload()

    response = client.get("/api/dashboard")

    assert response.status_code == 200
    body = response.json()
    assert body["stats"]["total_products"] == 40
    assert len(body["daily_sales"]) == 31
    assert len(body["monthly_sales"]) == 12
    assert body["monthly_sales"][2]["fullMonth"] == "March 2025"
    assert response.headers["x-cache-duration"] == "30"


@patch("bizdesk.routes.dashboard.get_supabase_client")
@patch("bizdesk.routes.dashboard.get_dashboard")
def test_large_dashboard_is_gzipped(mock_dashboard, mock_client):
    mock_dashboard.return_value = dashboard_payload()

    response = client.get("/api/dashboard", headers={"Accept-Encoding": "gzip"})

    assert response.headers["content-encoding"] == "gzip"
    assert response.json()["stats"]["active_orders"] == 3


@patch("bizdesk.routes.dashboard.get_supabase_client")
@patch("bizdesk.routes.dashboard.get_dashboard")
def test_dashboard_failure(mock_dashboard, mock_client):
    mock_dashboard.side_effect = RuntimeError("boom")

    response = client.get("/api/dashboard")

    assert response.status_code == 500
    assert response.json()["detail"] == {"error": "fetch_error", "details": "Failed to retrieve dashboard"}
