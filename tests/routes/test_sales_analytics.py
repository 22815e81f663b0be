"""Tests for /api/sales-analytics endpoints."""

from datetime import date
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from bizdesk.main import app

client = TestClient(app)


@pytest.fixture(autouse=True)
def mock_get_supabase_client(supabase_client):
    with patch("bizdesk.routes.sales_analytics.get_supabase_client") as mock:
        mock.return_value = supabase_client
        yield mock


def sales(label, total_sales=0.0, total_orders=0):
    return {"date": label, "total_sales": total_sales, "total_orders": total_orders}


class TestSalesAnalytics:

    @patch("bizdesk.routes.sales_analytics.get_sales_analytics")
    def test_period_and_date(self, mock_analytics):
        mock_analytics.return_value = {
            "period": "monthly",
            "date": "2025-03-15",
            "current": sales("2025-03", 1200.0, 9),
            "previous": sales("2025-02", 1000.0, 8),
            "growth_rate": 20.0,
            "trend": "up",
        }

        response = client.get("/api/sales-analytics", params={"period": "monthly", "date": "2025-03-15"})

        assert response.status_code == 200
        assert response.json()["current"]["total_orders"] == 9
        assert mock_analytics.call_args.kwargs == {"period": "monthly", "day": date(2025, 3, 15)}

    @patch("bizdesk.routes.sales_analytics.get_sales_analytics")
    def test_defaults_to_daily_today(self, mock_analytics):
        mock_analytics.return_value = {
            "period": "daily", "date": "2025-03-15",
            "current": sales("2025-03-15"), "previous": sales("2025-03-14"),
            "growth_rate": 0.0, "trend": "stable",
        }

        client.get("/api/sales-analytics")

        assert mock_analytics.call_args.kwargs == {"period": "daily", "day": None}

    def test_unknown_period(self):
        response = client.get("/api/sales-analytics", params={"period": "weekly"})

        assert response.status_code == 422

    @patch("bizdesk.routes.sales_analytics.get_sales_analytics")
    def test_failure_is_500(self, mock_analytics):
        mock_analytics.side_effect = Exception("db down")

        response = client.get("/api/sales-analytics")

        assert response.status_code == 500


class TestOverview:

    @patch("bizdesk.routes.sales_analytics.get_sales_overview")
    def test_overview(self, mock_overview):
        comparison = {"growth_rate": 0.0, "trend": "stable"}
        mock_overview.return_value = {
            "daily": {"today": sales("2025-03-15"), "yesterday": sales("2025-03-14"), **comparison},
            "monthly": {"current": sales("2025-03"), "previous": sales("2025-02"), **comparison},
            "yearly": {"current": sales("2025"), "previous": sales("2024"), **comparison},
        }

        response = client.get("/api/sales-analytics/overview")

        assert response.status_code == 200
        assert response.json()["daily"]["yesterday"]["date"] == "2025-03-14"


class TestUpdateSummary:

    @patch("bizdesk.routes.sales_analytics.update_sales_summary")
    def test_update(self, mock_update):
        mock_update.return_value = [{
            "date": "2025-03-15", "period_type": "daily", "total_sales": 300.0,
            "total_orders": 3, "previous_period_sales": 200.0, "growth_rate": 50.0,
        }]

        response = client.post("/api/sales-analytics/update-summary")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Sales summary updated successfully"
        assert body["summaries"][0]["growth_rate"] == 50.0
        assert response.headers["cache-control"] == "no-store, no-cache, must-revalidate"

    @patch("bizdesk.routes.sales_analytics.update_sales_summary")
    def test_failure_is_500(self, mock_update):
        mock_update.side_effect = Exception("db down")

        response = client.post("/api/sales-analytics/update-summary")

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "update_error"
