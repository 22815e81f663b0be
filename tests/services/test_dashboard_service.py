"""
Tests for dashboard aggregation.

The period helpers take ``today`` explicitly; 2025-03-15 is used throughout
(March 1st 2025 is a Saturday).
"""

from datetime import date

import pytest

from bizdesk.services.dashboard_service import (
    daily_sales,
    get_dashboard,
    low_stock_items,
    monthly_sales,
    orders_by_status,
    recent_orders,
    revenue_by_service,
    summarize_stats,
    top_products,
    weekly_sales,
)

TODAY = date(2025, 3, 15)

ORDERS = [
    {"order_id": 1, "status": "Completed", "service_type": "Printing", "total_amount": 100,
     "completed_date": "2025-03-15T09:30:00+00:00", "created_at": "2025-03-15T08:00:00"},
    {"order_id": 2, "status": "Completed", "service_type": "Lamination", "total_amount": 40.5,
     "completed_date": "2025-03-02T12:00:00+00:00", "created_at": "2025-03-01T08:00:00"},
    {"order_id": 3, "status": "Completed", "service_type": "Printing", "total_amount": 60,
     "completed_date": "2025-01-20T12:00:00+00:00", "created_at": "2025-01-19T08:00:00"},
    {"order_id": 4, "status": "Pending", "service_type": "Uniform", "total_amount": 500,
     "completed_date": None, "created_at": "2025-03-14T08:00:00"},
    {"order_id": 5, "status": "In Progress", "service_type": "Printing", "total_amount": 20,
     "completed_date": None, "created_at": "2025-03-13T08:00:00"},
    {"order_id": 6, "status": "Cancelled", "service_type": "Printing", "total_amount": 15,
     "completed_date": None, "created_at": "2025-03-12T08:00:00"},
]


class TestStats:

    def test_summary(self):
        stats = summarize_stats(12, [{"product_name": "Ink"}], ORDERS, TODAY)

        assert stats == {
            "total_products": 12,
            "low_stock_count": 1,
            "active_orders": 2,
            "today_revenue": 100.0,
            "total_revenue": 200.5,
        }

    def test_orders_by_status(self):
        assert orders_by_status(ORDERS) == {"pending": 1, "in_progress": 1, "completed": 3, "cancelled": 1}

    def test_orders_by_status_empty(self):
        assert orders_by_status([]) == {"pending": 0, "in_progress": 0, "completed": 0, "cancelled": 0}

    def test_low_stock_at_or_below_reorder_level(self):
        rows = [
            {"quantity": 5, "reorder_level": 5, "product": {"product_name": "Ink"}},
            {"quantity": 6, "reorder_level": 5, "product": {"product_name": "Paper"}},
            {"quantity": 0, "reorder_level": 2, "product": [{"product_name": "Folder"}]},
        ]

        assert low_stock_items(rows) == [
            {"product_name": "Ink", "quantity": 5, "reorder_level": 5},
            {"product_name": "Folder", "quantity": 0, "reorder_level": 2},
        ]

    def test_recent_orders_newest_first(self):
        recent = recent_orders(ORDERS)

        assert [o["order_id"] for o in recent] == [1, 4, 5, 6, 2]

    def test_revenue_by_service_counts_completed_only(self):
        assert revenue_by_service(ORDERS) == [
            {"service_type": "Printing", "revenue": 160.0},
            {"service_type": "Lamination", "revenue": 40.5},
        ]


class TestTopProducts:

    def test_ranked_by_quantity(self):
        items = [
            {"product_id": 1, "quantity": 3, "product": {"product_name": "Ink"}},
            {"product_id": 2, "quantity": 10, "product": [{"product_name": "Paper"}]},
            {"product_id": 1, "quantity": 4, "product": {"product_name": "Ink"}},
            {"product_id": None, "quantity": 99, "product_name": "Deleted"},
        ]

        assert top_products(items) == [
            {"product_name": "Paper", "total_sold": 10},
            {"product_name": "Ink", "total_sold": 7},
        ]

    def test_falls_back_to_snapshot_name(self):
        items = [{"product_id": 3, "quantity": 1, "product": None, "product_name": "Old Stapler"}]

        assert top_products(items) == [{"product_name": "Old Stapler", "total_sold": 1}]

    def test_limit(self):
        items = [{"product_id": i, "quantity": i, "product_name": f"P{i}"} for i in range(1, 9)]

        assert [p["total_sold"] for p in top_products(items)] == [8, 7, 6, 5, 4]


class TestPeriods:

    def test_daily_covers_whole_month(self):
        days = daily_sales(ORDERS, TODAY)

        assert len(days) == 31
        assert days[0]["label"] == "1"
        assert days[14] == {"day": 15, "label": "15", "revenue": 100.0, "orders": 1}
        assert days[1]["revenue"] == 40.5
        assert sum(d["orders"] for d in days) == 2

    def test_daily_february(self):
        assert len(daily_sales([], date(2024, 2, 10))) == 29

    def test_weeks_start_on_sunday(self):
        weeks = weekly_sales(ORDERS, TODAY)

        assert [w["week"] for w in weeks] == [f"Week {n}" for n in range(1, 7)]
        assert weeks[0]["label"] == "Feb 23-Mar 1"
        assert weeks[0]["period"] == "Feb 23 - Mar 1"
        assert weeks[1]["label"] == "Mar 2-Mar 8"
        assert weeks[-1]["label"] == "Mar 30-Apr 5"
        assert weeks[1]["revenue"] == 40.5
        assert weeks[2]["revenue"] == 100.0
        assert weeks[0]["orders"] == 0

    def test_month_starting_on_sunday(self):
        # June 1st 2025 is a Sunday
        weeks = weekly_sales([], date(2025, 6, 1))

        assert weeks[0]["label"] == "Jun 1-Jun 7"
        assert len(weeks) == 5

    def test_monthly_covers_year(self):
        months = monthly_sales(ORDERS, TODAY)

        assert len(months) == 12
        assert months[0] == {"month": 1, "label": "Jan", "fullMonth": "January 2025", "revenue": 60.0, "orders": 1}
        assert months[2]["revenue"] == 140.5
        assert months[11]["fullMonth"] == "December 2025"


class TestGetDashboard:

    @pytest.mark.asyncio
    async def test_payload(self, fake_supabase):
        fake_supabase["products"].queue([], count=12)
        fake_supabase["inventories"].queue([{"quantity": 1, "reorder_level": 5, "product": {"product_name": "Ink"}}])
        fake_supabase["orders"].queue(ORDERS)
        fake_supabase["order_items"].queue([{"product_id": 1, "quantity": 2, "product": {"product_name": "Ink"}}])

        dashboard = await get_dashboard(fake_supabase, today=TODAY)

        assert dashboard["stats"]["total_products"] == 12
        assert dashboard["stats"]["low_stock_count"] == 1
        assert dashboard["top_products"] == [{"product_name": "Ink", "total_sold": 2}]
        assert len(dashboard["daily_sales"]) == 31
        assert len(dashboard["monthly_sales"]) == 12
        assert fake_supabase["products"].calls("eq") == [(("status", "active"), {})]
