"""
Tests for the sales analytics service.

Payments and orders results are queued per table: current period first,
then the previous period.
"""

from datetime import date

import pytest

from bizdesk.services.sales_analytics_service import (
    calculate_growth_rate,
    get_period_sales,
    get_sales_analytics,
    get_sales_overview,
    period_bounds,
    period_label,
    previous_period_day,
    trend,
    update_sales_summary,
)


class TestPeriods:

    def test_bounds(self):
        day = date(2024, 2, 14)

        assert period_bounds("daily", day) == (day, day)
        assert period_bounds("monthly", day) == (date(2024, 2, 1), date(2024, 2, 29))
        assert period_bounds("yearly", day) == (date(2024, 1, 1), date(2024, 12, 31))

    def test_previous_month_from_month_end(self):
        # March 31 minus a month must land in February, not early March
        assert previous_period_day("monthly", date(2025, 3, 31)) == date(2025, 2, 28)

    def test_previous_day_and_year(self):
        assert previous_period_day("daily", date(2025, 1, 1)) == date(2024, 12, 31)
        assert previous_period_day("yearly", date(2025, 6, 30)).year == 2024

    def test_labels(self):
        day = date(2025, 3, 5)

        assert period_label("daily", day) == "2025-03-05"
        assert period_label("monthly", day) == "2025-03"
        assert period_label("yearly", day) == "2025"

    def test_unknown_period(self):
        with pytest.raises(ValueError, match="weekly"):
            period_bounds("weekly", date(2025, 3, 5))


class TestGrowthRate:

    def test_percentage_rounded(self):
        assert calculate_growth_rate(150, 100) == 50.0
        assert calculate_growth_rate(100, 300) == -66.67

    def test_no_previous_sales(self):
        assert calculate_growth_rate(20, 0) == 100.0
        assert calculate_growth_rate(0, 0) == 0.0

    def test_trend(self):
        assert trend(12.5) == "up"
        assert trend(-0.01) == "down"
        assert trend(0) == "stable"


class TestPeriodSales:

    @pytest.mark.asyncio
    async def test_sums_payments_and_counts_completed_orders(self, fake_supabase):
        fake_supabase["payments"].queue([{"amount": 150.0}, {"amount": "49.5"}, {"amount": None}])
        fake_supabase["orders"].queue([], count=2)

        sales = await get_period_sales(fake_supabase, "monthly", date(2025, 12, 10))

        assert sales == {"date": "2025-12", "total_sales": 199.5, "total_orders": 2}
        payments = fake_supabase["payments"]
        assert payments.calls("gte") == [(("payment_date", "2025-12-01"), {})]
        assert payments.calls("lt") == [(("payment_date", "2026-01-01"), {})]
        orders = fake_supabase["orders"]
        assert orders.calls("eq") == [(("status", "Completed"), {})]
        assert orders.calls("lt") == [(("completed_date", "2026-01-01"), {})]


class TestSalesAnalytics:

    @pytest.mark.asyncio
    async def test_compares_with_previous_day(self, fake_supabase):
        fake_supabase["payments"].queue([{"amount": 300}])
        fake_supabase["payments"].queue([{"amount": 200}])
        fake_supabase["orders"].queue([], count=3)
        fake_supabase["orders"].queue([], count=2)

        result = await get_sales_analytics(fake_supabase, "daily", date(2025, 3, 1))

        assert result["period"] == "daily"
        assert result["date"] == "2025-03-01"
        assert result["current"] == {"date": "2025-03-01", "total_sales": 300.0, "total_orders": 3}
        assert result["previous"]["date"] == "2025-02-28"
        assert result["growth_rate"] == 50.0
        assert result["trend"] == "up"

    @pytest.mark.asyncio
    async def test_first_sales_count_as_full_growth(self, fake_supabase):
        fake_supabase["payments"].queue([{"amount": 80}])

        result = await get_sales_analytics(fake_supabase, "yearly", date(2025, 5, 5))

        assert result["previous"] == {"date": "2024", "total_sales": 0.0, "total_orders": 0}
        assert result["growth_rate"] == 100.0

    @pytest.mark.asyncio
    async def test_overview_shape(self, fake_supabase):
        overview = await get_sales_overview(fake_supabase, today=date(2025, 3, 5))

        assert set(overview["daily"]) == {"today", "yesterday", "growth_rate", "trend"}
        assert overview["monthly"]["current"]["date"] == "2025-03"
        assert overview["monthly"]["previous"]["date"] == "2025-02"
        assert overview["yearly"]["previous"]["date"] == "2024"
        assert overview["yearly"]["trend"] == "stable"


class TestUpdateSalesSummary:

    @pytest.mark.asyncio
    async def test_upserts_one_row_per_period(self, fake_supabase):
        # daily current / previous, monthly current / previous, yearly current / previous
        for amount in (100, 50, 900, 0, 5000, 4000):
            fake_supabase["payments"].queue([{"amount": amount}])

        rows = await update_sales_summary(fake_supabase, today=date(2025, 3, 5))

        assert [(r["period_type"], r["date"]) for r in rows] == [
            ("daily", "2025-03-05"),
            ("monthly", "2025-03-01"),
            ("yearly", "2025-01-01"),
        ]
        assert rows[0]["growth_rate"] == 100.0
        assert rows[0]["previous_period_sales"] == 50.0
        assert rows[1]["growth_rate"] == 100.0
        assert rows[2]["growth_rate"] == 25.0

        upserts = fake_supabase["sales_summary"].calls("upsert")
        assert upserts == [((rows,), {"on_conflict": "date,period_type"})]
