"""
Sales analytics service.

Compares one period's sales against the period before it.

Periods:
- daily:   one calendar day; label 'YYYY-MM-DD'
- monthly: one calendar month; label 'YYYY-MM'
- yearly:  one calendar year; label 'YYYY'

total_sales sums payments.amount by payment_date; total_orders counts
Completed orders by completed_date. Range queries use [start, day after end).

Growth rate is a percentage rounded to 2 places. With no previous sales it is
100 when there are current sales and 0 otherwise.
"""

import calendar
import logging
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple, cast

from supabase import Client

logger = logging.getLogger(__name__)

PAYMENTS_TABLE = "payments"
ORDERS_TABLE = "orders"
SUMMARY_TABLE = "sales_summary"

PERIODS = ("daily", "monthly", "yearly")


def _check_period(period: str) -> None:
    if period not in PERIODS:
        raise ValueError(f"Unknown period '{period}'. Use one of: {', '.join(PERIODS)}")


def period_bounds(period: str, day: date) -> Tuple[date, date]:
    """First and last day (inclusive) of the period containing ``day``."""
    _check_period(period)
    if period == "monthly":
        last = calendar.monthrange(day.year, day.month)[1]
        return day.replace(day=1), day.replace(day=last)
    if period == "yearly":
        return date(day.year, 1, 1), date(day.year, 12, 31)
    return day, day


def previous_period_day(period: str, day: date) -> date:
    """A day inside the period before the one containing ``day``."""
    _check_period(period)
    if period == "monthly":
        return day.replace(day=1) - timedelta(days=1)
    if period == "yearly":
        return date(day.year - 1, 1, 1)
    return day - timedelta(days=1)


def period_label(period: str, day: date) -> str:
    _check_period(period)
    if period == "monthly":
        return f"{day:%Y-%m}"
    if period == "yearly":
        return f"{day:%Y}"
    return day.isoformat()


def summary_date(period: str, day: date) -> date:
    """Key date of a sales_summary row: the period's first day."""
    return period_bounds(period, day)[0]


def calculate_growth_rate(current: float, previous: float) -> float:
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round((current - previous) / previous * 100, 2)


def trend(growth_rate: float) -> str:
    if growth_rate > 0:
        return "up"
    if growth_rate < 0:
        return "down"
    return "stable"


async def get_period_sales(supabase_client: Client, period: str, day: date) -> Dict[str, Any]:
    """
    Sales and completed order count for the period containing ``day``.

    Raises:
        ValueError: If period is not daily, monthly or yearly
    """
    start, end = period_bounds(period, day)
    upper = (end + timedelta(days=1)).isoformat()

    payments = cast(List[Dict[str, Any]], (
        supabase_client.table(PAYMENTS_TABLE)
        .select("amount")
        .gte("payment_date", start.isoformat())
        .lt("payment_date", upper)
        .execute()
    ).data or [])

    orders_result = (
        supabase_client.table(ORDERS_TABLE)
        .select("order_id", count="exact")
        .eq("status", "Completed")
        .gte("completed_date", start.isoformat())
        .lt("completed_date", upper)
        .execute()
    )
    total_orders = orders_result.count if orders_result.count is not None else len(orders_result.data or [])

    return {
        "date": period_label(period, day),
        "total_sales": float(sum(float(p.get("amount") or 0) for p in payments)),
        "total_orders": total_orders,
    }


async def _compare(supabase_client: Client, period: str, day: date) -> Tuple[Dict[str, Any], Dict[str, Any], float]:
    current = await get_period_sales(supabase_client, period, day)
    previous = await get_period_sales(supabase_client, period, previous_period_day(period, day))
    return current, previous, calculate_growth_rate(current["total_sales"], previous["total_sales"])


async def get_sales_analytics(
    supabase_client: Client,
    period: str = "daily",
    day: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Compare the period containing ``day`` with the one before it.

    Returns:
        Dict with period, date, current, previous, growth_rate and trend
    """
    day = day or date.today()
    current, previous, growth_rate = await _compare(supabase_client, period, day)

    logger.info(f"Sales analytics ({period}) for {day}: growth {growth_rate}%")

    return {
        "period": period,
        "date": day.isoformat(),
        "current": current,
        "previous": previous,
        "growth_rate": growth_rate,
        "trend": trend(growth_rate),
    }


async def get_sales_overview(supabase_client: Client, today: Optional[date] = None) -> Dict[str, Any]:
    """Daily, monthly and yearly comparisons in one payload."""
    today = today or date.today()
    overview: Dict[str, Any] = {}

    for period in PERIODS:
        current, previous, growth_rate = await _compare(supabase_client, period, today)
        if period == "daily":
            overview[period] = {"today": current, "yesterday": previous}
        else:
            overview[period] = {"current": current, "previous": previous}
        overview[period].update({"growth_rate": growth_rate, "trend": trend(growth_rate)})

    return overview


async def update_sales_summary(supabase_client: Client, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """
    Upsert one sales_summary row per period for ``today``.

    Rows are keyed on (date, period_type); rerunning the same day overwrites.

    Returns:
        The upserted rows
    """
    today = today or date.today()
    rows = []

    for period in PERIODS:
        current, previous, growth_rate = await _compare(supabase_client, period, today)
        rows.append({
            "date": summary_date(period, today).isoformat(),
            "period_type": period,
            "total_sales": current["total_sales"],
            "total_orders": current["total_orders"],
            "previous_period_sales": previous["total_sales"],
            "growth_rate": growth_rate,
        })

    supabase_client.table(SUMMARY_TABLE).upsert(rows, on_conflict="date,period_type").execute()

    logger.info(f"Sales summary updated for {today}")

    return rows
