"""
Dashboard aggregation service.

Rows are fetched once per request and aggregated in Python. The pure helpers
take ``today`` explicitly so periods can be pinned in tests.

Periods:
- daily: every day of the current month
- weekly: Sunday-Saturday weeks overlapping the current month (the first
  week may start in the previous month)
- monthly: every month of the current year
Only Completed orders count towards revenue.
"""

import calendar
import logging
from collections import Counter, defaultdict
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, cast

from supabase import Client

logger = logging.getLogger(__name__)

RECENT_ORDERS_LIMIT = 5
TOP_PRODUCTS_LIMIT = 5

STATUS_KEYS = {
    "Pending": "pending",
    "In Progress": "in_progress",
    "Completed": "completed",
    "Cancelled": "cancelled",
}


def _completed_on(order: Dict[str, Any]) -> Optional[date]:
    if order.get("status") != "Completed" or not order.get("completed_date"):
        return None
    return date.fromisoformat(str(order["completed_date"])[:10])


def _bucket(orders: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "revenue": float(sum(float(o.get("total_amount") or 0) for o in orders)),
        "orders": len(orders),
    }


def _label(day: date) -> str:
    return f"{day:%b} {day.day}"


def summarize_stats(
    total_products: int,
    low_stock_items: List[Dict[str, Any]],
    orders: List[Dict[str, Any]],
    today: date,
) -> Dict[str, Any]:
    completed = [o for o in orders if o.get("status") == "Completed"]
    return {
        "total_products": total_products,
        "low_stock_count": len(low_stock_items),
        "active_orders": sum(1 for o in orders if o.get("status") in ("Pending", "In Progress")),
        "today_revenue": _bucket([o for o in completed if _completed_on(o) == today])["revenue"],
        "total_revenue": _bucket(completed)["revenue"],
    }


def orders_by_status(orders: List[Dict[str, Any]]) -> Dict[str, int]:
    counts = Counter(o.get("status") for o in orders)
    return {key: counts.get(name, 0) for name, key in STATUS_KEYS.items()}


def low_stock_items(inventories: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Inventory rows with quantity at or below the reorder level."""
    items = []
    for row in inventories:
        quantity = int(row.get("quantity") or 0)
        reorder_level = int(row.get("reorder_level") or 0)
        if quantity <= reorder_level:
            product = row.get("product") or {}
            if isinstance(product, list):
                product = product[0] if product else {}
            items.append({
                "product_name": product.get("product_name"),
                "quantity": quantity,
                "reorder_level": reorder_level,
            })
    return items


def recent_orders(orders: List[Dict[str, Any]], limit: int = RECENT_ORDERS_LIMIT) -> List[Dict[str, Any]]:
    return sorted(orders, key=lambda o: str(o.get("created_at") or ""), reverse=True)[:limit]


def top_products(order_items: List[Dict[str, Any]], limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict[str, Any]]:
    """Products ranked by total quantity sold across all order items."""
    sold: Dict[Any, int] = defaultdict(int)
    names: Dict[Any, Optional[str]] = {}
    for item in order_items:
        product_id = item.get("product_id")
        if product_id is None:
            continue
        sold[product_id] += int(item.get("quantity") or 0)
        product = item.get("product") or {}
        if isinstance(product, list):
            product = product[0] if product else {}
        names[product_id] = product.get("product_name") or item.get("product_name")

    ranked = sorted(sold.items(), key=lambda pair: pair[1], reverse=True)[:limit]
    return [{"product_name": names[pid], "total_sold": total} for pid, total in ranked]


def revenue_by_service(orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    revenue: Dict[str, float] = defaultdict(float)
    for order in orders:
        if order.get("status") == "Completed":
            revenue[order.get("service_type") or "Other"] += float(order.get("total_amount") or 0)
    return [{"service_type": service, "revenue": total} for service, total in revenue.items()]


def daily_sales(orders: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    days_in_month = calendar.monthrange(today.year, today.month)[1]
    by_day: Dict[int, List[Dict[str, Any]]] = defaultdict(list)
    for order in orders:
        completed = _completed_on(order)
        if completed and completed.year == today.year and completed.month == today.month:
            by_day[completed.day].append(order)

    return [
        {"day": day, "label": str(day), **_bucket(by_day.get(day, []))}
        for day in range(1, days_in_month + 1)
    ]


def weekly_sales(orders: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    month_start = today.replace(day=1)
    month_end = today.replace(day=calendar.monthrange(today.year, today.month)[1])
    # date.weekday(): Monday=0 ... Sunday=6
    week_start = month_start - timedelta(days=(month_start.weekday() + 1) % 7)

    completed = [(o, _completed_on(o)) for o in orders]
    weeks = []
    number = 1
    while week_start <= month_end:
        week_end = week_start + timedelta(days=6)
        in_week = [o for o, day in completed if day and week_start <= day <= week_end]
        weeks.append({
            "week": f"Week {number}",
            "label": f"{_label(week_start)}-{_label(week_end)}",
            "period": f"{_label(week_start)} - {_label(week_end)}",
            **_bucket(in_week),
        })
        week_start += timedelta(days=7)
        number += 1
    return weeks


def monthly_sales(orders: List[Dict[str, Any]], today: date) -> List[Dict[str, Any]]:
    by_month: Dict[int, List[Dict[str, Any]]] = defaultdict(list)
    for order in orders:
        completed = _completed_on(order)
        if completed and completed.year == today.year:
            by_month[completed.month].append(order)

    months = []
    for month in range(1, 13):
        first = date(today.year, month, 1)
        months.append({
            "month": month,
            "label": f"{first:%b}",
            "fullMonth": f"{first:%B %Y}",
            **_bucket(by_month.get(month, [])),
        })
    return months


async def get_dashboard(supabase_client: Client, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Build the dashboard payload.

    Args:
        supabase_client: Supabase client
        today: Reference date for the period breakdowns (defaults to today)

    Returns:
        Dict with stats, orders_by_status, low_stock_items, recent_orders,
        top_products, revenue_by_service, daily_sales, weekly_sales and
        monthly_sales
    """
    today = today or date.today()

    products_result = (
        supabase_client.table("products")
        .select("product_id", count="exact")
        .eq("status", "active")
        .execute()
    )
    total_products = products_result.count if products_result.count is not None else len(products_result.data or [])

    inventories = cast(List[Dict[str, Any]], (
        supabase_client.table("inventories")
        .select("quantity, reorder_level, product:products(product_name)")
        .execute()
    ).data or [])

    orders = cast(List[Dict[str, Any]], (
        supabase_client.table("orders")
        .select("*")
        .order("created_at", desc=True)
        .execute()
    ).data or [])

    order_items = cast(List[Dict[str, Any]], (
        supabase_client.table("order_items")
        .select("product_id, product_name, quantity, product:products(product_name)")
        .execute()
    ).data or [])

    low_stock = low_stock_items(inventories)

    logger.info(
        f"Dashboard built: products={total_products}, orders={len(orders)}, "
        f"low_stock={len(low_stock)}"
    )

    return {
        "stats": summarize_stats(total_products, low_stock, orders, today),
        "orders_by_status": orders_by_status(orders),
        "low_stock_items": low_stock,
        "recent_orders": recent_orders(orders),
        "top_products": top_products(order_items),
        "revenue_by_service": revenue_by_service(orders),
        "daily_sales": daily_sales(orders, today),
        "weekly_sales": weekly_sales(orders, today),
        "monthly_sales": monthly_sales(orders, today),
    }
