"""
Product transaction (stock movement) service.

Rows in product_transactions are written by restocks (type IN) and by order
line items (type OUT). This module only reads them.

RULES:
1. Listings are newest first
2. Per-product statistics: net_movement = total_in - total_out
3. Growth rates compare OUT quantities (sales activity) between the current
   and previous period, and only cover products that have an inventory row
"""

import logging
import math
from collections import defaultdict
from datetime import date, timedelta
from typing import Any, Dict, List, Optional, Tuple, cast

from supabase import Client

from bizdesk.services.sales_analytics_service import (
    calculate_growth_rate,
    period_bounds,
    previous_period_day,
    trend,
)

logger = logging.getLogger(__name__)

TRANSACTIONS_TABLE = "product_transactions"
PRODUCTS_TABLE = "products"

DEFAULT_PER_PAGE = 50
TRANSACTION_WITH_PRODUCT = "*, product:products(product_id, product_name)"


def _unwrap(embed: Any) -> Optional[Dict[str, Any]]:
    if isinstance(embed, list):
        return embed[0] if embed else None
    return embed


def _shape(transaction: Dict[str, Any]) -> Dict[str, Any]:
    shaped = dict(transaction)
    shaped["product"] = _unwrap(shaped.get("product"))
    return shaped


def movement_statistics(transactions: List[Dict[str, Any]]) -> Dict[str, int]:
    total_in = sum(int(t.get("quantity") or 0) for t in transactions if t.get("type") == "IN")
    total_out = sum(int(t.get("quantity") or 0) for t in transactions if t.get("type") == "OUT")
    return {
        "total_in": total_in,
        "total_out": total_out,
        # there is no adjustment movement type
        "total_adjustments": 0,
        "net_movement": total_in - total_out,
    }


async def get_transactions(
    supabase_client: Client,
    transaction_type: Optional[str] = None,
    product_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
) -> Dict[str, Any]:
    """
    Fetch one page of stock movements, newest first.

    Args:
        transaction_type: 'IN' or 'OUT' (case-insensitive)
        product_id: Only this product's movements
        start_date: Inclusive first day on created_at
        end_date: Inclusive last day on created_at
        page: 1-based page number
        per_page: Page size

    Returns:
        Dict with data, current_page, per_page, total and last_page
    """
    query = supabase_client.table(TRANSACTIONS_TABLE).select(TRANSACTION_WITH_PRODUCT, count="exact")

    if transaction_type:
        query = query.eq("type", transaction_type.upper())
    if product_id is not None:
        query = query.eq("product_id", product_id)
    if start_date:
        query = query.gte("created_at", start_date.isoformat())
    if end_date:
        query = query.lt("created_at", (end_date + timedelta(days=1)).isoformat())

    offset = (page - 1) * per_page
    result = (
        query.order("created_at", desc=True)
        .range(offset, offset + per_page - 1)
        .execute()
    )

    data = [_shape(t) for t in cast(List[Dict[str, Any]], result.data or [])]
    total = result.count if result.count is not None else len(data)

    logger.info(f"Fetched {len(data)} product transactions (page {page}, total {total})")

    return {
        "data": data,
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": max(1, math.ceil(total / per_page)),
    }


async def get_product_transactions(supabase_client: Client, product_id: int) -> Dict[str, Any]:
    """All movements for one product plus in/out totals."""
    result = (
        supabase_client.table(TRANSACTIONS_TABLE)
        .select(TRANSACTION_WITH_PRODUCT)
        .eq("product_id", product_id)
        .order("created_at", desc=True)
        .execute()
    )

    transactions = [_shape(t) for t in cast(List[Dict[str, Any]], result.data or [])]

    return {
        "transactions": transactions,
        "statistics": movement_statistics(transactions),
    }


def _movements_by_product(transactions: List[Dict[str, Any]], start: date, end: date) -> Dict[Any, Dict[str, int]]:
    totals: Dict[Any, Dict[str, int]] = defaultdict(lambda: {"IN": 0, "OUT": 0})
    for t in transactions:
        if not t.get("created_at") or t.get("type") not in ("IN", "OUT"):
            continue
        created = date.fromisoformat(str(t["created_at"])[:10])
        if start <= created <= end:
            totals[t.get("product_id")][t["type"]] += int(t.get("quantity") or 0)
    return totals


def summarize_growth(
    products: List[Dict[str, Any]],
    transactions: List[Dict[str, Any]],
    current: Tuple[date, date],
    previous: Tuple[date, date],
) -> List[Dict[str, Any]]:
    """
    Per-product IN/OUT totals for both periods and the OUT growth rate.

    Args:
        products: Rows with product_id, product_name and an inventory embed
        transactions: Movements covering both periods
        current: (first day, last day) of the current period
        previous: (first day, last day) of the previous period
    """
    now = _movements_by_product(transactions, *current)
    before = _movements_by_product(transactions, *previous)

    rows = []
    for product in products:
        inventory = _unwrap(product.get("inventory"))
        if inventory is None:
            continue
        pid = product["product_id"]
        cur, prev = now[pid], before[pid]
        growth_rate = calculate_growth_rate(cur["OUT"], prev["OUT"])
        rows.append({
            "product_id": pid,
            "product_name": product.get("product_name"),
            "current_stock": int(inventory.get("quantity") or 0),
            "current_in": cur["IN"],
            "current_out": cur["OUT"],
            "current_net": cur["IN"] - cur["OUT"],
            "previous_in": prev["IN"],
            "previous_out": prev["OUT"],
            "previous_net": prev["IN"] - prev["OUT"],
            "growth_rate": growth_rate,
            "trend": trend(growth_rate),
        })
    return rows


async def get_product_growth_rates(
    supabase_client: Client,
    period: str = "daily",
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Compare each stocked product's movements with the previous period.

    Raises:
        ValueError: If period is not daily, monthly or yearly
    """
    today = today or date.today()
    current = period_bounds(period, today)
    previous = period_bounds(period, previous_period_day(period, today))

    products = cast(List[Dict[str, Any]], (
        supabase_client.table(PRODUCTS_TABLE)
        .select("product_id, product_name, inventory:inventories(quantity)")
        .execute()
    ).data or [])

    transactions = cast(List[Dict[str, Any]], (
        supabase_client.table(TRANSACTIONS_TABLE)
        .select("product_id, type, quantity, created_at")
        .gte("created_at", previous[0].isoformat())
        .lt("created_at", (current[1] + timedelta(days=1)).isoformat())
        .execute()
    ).data or [])

    rows = summarize_growth(products, transactions, current, previous)

    logger.info(f"Computed {period} growth rates for {len(rows)} products")

    return {
        "period": period,
        "current_period": {"start": current[0].isoformat(), "end": current[1].isoformat()},
        "previous_period": {"start": previous[0].isoformat(), "end": previous[1].isoformat()},
        "products": rows,
    }
