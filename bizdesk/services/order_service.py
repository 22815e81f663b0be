"""
Order persistence service.

RULES:
1. order_number is 'ORD-<year>-<nnnn>' where nnnn = existing order count + 1
2. total_amount = sum(quantity * unit_price) over the line items
3. Stock moves with the items:
   - creating an order (or replacing its items) removes item quantities
   - replacing items, voiding or deleting an order returns them first
4. The active listing only shows Pending, In Progress and Cancelled orders;
   completed orders belong to sales history
5. Completing an order records a payment row and stamps completed_date; an
   order that is already Completed cannot be completed again
6. Setting status to Completed through an update also stamps completed_date
7. Line items keep a product_name snapshot so history survives product deletes
8. Every inserted line item writes an OUT row to product_transactions
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple, cast

from supabase import Client

from bizdesk.services.inventory_service import adjust_product_stock

logger = logging.getLogger(__name__)

ORDERS_TABLE = "orders"
ORDER_ITEMS_TABLE = "order_items"
PAYMENTS_TABLE = "payments"
PRODUCTS_TABLE = "products"
TRANSACTIONS_TABLE = "product_transactions"

ACTIVE_LIST_STATUSES = ["Pending", "In Progress", "Cancelled"]
ORDER_WITH_ITEMS = "*, order_items(*, product:products(*)), payment:payments(*)"


class OrderAlreadyCompletedError(ValueError):
    """Raised when completing an order that is already Completed."""


class OrderAlreadyVoidedError(ValueError):
    """Raised when voiding an order twice."""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_order_number(existing_count: int, year: Optional[int] = None) -> str:
    """Return e.g. 'ORD-2025-0042' for the 42nd order."""
    year = year or date.today().year
    return f"ORD-{year}-{existing_count + 1:04d}"


def calculate_total(items: Iterable[Dict[str, Any]]) -> float:
    return sum(int(item["quantity"]) * float(item["unit_price"]) for item in items)


def _shape_order(order: Dict[str, Any]) -> Dict[str, Any]:
    """Add item subtotals and unwrap the one-to-one payment embed."""
    shaped = dict(order)
    items = []
    for item in shaped.get("order_items") or []:
        item = dict(item)
        product = item.get("product")
        if isinstance(product, list):
            item["product"] = product[0] if product else None
        item["subtotal"] = int(item.get("quantity") or 0) * float(item.get("unit_price") or 0)
        items.append(item)
    shaped["order_items"] = items
    payment = shaped.get("payment")
    if isinstance(payment, list):
        shaped["payment"] = payment[0] if payment else None
    return shaped


async def get_orders(supabase_client: Client, order_number: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Fetch orders, newest first.

    Args:
        supabase_client: Supabase client
        order_number: When given, look up that order number in any status
            (the POS uses this to find an order to complete)

    Returns:
        List of orders with items
    """
    query = supabase_client.table(ORDERS_TABLE).select(ORDER_WITH_ITEMS)

    if order_number:
        query = query.eq("order_number", order_number)
    else:
        query = query.in_("status", ACTIVE_LIST_STATUSES)

    result = query.order("created_at", desc=True).execute()

    orders = [_shape_order(o) for o in cast(List[Dict[str, Any]], result.data or [])]

    logger.info(f"Fetched {len(orders)} orders" + (f" matching {order_number}" if order_number else ""))

    return orders


async def get_order_by_id(supabase_client: Client, order_id: int) -> Optional[Dict[str, Any]]:
    result = (
        supabase_client.table(ORDERS_TABLE)
        .select(ORDER_WITH_ITEMS)
        .eq("order_id", order_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Order {order_id} not found")
        return None

    return _shape_order(cast(Dict[str, Any], result.data[0]))


def _resolve_items(supabase_client: Client, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Check every item's product and build its row (without order_id).

    Runs before any write so a bad item leaves the order and stock untouched.

    Raises:
        ValueError: If an item references a missing product
    """
    rows = []
    for item in items:
        product = (
            supabase_client.table(PRODUCTS_TABLE)
            .select("product_id, product_name")
            .eq("product_id", item["product_id"])
            .execute()
        )
        if not product.data:
            raise ValueError(f"Product {item['product_id']} does not exist")

        rows.append({
            "product_id": item["product_id"],
            "product_name": product.data[0].get("product_name"),
            "quantity": item["quantity"],
            "unit_price": item["unit_price"],
            "notes": item.get("notes"),
        })
    return rows


async def _insert_items(
    supabase_client: Client,
    order_id: int,
    order_number: Optional[str],
    resolved: List[Dict[str, Any]],
) -> float:
    """
    Insert resolved line items, take their stock and return the order total.

    Each item also gets an OUT row in product_transactions.
    """
    rows = [{"order_id": order_id, **row} for row in resolved]

    supabase_client.table(ORDER_ITEMS_TABLE).insert(rows).execute()

    for row in rows:
        quantity = int(row["quantity"])
        new_quantity = await adjust_product_stock(supabase_client, row["product_id"], -quantity)
        supabase_client.table(TRANSACTIONS_TABLE).insert({
            "product_id": row["product_id"],
            "type": "OUT",
            "quantity": quantity,
            "unit_price": row["unit_price"],
            "total_amount": quantity * float(row["unit_price"]),
            "previous_quantity": new_quantity + quantity if new_quantity is not None else None,
            "new_quantity": new_quantity,
            "reference_type": "order",
            "reference_id": order_id,
            "notes": f"Order {order_number} - Pending Payment",
        }).execute()

    return calculate_total(rows)


async def _return_stock(supabase_client: Client, order: Dict[str, Any]) -> None:
    for item in order.get("order_items") or []:
        if item.get("product_id") is not None:
            await adjust_product_stock(supabase_client, item["product_id"], int(item.get("quantity") or 0))


async def create_order(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a Pending order with its items.

    Raises:
        ValueError: If an item references a missing product
        Exception: If the order insert returns no row
    """
    resolved = _resolve_items(supabase_client, data["order_items"])

    count_result = supabase_client.table(ORDERS_TABLE).select("order_id", count="exact").execute()
    existing_count = count_result.count if count_result.count is not None else len(count_result.data or [])

    order_data = {
        "order_number": generate_order_number(existing_count),
        "customer_name": data.get("customer_name"),
        "service_type": data["service_type"],
        "status": "Pending",
        "notes": data.get("notes"),
        "preferred_pickup_date": data.get("preferred_pickup_date"),
        "total_amount": 0,
    }

    logger.info(f"Creating order {order_data['order_number']} ({order_data['service_type']})")

    result = supabase_client.table(ORDERS_TABLE).insert(order_data).execute()

    if not result.data:
        raise Exception("Failed to create order: no data returned")

    order_id = result.data[0]["order_id"]

    total = await _insert_items(supabase_client, order_id, order_data["order_number"], resolved)

    supabase_client.table(ORDERS_TABLE).update({"total_amount": total}).eq("order_id", order_id).execute()

    logger.info(f"Order {order_id} created with {len(data['order_items'])} items")

    created = await get_order_by_id(supabase_client, order_id)
    return created or {**result.data[0], "total_amount": total}


async def update_order(
    supabase_client: Client,
    order_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Apply a partial update; replace items when order_items is present.

    Returns:
        Updated order, or None if not found

    Raises:
        ValueError: If a replacement item references a missing product
    """
    existing = await get_order_by_id(supabase_client, order_id)
    if not existing:
        return None

    items = data.get("order_items")
    resolved = _resolve_items(supabase_client, items) if items is not None else None

    update_data = {key: value for key, value in data.items() if key != "order_items" and value is not None}

    if update_data.get("status") == "Completed" and existing.get("status") != "Completed":
        update_data["completed_date"] = _now()

    if resolved is not None:
        await _return_stock(supabase_client, existing)
        supabase_client.table(ORDER_ITEMS_TABLE).delete().eq("order_id", order_id).execute()
        update_data["total_amount"] = await _insert_items(
            supabase_client, order_id, existing.get("order_number"), resolved
        )

    if update_data:
        supabase_client.table(ORDERS_TABLE).update(update_data).eq("order_id", order_id).execute()

    logger.info(f"Order {order_id} updated: fields={sorted(update_data)}")

    return await get_order_by_id(supabase_client, order_id)


async def complete_order(
    supabase_client: Client,
    order_id: int,
    payment: Dict[str, Any],
    processed_by: Optional[str] = None,
) -> Optional[Tuple[Dict[str, Any], Dict[str, Any]]]:
    """
    Record payment and mark the order Completed.

    Returns:
        (order, payment) tuple, or None if the order does not exist

    Raises:
        OrderAlreadyCompletedError: If the order is already Completed
    """
    existing = await get_order_by_id(supabase_client, order_id)
    if not existing:
        return None

    if existing.get("status") == "Completed":
        raise OrderAlreadyCompletedError("Order is already completed")

    now = _now()
    payment_data = {
        "order_id": order_id,
        "payment_method": payment["payment_method"],
        "amount": payment["amount"],
        "reference_number": payment.get("reference_number"),
        "payment_date": now,
        "processed_by": processed_by,
        "notes": payment.get("notes"),
    }

    payment_result = supabase_client.table(PAYMENTS_TABLE).insert(payment_data).execute()
    if not payment_result.data:
        raise Exception(f"Failed to record payment for order {order_id}")

    (
        supabase_client.table(ORDERS_TABLE)
        .update({"status": "Completed", "completed_date": now})
        .eq("order_id", order_id)
        .execute()
    )

    logger.info(f"Order {order_id} completed via {payment['payment_method']}")

    order = await get_order_by_id(supabase_client, order_id)
    return (order or existing, cast(Dict[str, Any], payment_result.data[0]))


async def void_order(
    supabase_client: Client,
    order_id: int,
    reason: str,
    voided_by: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Void an order: cancel it, keep the reason and return its stock.

    Raises:
        OrderAlreadyVoidedError: If the order was voided before
    """
    existing = await get_order_by_id(supabase_client, order_id)
    if not existing:
        return None

    if existing.get("is_voided"):
        raise OrderAlreadyVoidedError("Order is already voided")

    await _return_stock(supabase_client, existing)

    (
        supabase_client.table(ORDERS_TABLE)
        .update({
            "status": "Cancelled",
            "is_voided": True,
            "void_reason": reason,
            "voided_by": voided_by,
            "voided_at": _now(),
        })
        .eq("order_id", order_id)
        .execute()
    )

    logger.info(f"Order {order_id} voided")

    return await get_order_by_id(supabase_client, order_id)


async def delete_order(supabase_client: Client, order_id: int) -> bool:
    """Return the order's stock and delete it (items cascade)."""
    existing = await get_order_by_id(supabase_client, order_id)
    if not existing:
        return False

    await _return_stock(supabase_client, existing)

    supabase_client.table(ORDERS_TABLE).delete().eq("order_id", order_id).execute()

    logger.info(f"Order {order_id} deleted")

    return True


async def get_sales_history(
    supabase_client: Client,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch completed, non-voided orders, most recently completed first.

    Args:
        start_date: Inclusive lower bound on completed_date
        end_date: Inclusive last day; completed_date must fall before the
            next midnight
    """
    query = (
        supabase_client.table(ORDERS_TABLE)
        .select(ORDER_WITH_ITEMS)
        .eq("status", "Completed")
        .neq("is_voided", True)
    )

    if start_date:
        query = query.gte("completed_date", start_date.isoformat())
    if end_date:
        query = query.lt("completed_date", (end_date + timedelta(days=1)).isoformat())

    result = query.order("completed_date", desc=True).execute()

    orders = [_shape_order(o) for o in cast(List[Dict[str, Any]], result.data or [])]

    logger.info(f"Fetched {len(orders)} completed orders for sales history")

    return orders
