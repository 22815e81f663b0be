"""
Inventory persistence service.

RULES:
1. One inventory row per product (product_id is unique in inventories)
2. status is derived from quantity and reorder_level (see inventory_status)
3. After any stock change the product's is_active flag is refreshed:
   active = (no expiration_date OR expiration_date in the future) AND quantity > 0
4. Restocking adds to the current quantity, stamps last_restock_date /
   last_restock_quantity and writes an IN row to product_transactions
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, cast

from supabase import Client

logger = logging.getLogger(__name__)

INVENTORIES_TABLE = "inventories"
PRODUCTS_TABLE = "products"
TRANSACTIONS_TABLE = "product_transactions"

INVENTORY_WITH_PRODUCT = (
    "inventory_id, product_id, quantity, reorder_level, reorder_quantity, "
    "last_restock_date, last_restock_quantity, updated_at, "
    "product:products(product_id, product_name, price, status, category_id, expiration_date, "
    "category:categories(category_id, category_name))"
)


def inventory_status(quantity: int, reorder_level: int) -> str:
    """Classify stock as 'out', 'low' or 'available'."""
    if quantity == 0:
        return "out"
    if quantity <= reorder_level:
        return "low"
    return "available"


def is_product_active(expiration_date: Optional[str], quantity: int, today: Optional[date] = None) -> bool:
    """A product is sellable when it has stock and has not expired."""
    today = today or date.today()
    not_expired = True
    if expiration_date:
        not_expired = date.fromisoformat(str(expiration_date)[:10]) > today
    return not_expired and quantity > 0


def _with_status(row: Dict[str, Any]) -> Dict[str, Any]:
    enriched = dict(row)
    product = enriched.get("product")
    if isinstance(product, list):
        enriched["product"] = product[0] if product else None
    enriched["status"] = inventory_status(
        int(enriched.get("quantity") or 0), int(enriched.get("reorder_level") or 0)
    )
    return enriched


async def get_all_inventories(supabase_client: Client) -> List[Dict[str, Any]]:
    """Fetch all inventory rows, most recently changed first."""
    result = (
        supabase_client.table(INVENTORIES_TABLE)
        .select(INVENTORY_WITH_PRODUCT)
        .order("updated_at", desc=True)
        .execute()
    )

    inventories = [_with_status(row) for row in cast(List[Dict[str, Any]], result.data or [])]

    logger.info(f"Fetched {len(inventories)} inventory rows")

    return inventories


async def get_inventory_by_id(supabase_client: Client, inventory_id: int) -> Optional[Dict[str, Any]]:
    result = (
        supabase_client.table(INVENTORIES_TABLE)
        .select(INVENTORY_WITH_PRODUCT)
        .eq("inventory_id", inventory_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Inventory {inventory_id} not found")
        return None

    return _with_status(cast(Dict[str, Any], result.data[0]))


async def refresh_product_active_status(
    supabase_client: Client,
    product_id: int,
    quantity: int,
) -> Optional[bool]:
    """
    Recompute and store products.is_active for one product.

    Returns:
        The new flag, or None if the product no longer exists
    """
    result = (
        supabase_client.table(PRODUCTS_TABLE)
        .select("product_id, expiration_date")
        .eq("product_id", product_id)
        .execute()
    )
    if not result.data:
        logger.warning(f"Cannot refresh active flag: product {product_id} not found")
        return None

    product = cast(Dict[str, Any], result.data[0])
    active = is_product_active(product.get("expiration_date"), quantity)

    supabase_client.table(PRODUCTS_TABLE).update({"is_active": active}).eq("product_id", product_id).execute()

    logger.debug(f"Product {product_id} is_active={active}")

    return active


async def adjust_product_stock(supabase_client: Client, product_id: int, delta: int) -> Optional[int]:
    """
    Add ``delta`` (negative to remove) to a product's stock.

    Products without an inventory row are skipped.

    Returns:
        The new quantity, or None when the product has no inventory row
    """
    result = (
        supabase_client.table(INVENTORIES_TABLE)
        .select("inventory_id, quantity")
        .eq("product_id", product_id)
        .execute()
    )
    if not result.data:
        return None

    row = cast(Dict[str, Any], result.data[0])
    new_quantity = int(row.get("quantity") or 0) + delta

    (
        supabase_client.table(INVENTORIES_TABLE)
        .update({"quantity": new_quantity})
        .eq("inventory_id", row["inventory_id"])
        .execute()
    )

    logger.debug(f"Stock for product {product_id} changed by {delta} to {new_quantity}")

    return new_quantity


async def create_inventory(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create the inventory row for a product.

    Raises:
        ValueError: If the product does not exist or already has a row
    """
    product_id = data["product_id"]

    product = supabase_client.table(PRODUCTS_TABLE).select("product_id").eq("product_id", product_id).execute()
    if not product.data:
        raise ValueError(f"Product {product_id} does not exist")

    existing = supabase_client.table(INVENTORIES_TABLE).select("inventory_id").eq("product_id", product_id).execute()
    if existing.data:
        raise ValueError(f"Product {product_id} already has an inventory record")

    result = supabase_client.table(INVENTORIES_TABLE).insert(data).execute()

    if not result.data:
        raise Exception("Failed to create inventory: no data returned")

    inventory_id = result.data[0]["inventory_id"]

    logger.info(f"Inventory {inventory_id} created for product {product_id}")

    created = await get_inventory_by_id(supabase_client, inventory_id)
    return created or _with_status(cast(Dict[str, Any], result.data[0]))


async def update_inventory(
    supabase_client: Client,
    inventory_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """Replace stock levels, then refresh the product's active flag."""
    existing = await get_inventory_by_id(supabase_client, inventory_id)
    if not existing:
        return None

    result = (
        supabase_client.table(INVENTORIES_TABLE)
        .update(data)
        .eq("inventory_id", inventory_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Update of inventory {inventory_id} returned no rows")
        return None

    await refresh_product_active_status(supabase_client, existing["product_id"], int(data["quantity"]))

    logger.info(f"Inventory {inventory_id} updated")

    return await get_inventory_by_id(supabase_client, inventory_id)


async def restock_inventory(
    supabase_client: Client,
    inventory_id: int,
    quantity: int,
    user_id: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Add stock to an inventory row and log the movement.

    Args:
        supabase_client: Supabase client
        inventory_id: Row to restock
        quantity: Units to add (>= 1, validated by the request model)
        user_id: Who restocked, when known

    Returns:
        The refreshed inventory row, or None if it does not exist
    """
    existing = await get_inventory_by_id(supabase_client, inventory_id)
    if not existing:
        return None

    product = existing.get("product") or {}
    unit_price = float(product.get("price") or 0)
    new_quantity = int(existing.get("quantity") or 0) + quantity

    (
        supabase_client.table(INVENTORIES_TABLE)
        .update({
            "quantity": new_quantity,
            "last_restock_date": date.today().isoformat(),
            "last_restock_quantity": quantity,
        })
        .eq("inventory_id", inventory_id)
        .execute()
    )

    await refresh_product_active_status(supabase_client, existing["product_id"], new_quantity)

    supabase_client.table(TRANSACTIONS_TABLE).insert({
        "product_id": existing["product_id"],
        "type": "IN",
        "quantity": quantity,
        "unit_price": unit_price,
        "total_amount": quantity * unit_price,
        "previous_quantity": existing.get("quantity"),
        "new_quantity": new_quantity,
        "reference_type": "restock",
        "reference_id": inventory_id,
        "user_id": user_id,
        "notes": f"Restock - Added {quantity} units",
    }).execute()

    logger.info(f"Inventory {inventory_id} restocked with {quantity} units")

    return await get_inventory_by_id(supabase_client, inventory_id)


async def delete_inventory(supabase_client: Client, inventory_id: int) -> bool:
    existing = await get_inventory_by_id(supabase_client, inventory_id)
    if not existing:
        return False

    supabase_client.table(INVENTORIES_TABLE).delete().eq("inventory_id", inventory_id).execute()

    logger.info(f"Inventory {inventory_id} deleted")

    return True
