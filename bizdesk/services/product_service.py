"""
Product persistence service.

RULES:
1. product_name and barcode are each unique
2. category_id must reference an existing category
3. Creating a product also creates its inventory row with the default
   stock policy (quantity 0, reorder level 20, reorder quantity 50)
4. Reads embed the category, and listings also embed the inventory row
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"
INVENTORIES_TABLE = "inventories"
CATEGORIES_TABLE = "categories"

PRODUCT_WITH_RELATIONS = "*, category:categories(*), inventory:inventories(*)"
PRODUCT_WITH_CATEGORY = "*, category:categories(*)"

DEFAULT_INVENTORY = {
    "quantity": 0,
    "reorder_level": 20,
    "reorder_quantity": 50,
}


def _normalize_embeds(product: Dict[str, Any]) -> Dict[str, Any]:
    """PostgREST returns one-to-one embeds as lists for non-unique FKs; keep the row."""
    normalized = dict(product)
    for key in ("category", "inventory"):
        value = normalized.get(key)
        if isinstance(value, list):
            normalized[key] = value[0] if value else None
    return normalized


async def get_all_products(supabase_client: Client, search: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Fetch products, newest first, with category and inventory.

    Args:
        supabase_client: Supabase client
        search: Optional exact barcode match (used by the barcode scanner)

    Returns:
        List of product records
    """
    query = supabase_client.table(PRODUCTS_TABLE).select(PRODUCT_WITH_RELATIONS)

    if search:
        query = query.eq("barcode", search)

    result = query.order("created_at", desc=True).execute()

    products = [_normalize_embeds(p) for p in cast(List[Dict[str, Any]], result.data or [])]

    logger.info(f"Fetched {len(products)} products" + (" (barcode search)" if search else ""))

    return products


async def get_product_by_id(
    supabase_client: Client,
    product_id: int,
    include_inventory: bool = False,
) -> Optional[Dict[str, Any]]:
    columns = PRODUCT_WITH_RELATIONS if include_inventory else PRODUCT_WITH_CATEGORY
    result = (
        supabase_client.table(PRODUCTS_TABLE)
        .select(columns)
        .eq("product_id", product_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Product {product_id} not found")
        return None

    return _normalize_embeds(cast(Dict[str, Any], result.data[0]))


async def _validate_product(
    supabase_client: Client,
    data: Dict[str, Any],
    exclude_id: Optional[int] = None,
) -> None:
    """
    Check uniqueness of name and barcode and that the category exists.

    Raises:
        ValueError: On the first failed rule
    """
    for field in ("product_name", "barcode"):
        query = supabase_client.table(PRODUCTS_TABLE).select("product_id").eq(field, data[field])
        if exclude_id is not None:
            query = query.neq("product_id", exclude_id)
        if query.execute().data:
            raise ValueError(f"The {field.replace('_', ' ')} '{data[field]}' has already been taken.")

    category = (
        supabase_client.table(CATEGORIES_TABLE)
        .select("category_id")
        .eq("category_id", data["category_id"])
        .execute()
    )
    if not category.data:
        raise ValueError(f"Category {data['category_id']} does not exist")


async def create_product(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a product and its inventory row.

    Returns:
        The product with category and inventory embedded

    Raises:
        ValueError: If validation fails
        Exception: If an insert returns no row
    """
    await _validate_product(supabase_client, data)

    logger.info(f"Creating product: barcode={data['barcode']}")

    result = supabase_client.table(PRODUCTS_TABLE).insert(data).execute()

    if not result.data:
        raise Exception("Failed to create product: no data returned")

    product = cast(Dict[str, Any], result.data[0])
    product_id = product["product_id"]

    inventory_result = (
        supabase_client.table(INVENTORIES_TABLE)
        .insert({"product_id": product_id, **DEFAULT_INVENTORY})
        .execute()
    )
    if not inventory_result.data:
        raise Exception(f"Failed to create inventory for product {product_id}")

    logger.info(f"Product {product_id} created with default inventory")

    created = await get_product_by_id(supabase_client, product_id, include_inventory=True)
    return created or product


async def update_product(
    supabase_client: Client,
    product_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Update a product.

    Returns:
        Updated product with category, or None if not found

    Raises:
        ValueError: If validation fails
    """
    existing = await get_product_by_id(supabase_client, product_id)
    if not existing:
        return None

    await _validate_product(supabase_client, data, exclude_id=product_id)

    result = (
        supabase_client.table(PRODUCTS_TABLE)
        .update(data)
        .eq("product_id", product_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Update of product {product_id} returned no rows")
        return None

    logger.info(f"Product {product_id} updated")

    return await get_product_by_id(supabase_client, product_id)


async def delete_product(supabase_client: Client, product_id: int) -> bool:
    """
    Delete a product.

    Order items keep their product_name snapshot; the database nulls their
    product_id on delete.
    """
    existing = await get_product_by_id(supabase_client, product_id)
    if not existing:
        return False

    supabase_client.table(PRODUCTS_TABLE).delete().eq("product_id", product_id).execute()

    logger.info(f"Product {product_id} deleted")

    return True
