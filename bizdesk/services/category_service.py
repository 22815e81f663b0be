"""
Category persistence service.

RULES:
1. category_name is unique across all categories
2. A category with products assigned CANNOT be deleted; products must be
   reassigned or removed first
3. Reads attach products_count (PostgREST embedded count on products)
"""

import logging
from typing import Any, Dict, List, Optional, cast

from supabase import Client

logger = logging.getLogger(__name__)

CATEGORIES_TABLE = "categories"
CATEGORY_WITH_COUNT = "*, products(count)"


class CategoryInUseError(ValueError):
    """Raised when deleting a category that still has products."""


def _flatten_product_count(category: Dict[str, Any]) -> Dict[str, Any]:
    """Turn PostgREST's products: [{"count": n}] into products_count: n."""
    flattened = dict(category)
    embedded = flattened.pop("products", None)
    if isinstance(embedded, list) and embedded:
        flattened["products_count"] = int(embedded[0].get("count") or 0)
    else:
        flattened.setdefault("products_count", 0)
    return flattened


async def get_all_categories(supabase_client: Client) -> List[Dict[str, Any]]:
    """
    Fetch all categories, newest first, with product counts.

    Args:
        supabase_client: Supabase client

    Returns:
        List of category records including products_count
    """
    logger.debug("Fetching categories")

    result = (
        supabase_client.table(CATEGORIES_TABLE)
        .select(CATEGORY_WITH_COUNT)
        .order("created_at", desc=True)
        .execute()
    )

    categories = [_flatten_product_count(cat) for cat in cast(List[Dict[str, Any]], result.data or [])]

    logger.info(f"Fetched {len(categories)} categories")

    return categories


async def get_category_by_id(supabase_client: Client, category_id: int) -> Optional[Dict[str, Any]]:
    """
    Fetch a single category with its product count.

    Returns:
        Category record if found, None otherwise
    """
    result = (
        supabase_client.table(CATEGORIES_TABLE)
        .select(CATEGORY_WITH_COUNT)
        .eq("category_id", category_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Category {category_id} not found")
        return None

    return _flatten_product_count(cast(Dict[str, Any], result.data[0]))


async def _ensure_unique_name(
    supabase_client: Client,
    category_name: str,
    exclude_id: Optional[int] = None,
) -> None:
    query = (
        supabase_client.table(CATEGORIES_TABLE)
        .select("category_id")
        .eq("category_name", category_name)
    )
    if exclude_id is not None:
        query = query.neq("category_id", exclude_id)
    if query.execute().data:
        raise ValueError(f"The category name '{category_name}' has already been taken.")


async def create_category(supabase_client: Client, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a category.

    Raises:
        ValueError: If the name is already used
        Exception: If the insert returns no row
    """
    await _ensure_unique_name(supabase_client, data["category_name"])

    logger.info(f"Creating category: name={data['category_name']}")

    result = supabase_client.table(CATEGORIES_TABLE).insert(data).execute()

    if not result.data:
        raise Exception("Failed to create category: no data returned")

    created = cast(Dict[str, Any], result.data[0])
    created.setdefault("products_count", 0)

    logger.info(f"Category created successfully: id={created.get('category_id')}")

    return created


async def update_category(
    supabase_client: Client,
    category_id: int,
    data: Dict[str, Any],
) -> Optional[Dict[str, Any]]:
    """
    Update a category.

    Returns:
        Updated category with products_count, or None if not found

    Raises:
        ValueError: If the new name belongs to another category
    """
    existing = await get_category_by_id(supabase_client, category_id)
    if not existing:
        return None

    await _ensure_unique_name(supabase_client, data["category_name"], exclude_id=category_id)

    logger.info(f"Updating category {category_id}")

    result = (
        supabase_client.table(CATEGORIES_TABLE)
        .update(data)
        .eq("category_id", category_id)
        .execute()
    )

    if not result.data:
        logger.warning(f"Update of category {category_id} returned no rows")
        return None

    updated = cast(Dict[str, Any], result.data[0])
    updated["products_count"] = existing.get("products_count", 0)

    return updated


async def delete_category(supabase_client: Client, category_id: int) -> bool:
    """
    Delete a category with no products.

    Returns:
        True if deleted, False if not found

    Raises:
        CategoryInUseError: If products are still assigned
    """
    existing = await get_category_by_id(supabase_client, category_id)
    if not existing:
        return False

    if existing.get("products_count", 0) > 0:
        raise CategoryInUseError(
            "Cannot delete category. This category has products assigned to it. "
            "Please reassign or delete the products first."
        )

    supabase_client.table(CATEGORIES_TABLE).delete().eq("category_id", category_id).execute()

    logger.info(f"Category {category_id} deleted")

    return True
