"""
Service layer for the BizDesk backend.

Services own the persistence rules for each resource:
- Take the Supabase client as their first argument
- Return plain dicts (routes map them into response models)
- Raise ValueError subclasses for rule violations; routes turn those into 4xx

Routes stay thin: parse, call a service, map the result.
"""

from .category_service import (
    CategoryInUseError,
    create_category,
    delete_category,
    get_all_categories,
    get_category_by_id,
    update_category,
)
from .dashboard_service import get_dashboard
from .inventory_service import (
    adjust_product_stock,
    create_inventory,
    delete_inventory,
    get_all_inventories,
    get_inventory_by_id,
    restock_inventory,
    update_inventory,
)
from .order_service import (
    OrderAlreadyCompletedError,
    OrderAlreadyVoidedError,
    complete_order,
    create_order,
    delete_order,
    get_order_by_id,
    get_orders,
    get_sales_history,
    update_order,
    void_order,
)
from .product_service import (
    create_product,
    delete_product,
    get_all_products,
    get_product_by_id,
    update_product,
)
from . import toga_rental_service

__all__ = [
    "CategoryInUseError",
    "create_category",
    "delete_category",
    "get_all_categories",
    "get_category_by_id",
    "update_category",
    "get_dashboard",
    "adjust_product_stock",
    "create_inventory",
    "delete_inventory",
    "get_all_inventories",
    "get_inventory_by_id",
    "restock_inventory",
    "update_inventory",
    "OrderAlreadyCompletedError",
    "OrderAlreadyVoidedError",
    "complete_order",
    "create_order",
    "delete_order",
    "get_order_by_id",
    "get_orders",
    "get_sales_history",
    "update_order",
    "void_order",
    "create_product",
    "delete_product",
    "get_all_products",
    "get_product_by_id",
    "update_product",
    "toga_rental_service",
]
