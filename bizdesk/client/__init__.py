"""
Async HTTP client for the BizDesk REST API.

One module per resource group; every call performs a single request through
the client built by create_api_client() and returns the response body.
"""

from .analytics import (
    get_growth_rates,
    get_product_transactions,
    get_sales_analytics,
    get_sales_overview,
    get_transactions_by_product,
    update_sales_summary,
)
from .dashboard import get_dashboard_stats
from .http import DEFAULT_HEADERS, create_api_client
from .resources import CategoriesAPI, InventoryAPI, OrdersAPI, ProductsAPI, ResourceAPI
from .toga_rentals import (
    create_department,
    create_payment,
    create_rental,
    delete_department,
    delete_payment,
    delete_rental,
    get_departments,
    get_payments,
    get_rentals,
    get_stats,
    update_department,
    update_payment,
    update_rental,
)

__all__ = [
    "DEFAULT_HEADERS",
    "create_api_client",
    "ResourceAPI",
    "CategoriesAPI",
    "ProductsAPI",
    "InventoryAPI",
    "OrdersAPI",
    "get_dashboard_stats",
    "get_product_transactions",
    "get_transactions_by_product",
    "get_growth_rates",
    "get_sales_analytics",
    "get_sales_overview",
    "update_sales_summary",
    "get_departments",
    "create_department",
    "update_department",
    "delete_department",
    "get_rentals",
    "create_rental",
    "update_rental",
    "delete_rental",
    "get_payments",
    "create_payment",
    "update_payment",
    "delete_payment",
    "get_stats",
]
