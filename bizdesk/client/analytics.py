"""
Stock movement and sales analytics API services.

Usage:
    >>> async with create_api_client() as api:
    ...     await get_growth_rates(api, "monthly")
    ...     await get_sales_overview(api)
"""

from typing import Any, Mapping, Optional

import httpx

from bizdesk.client.http import unwrap


async def get_product_transactions(api: httpx.AsyncClient, params: Optional[Mapping[str, Any]] = None) -> Any:
    """One page of movements; params may carry type, product_id, start_date, end_date, page, per_page."""
    response = await api.get("/product-transactions", params=params)
    return unwrap(response)


async def get_transactions_by_product(api: httpx.AsyncClient, product_id: Any) -> Any:
    response = await api.get(f"/product-transactions/product/{product_id}")
    return unwrap(response)


async def get_growth_rates(api: httpx.AsyncClient, period: str = "daily") -> Any:
    response = await api.get("/product-transactions/growth-rates", params={"period": period})
    return unwrap(response)


async def get_sales_analytics(api: httpx.AsyncClient, period: str = "daily", day: Optional[str] = None) -> Any:
    params = {"period": period}
    if day is not None:
        params["date"] = day
    response = await api.get("/sales-analytics", params=params)
    return unwrap(response)


async def get_sales_overview(api: httpx.AsyncClient) -> Any:
    response = await api.get("/sales-analytics/overview")
    return unwrap(response)


async def update_sales_summary(api: httpx.AsyncClient) -> Any:
    response = await api.post("/sales-analytics/update-summary")
    return unwrap(response)
