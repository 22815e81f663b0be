"""
Shop resource services: categories, products, inventory and orders.

Each resource is a thin binding of a URL prefix to the shared HTTP client.
One method call performs exactly one request and returns the decoded body
as-is; errors surface as httpx exceptions.

Usage:
    >>> async with create_api_client() as api:
    ...     inventory = InventoryAPI(api)
    ...     await inventory.restock(3, 25)
"""

from typing import Any, Dict, Mapping, Optional

import httpx

from bizdesk.client.http import unwrap


class ResourceAPI:
    """CRUD calls for one REST resource mounted at ``path``."""

    path: str = ""

    def __init__(self, api: httpx.AsyncClient, path: Optional[str] = None):
        self.api = api
        if path is not None:
            self.path = path
        if not self.path:
            raise ValueError("ResourceAPI requires a resource path")

    def _item_url(self, resource_id: Any) -> str:
        return f"{self.path}/{resource_id}"

    async def get_all(self) -> Any:
        response = await self.api.get(self.path)
        return unwrap(response)

    async def get_by_id(self, resource_id: Any) -> Any:
        response = await self.api.get(self._item_url(resource_id))
        return unwrap(response)

    async def create(self, data: Dict[str, Any]) -> Any:
        response = await self.api.post(self.path, json=data)
        return unwrap(response)

    async def update(self, resource_id: Any, data: Dict[str, Any]) -> Any:
        response = await self.api.put(self._item_url(resource_id), json=data)
        return unwrap(response)

    async def delete(self, resource_id: Any) -> Any:
        response = await self.api.delete(self._item_url(resource_id))
        return unwrap(response)


class CategoriesAPI(ResourceAPI):
    path = "/categories"


class ProductsAPI(ResourceAPI):
    path = "/products"


class InventoryAPI(ResourceAPI):
    path = "/inventories"

    async def restock(self, inventory_id: Any, quantity: int) -> Any:
        """Add ``quantity`` units to an inventory row."""
        response = await self.api.post(
            f"{self._item_url(inventory_id)}/restock",
            json={"quantity": quantity},
        )
        return unwrap(response)


class OrdersAPI(ResourceAPI):
    path = "/orders"

    async def search_by_order_number(self, order_number: str) -> Any:
        response = await self.api.get(self.path, params={"order_number": order_number})
        return unwrap(response)

    async def complete(self, order_id: Any, payment_data: Dict[str, Any]) -> Any:
        """Record the payment and mark the order Completed."""
        response = await self.api.post(f"{self._item_url(order_id)}/complete", json=payment_data)
        return unwrap(response)

    async def void(self, order_id: Any, data: Dict[str, Any]) -> Any:
        response = await self.api.post(f"{self._item_url(order_id)}/void", json=data)
        return unwrap(response)

    async def get_sales_history(self, params: Optional[Mapping[str, Any]] = None) -> Any:
        response = await self.api.get(f"{self.path}/sales/history", params=params)
        return unwrap(response)
