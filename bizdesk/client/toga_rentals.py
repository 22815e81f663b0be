"""
Toga rental API service.

Departments own student rentals and payments. Listing rentals and payments
is scoped to a department; create/update/delete address the record directly.

Endpoints (relative to the API base URL):
- GET/POST      /toga-rentals/departments
- PUT/DELETE    /toga-rentals/departments/{id}
- GET           /toga-rentals/departments/{department_id}/rentals
- POST          /toga-rentals/rentals
- PUT/DELETE    /toga-rentals/rentals/{id}
- GET           /toga-rentals/departments/{department_id}/payments
- POST          /toga-rentals/payments
- PUT/DELETE    /toga-rentals/payments/{id}
- GET           /toga-rentals/stats
"""

from typing import Any, Dict

import httpx

from bizdesk.client.http import unwrap

BASE_PATH = "/toga-rentals"


# ==================== DEPARTMENTS ====================

async def get_departments(api: httpx.AsyncClient) -> Any:
    response = await api.get(f"{BASE_PATH}/departments")
    return unwrap(response)


async def create_department(api: httpx.AsyncClient, data: Dict[str, Any]) -> Any:
    response = await api.post(f"{BASE_PATH}/departments", json=data)
    return unwrap(response)


async def update_department(api: httpx.AsyncClient, department_id: Any, data: Dict[str, Any]) -> Any:
    response = await api.put(f"{BASE_PATH}/departments/{department_id}", json=data)
    return unwrap(response)


async def delete_department(api: httpx.AsyncClient, department_id: Any) -> Any:
    response = await api.delete(f"{BASE_PATH}/departments/{department_id}")
    return unwrap(response)


# ==================== RENTALS/STUDENTS ====================

async def get_rentals(api: httpx.AsyncClient, department_id: Any) -> Any:
    response = await api.get(f"{BASE_PATH}/departments/{department_id}/rentals")
    return unwrap(response)


async def create_rental(api: httpx.AsyncClient, data: Dict[str, Any]) -> Any:
    response = await api.post(f"{BASE_PATH}/rentals", json=data)
    return unwrap(response)


async def update_rental(api: httpx.AsyncClient, rental_id: Any, data: Dict[str, Any]) -> Any:
    response = await api.put(f"{BASE_PATH}/rentals/{rental_id}", json=data)
    return unwrap(response)


async def delete_rental(api: httpx.AsyncClient, rental_id: Any) -> Any:
    response = await api.delete(f"{BASE_PATH}/rentals/{rental_id}")
    return unwrap(response)


# ==================== PAYMENTS ====================

async def get_payments(api: httpx.AsyncClient, department_id: Any) -> Any:
    response = await api.get(f"{BASE_PATH}/departments/{department_id}/payments")
    return unwrap(response)


async def create_payment(api: httpx.AsyncClient, data: Dict[str, Any]) -> Any:
    response = await api.post(f"{BASE_PATH}/payments", json=data)
    return unwrap(response)


async def update_payment(api: httpx.AsyncClient, payment_id: Any, data: Dict[str, Any]) -> Any:
    response = await api.put(f"{BASE_PATH}/payments/{payment_id}", json=data)
    return unwrap(response)


async def delete_payment(api: httpx.AsyncClient, payment_id: Any) -> Any:
    response = await api.delete(f"{BASE_PATH}/payments/{payment_id}")
    return unwrap(response)


# ==================== STATISTICS ====================

async def get_stats(api: httpx.AsyncClient) -> Any:
    """Aggregate counts across all departments."""
    response = await api.get(f"{BASE_PATH}/stats")
    return unwrap(response)
