"""Dashboard API service."""

from typing import Any

import httpx

from bizdesk.client.http import unwrap


async def get_dashboard_stats(api: httpx.AsyncClient) -> Any:
    response = await api.get("/dashboard")
    return unwrap(response)
