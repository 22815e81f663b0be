"""
Dashboard API endpoint.

Endpoints:
- GET /dashboard - Shop-wide stats and sales breakdowns
"""

import logging
from fastapi import APIRouter, HTTPException, status

from bizdesk.db.client import get_supabase_client
from bizdesk.services.dashboard_service import get_dashboard
from bizdesk.schemas.dashboard import DashboardResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Dashboard",
    description="""
    Aggregated shop metrics:
    - Totals (active products, low stock, active orders, today's and all-time revenue)
    - Orders by status, recent orders, top products, revenue by service type
    - Daily sales for this month, weekly sales (Sunday-Saturday), monthly sales for this year
    """,
)
async def show_dashboard() -> DashboardResponse:
    supabase_client = get_supabase_client()

    try:
        dashboard = await get_dashboard(supabase_client)
        return DashboardResponse(**dashboard)
    except Exception as e:
        logger.error(f"Failed to build dashboard: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve dashboard"}
        )
