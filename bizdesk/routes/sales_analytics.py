"""
Sales analytics API endpoints.

Endpoints:
- GET /sales-analytics - One period vs the period before it
- GET /sales-analytics/overview - Daily, monthly and yearly comparisons
- POST /sales-analytics/update-summary - Store today's figures in sales_summary
"""

import logging
from datetime import date
from typing import Annotated, Literal, Optional
from fastapi import APIRouter, HTTPException, Query, status

from bizdesk.db.client import get_supabase_client
from bizdesk.services.sales_analytics_service import (
    get_sales_analytics,
    get_sales_overview,
    update_sales_summary,
)
from bizdesk.schemas.sales_analytics import (
    SalesAnalyticsResponse,
    SalesOverviewResponse,
    SalesSummaryUpdateResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales-analytics", tags=["sales-analytics"])


@router.get(
    "",
    response_model=SalesAnalyticsResponse,
    summary="Sales growth for a period",
    description="""
    Payments total and completed order count for the period containing `date`
    (default today), the same figures for the previous period, and the growth
    rate of sales between them.
    """,
)
async def show_sales_analytics(
    period: Annotated[Literal["daily", "monthly", "yearly"], Query()] = "daily",
    day: Annotated[Optional[date], Query(alias="date")] = None,
) -> SalesAnalyticsResponse:
    supabase_client = get_supabase_client()

    try:
        analytics = await get_sales_analytics(supabase_client, period=period, day=day)
        return SalesAnalyticsResponse(**analytics)
    except Exception as e:
        logger.error(f"Failed to compute {period} sales analytics: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to compute sales analytics"}
        )


@router.get(
    "/overview",
    response_model=SalesOverviewResponse,
    summary="Sales overview",
)
async def show_sales_overview() -> SalesOverviewResponse:
    supabase_client = get_supabase_client()

    try:
        overview = await get_sales_overview(supabase_client)
        return SalesOverviewResponse(**overview)
    except Exception as e:
        logger.error(f"Failed to compute sales overview: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to compute sales overview"}
        )


@router.post(
    "/update-summary",
    response_model=SalesSummaryUpdateResponse,
    summary="Refresh stored sales summaries",
    description="Upserts today's daily, monthly and yearly rows in sales_summary.",
)
async def refresh_sales_summary() -> SalesSummaryUpdateResponse:
    supabase_client = get_supabase_client()

    try:
        rows = await update_sales_summary(supabase_client)
    except Exception as e:
        logger.error(f"Failed to update sales summary: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_error", "details": "Failed to update sales summary"}
        )

    return SalesSummaryUpdateResponse(
        message="Sales summary updated successfully",
        summaries=rows,
    )
