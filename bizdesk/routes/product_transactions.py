"""
Product transaction (stock movement) API endpoints.

Endpoints:
- GET /product-transactions - Paginated movements with filters
- GET /product-transactions/growth-rates - Per-product OUT growth vs previous period
- GET /product-transactions/product/{product_id} - One product's movements and totals
"""

import logging
from datetime import date
from typing import Annotated, Literal, Optional
from fastapi import APIRouter, HTTPException, Query, status

from bizdesk.db.client import get_supabase_client
from bizdesk.services.product_transaction_service import (
    DEFAULT_PER_PAGE,
    get_transactions,
    get_product_transactions,
    get_product_growth_rates,
)
from bizdesk.schemas.product_transactions import (
    GrowthRatesResponse,
    ProductMovementsResponse,
    ProductTransactionPage,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/product-transactions", tags=["product-transactions"])


@router.get(
    "",
    response_model=ProductTransactionPage,
    summary="List stock movements",
    description="""
    Stock movements, newest first, one page at a time.

    Filters:
    - type: IN or OUT (case-insensitive)
    - product_id
    - start_date / end_date: inclusive days on created_at
    """,
)
async def list_transactions(
    type: Annotated[Optional[str], Query(pattern="^(IN|OUT|in|out)$")] = None,
    product_id: Annotated[Optional[int], Query()] = None,
    start_date: Annotated[Optional[date], Query()] = None,
    end_date: Annotated[Optional[date], Query()] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=200)] = DEFAULT_PER_PAGE,
) -> ProductTransactionPage:
    if start_date and end_date and end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_range", "details": "end_date must be on or after start_date"}
        )

    supabase_client = get_supabase_client()

    try:
        result = await get_transactions(
            supabase_client,
            transaction_type=type,
            product_id=product_id,
            start_date=start_date,
            end_date=end_date,
            page=page,
            per_page=per_page,
        )
        return ProductTransactionPage(**result)
    except Exception as e:
        logger.error(f"Failed to fetch product transactions: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve product transactions"}
        )


@router.get(
    "/growth-rates",
    response_model=GrowthRatesResponse,
    summary="Product growth rates",
    description="""
    For every product with an inventory row: IN/OUT totals for the current and
    previous period and the growth rate of OUT quantities.
    """,
)
async def growth_rates(
    period: Annotated[Literal["daily", "monthly", "yearly"], Query()] = "daily",
) -> GrowthRatesResponse:
    supabase_client = get_supabase_client()

    try:
        result = await get_product_growth_rates(supabase_client, period=period)
        return GrowthRatesResponse(**result)
    except Exception as e:
        logger.error(f"Failed to compute {period} growth rates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to compute growth rates"}
        )


@router.get(
    "/product/{product_id}",
    response_model=ProductMovementsResponse,
    summary="Movements for one product",
)
async def product_transactions(product_id: int) -> ProductMovementsResponse:
    supabase_client = get_supabase_client()

    try:
        result = await get_product_transactions(supabase_client, product_id)
        return ProductMovementsResponse(**result)
    except Exception as e:
        logger.error(f"Failed to fetch transactions for product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve product transactions"}
        )
