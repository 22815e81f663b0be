"""
Order API endpoints.

Endpoints:
- GET /orders - List active orders (or look one up by order_number)
- POST /orders - Create an order with line items
- GET /orders/sales/history - Completed orders, optionally date-bounded
- GET /orders/{order_id} - Get single order
- PUT /orders/{order_id} - Update order (replaces items when given)
- POST /orders/{order_id}/complete - Record payment and complete
- POST /orders/{order_id}/void - Void with reason, returning stock
- DELETE /orders/{order_id} - Delete order, returning stock
"""

import logging
from datetime import date
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from bizdesk.auth.dependencies import AuthenticatedUser, get_optional_user
from bizdesk.db.client import get_supabase_client
from bizdesk.services.order_service import (
    OrderAlreadyCompletedError,
    OrderAlreadyVoidedError,
    get_orders,
    get_order_by_id,
    create_order,
    update_order,
    complete_order,
    void_order,
    delete_order,
    get_sales_history,
)
from bizdesk.schemas.orders import (
    OrderCreateRequest,
    OrderUpdateRequest,
    CompleteOrderRequest,
    VoidOrderRequest,
    OrderResponse,
    CompleteOrderResponse,
    VoidOrderResponse,
    OrderDeleteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["orders"])


def _order_not_found(order_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "not_found", "details": f"Order {order_id} not found"}
    )


@router.get(
    "",
    response_model=List[OrderResponse],
    summary="List orders",
    description="""
    Orders in Pending, In Progress or Cancelled status, newest first.
    Completed orders are listed by /orders/sales/history instead.

    With ?order_number=ORD-2025-0001 the lookup ignores status.
    """,
)
async def list_orders(
    order_number: Annotated[Optional[str], Query(max_length=50)] = None,
) -> List[OrderResponse]:
    supabase_client = get_supabase_client()

    try:
        orders = await get_orders(supabase_client, order_number=order_number)
        return [OrderResponse(**order) for order in orders]
    except Exception as e:
        logger.error(f"Failed to fetch orders: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve orders"}
        )


@router.post(
    "",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an order",
    description="""
    Create a Pending order.

    This endpoint:
    - Assigns the next ORD-<year>-<nnnn> number
    - Creates the line items and computes total_amount
    - Takes each item's quantity out of stock
    """
)
async def store_order(request: OrderCreateRequest) -> OrderResponse:
    logger.info(f"Creating {request.service_type} order with {len(request.order_items)} items")

    supabase_client = get_supabase_client()

    try:
        order = await create_order(supabase_client, request.model_dump(mode="json"))
        return OrderResponse(**order)
    except ValueError as e:
        logger.warning(f"Validation error creating order: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "validation_error", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to create order: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Failed to create order"}
        )


@router.get(
    "/sales/history",
    response_model=List[OrderResponse],
    summary="Sales history",
    description="Completed, non-voided orders, most recently completed first.",
)
async def sales_history(
    start_date: Annotated[Optional[date], Query()] = None,
    end_date: Annotated[Optional[date], Query()] = None,
) -> List[OrderResponse]:
    if start_date and end_date and end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "invalid_range", "details": "end_date must be on or after start_date"}
        )

    supabase_client = get_supabase_client()

    try:
        orders = await get_sales_history(supabase_client, start_date=start_date, end_date=end_date)
        return [OrderResponse(**order) for order in orders]
    except Exception as e:
        logger.error(f"Failed to fetch sales history: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve sales history"}
        )


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Get order",
)
async def show_order(order_id: int) -> OrderResponse:
    supabase_client = get_supabase_client()

    try:
        order = await get_order_by_id(supabase_client, order_id)
    except Exception as e:
        logger.error(f"Failed to fetch order {order_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve order"}
        )

    if not order:
        raise _order_not_found(order_id)

    return OrderResponse(**order)


@router.put(
    "/{order_id}",
    response_model=OrderResponse,
    summary="Update order",
    description="""
    Partial update. When order_items is sent the old items' stock is returned,
    the items are replaced and total_amount is recomputed. Moving to
    Completed stamps completed_date.
    """,
)
async def replace_order(order_id: int, request: OrderUpdateRequest) -> OrderResponse:
    supabase_client = get_supabase_client()

    try:
        order = await update_order(supabase_client, order_id, request.model_dump(mode="json", exclude_unset=True))
    except ValueError as e:
        logger.warning(f"Validation error updating order {order_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "validation_error", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to update order {order_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_error", "details": "Failed to update order"}
        )

    if not order:
        raise _order_not_found(order_id)

    return OrderResponse(**order)


@router.post(
    "/{order_id}/complete",
    response_model=CompleteOrderResponse,
    summary="Complete order",
    description="Records the payment and marks the order Completed. 400 if it already is.",
)
async def complete(
    order_id: int,
    request: CompleteOrderRequest,
    user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> CompleteOrderResponse:
    logger.info(f"Completing order {order_id} via {request.payment_method}")

    supabase_client = get_supabase_client()

    try:
        result = await complete_order(
            supabase_client,
            order_id,
            request.model_dump(mode="json"),
            processed_by=user.user_id if user else None,
        )
    except OrderAlreadyCompletedError as e:
        logger.warning(f"Order {order_id} already completed")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "already_completed", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to complete order {order_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "complete_error", "details": "Failed to complete order"}
        )

    if not result:
        raise _order_not_found(order_id)

    order, payment = result
    return CompleteOrderResponse(
        message="Order completed successfully",
        order=OrderResponse(**order),
        payment=payment,
    )


@router.post(
    "/{order_id}/void",
    response_model=VoidOrderResponse,
    summary="Void order",
)
async def void(
    order_id: int,
    request: VoidOrderRequest,
    user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> VoidOrderResponse:
    logger.info(f"Voiding order {order_id}")

    supabase_client = get_supabase_client()

    try:
        order = await void_order(
            supabase_client,
            order_id,
            request.void_reason,
            voided_by=user.user_id if user else None,
        )
    except OrderAlreadyVoidedError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "already_voided", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to void order {order_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "void_error", "details": "Failed to void order"}
        )

    if not order:
        raise _order_not_found(order_id)

    return VoidOrderResponse(message="Order voided successfully", order=OrderResponse(**order))


@router.delete(
    "/{order_id}",
    response_model=OrderDeleteResponse,
    summary="Delete order",
)
async def destroy_order(order_id: int) -> OrderDeleteResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_order(supabase_client, order_id)
    except Exception as e:
        logger.error(f"Failed to delete order {order_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "delete_error", "details": "Failed to delete order"}
        )

    if not deleted:
        raise _order_not_found(order_id)

    return OrderDeleteResponse(message="Order deleted successfully")
