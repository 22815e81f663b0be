"""
Inventory API endpoints.

Endpoints:
- GET /inventories - List inventory rows with product and category
- POST /inventories - Create the inventory row for a product
- GET /inventories/{inventory_id} - Get single row
- PUT /inventories/{inventory_id} - Replace stock levels
- POST /inventories/{inventory_id}/restock - Add units to current stock
- DELETE /inventories/{inventory_id} - Delete row
"""

import logging
from typing import Annotated, List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from bizdesk.auth.dependencies import AuthenticatedUser, get_optional_user
from bizdesk.db.client import get_supabase_client
from bizdesk.services.inventory_service import (
    get_all_inventories,
    get_inventory_by_id,
    create_inventory,
    update_inventory,
    restock_inventory,
    delete_inventory,
)
from bizdesk.schemas.inventory import (
    InventoryCreateRequest,
    InventoryUpdateRequest,
    InventoryResponse,
    RestockRequest,
    RestockResponse,
    InventoryDeleteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventories", tags=["inventory"])


def _inventory_not_found(inventory_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "not_found", "details": f"Inventory {inventory_id} not found"}
    )


@router.get(
    "",
    response_model=List[InventoryResponse],
    summary="List inventory",
    description="All inventory rows, most recently changed first, with derived status (out/low/available).",
)
async def list_inventories() -> List[InventoryResponse]:
    supabase_client = get_supabase_client()

    try:
        inventories = await get_all_inventories(supabase_client)
        return [InventoryResponse(**row) for row in inventories]
    except Exception as e:
        logger.error(f"Failed to fetch inventory: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve inventory"}
        )


@router.post(
    "",
    response_model=InventoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an inventory row",
)
async def store_inventory(request: InventoryCreateRequest) -> InventoryResponse:
    supabase_client = get_supabase_client()

    try:
        inventory = await create_inventory(supabase_client, request.model_dump(mode="json", exclude_none=True))
        return InventoryResponse(**inventory)
    except ValueError as e:
        logger.warning(f"Validation error creating inventory: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "validation_error", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to create inventory: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Failed to create inventory"}
        )


@router.get(
    "/{inventory_id}",
    response_model=InventoryResponse,
    summary="Get inventory row",
)
async def show_inventory(inventory_id: int) -> InventoryResponse:
    supabase_client = get_supabase_client()

    try:
        inventory = await get_inventory_by_id(supabase_client, inventory_id)
    except Exception as e:
        logger.error(f"Failed to fetch inventory {inventory_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve inventory"}
        )

    if not inventory:
        raise _inventory_not_found(inventory_id)

    return InventoryResponse(**inventory)


@router.put(
    "/{inventory_id}",
    response_model=InventoryResponse,
    summary="Update stock levels",
    description="Replaces quantity and reorder settings, then refreshes the product's active flag.",
)
async def replace_inventory(inventory_id: int, request: InventoryUpdateRequest) -> InventoryResponse:
    supabase_client = get_supabase_client()

    try:
        inventory = await update_inventory(
            supabase_client, inventory_id, request.model_dump(mode="json", exclude_none=True)
        )
    except Exception as e:
        logger.error(f"Failed to update inventory {inventory_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_error", "details": "Failed to update inventory"}
        )

    if not inventory:
        raise _inventory_not_found(inventory_id)

    return InventoryResponse(**inventory)


@router.post(
    "/{inventory_id}/restock",
    response_model=RestockResponse,
    summary="Restock inventory",
    description="""
    Add units to existing stock.

    This endpoint:
    - Adds quantity to the current stock
    - Stamps last_restock_date (today) and last_restock_quantity
    - Refreshes the product's active flag
    - Records an IN product transaction at the product's current price
    """
)
async def restock(
    inventory_id: int,
    request: RestockRequest,
    user: Annotated[Optional[AuthenticatedUser], Depends(get_optional_user)],
) -> RestockResponse:
    logger.info(f"Restocking inventory {inventory_id} with {request.quantity} units")

    supabase_client = get_supabase_client()

    try:
        inventory = await restock_inventory(
            supabase_client,
            inventory_id,
            request.quantity,
            user_id=user.user_id if user else None,
        )
    except Exception as e:
        logger.error(f"Failed to restock inventory {inventory_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "restock_error", "details": "Failed to restock inventory"}
        )

    if not inventory:
        raise _inventory_not_found(inventory_id)

    return RestockResponse(
        message="Inventory restocked successfully",
        inventory=InventoryResponse(**inventory)
    )


@router.delete(
    "/{inventory_id}",
    response_model=InventoryDeleteResponse,
    summary="Delete inventory row",
)
async def destroy_inventory(inventory_id: int) -> InventoryDeleteResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_inventory(supabase_client, inventory_id)
    except Exception as e:
        logger.error(f"Failed to delete inventory {inventory_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "delete_error", "details": "Failed to delete inventory"}
        )

    if not deleted:
        raise _inventory_not_found(inventory_id)

    return InventoryDeleteResponse(message="Inventory deleted successfully")
