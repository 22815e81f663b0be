"""
Product CRUD API endpoints.

Endpoints:
- GET /products - List products (optional ?search=<barcode>)
- POST /products - Create product (and its inventory row)
- GET /products/{product_id} - Get single product
- PUT /products/{product_id} - Update product
- DELETE /products/{product_id} - Delete product
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, status
from postgrest.exceptions import APIError

from bizdesk.db.client import get_supabase_client
from bizdesk.services.product_service import (
    get_all_products,
    get_product_by_id,
    create_product,
    update_product,
    delete_product,
)
from bizdesk.schemas.products import (
    ProductRequest,
    ProductResponse,
    ProductDeleteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def _product_not_found(product_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": "not_found", "details": f"Product {product_id} not found"}
    )


@router.get(
    "",
    response_model=List[ProductResponse],
    status_code=status.HTTP_200_OK,
    summary="List products",
    description="""
    List all products, newest first, with category and inventory.

    Query parameters:
    - search: exact barcode match (barcode scanner lookup)
    """
)
async def list_products(
    search: Optional[str] = Query(None, description="Exact barcode to look up")
) -> List[ProductResponse]:
    supabase_client = get_supabase_client()

    try:
        products = await get_all_products(supabase_client, search=search)
        return [ProductResponse(**product) for product in products]
    except Exception as e:
        logger.error(f"Failed to fetch products: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve products"}
        )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a product",
    description="Creates the product and an inventory row (quantity 0, reorder level 20, reorder quantity 50).",
)
async def store_product(request: ProductRequest) -> ProductResponse:
    logger.info(f"Creating product: name={request.product_name}")

    supabase_client = get_supabase_client()

    try:
        product = await create_product(supabase_client, request.model_dump(mode="json", exclude_none=True))
        return ProductResponse(**product)
    except ValueError as e:
        logger.warning(f"Validation error creating product: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "validation_error", "details": str(e)}
        )
    except APIError as e:
        # Unique index caught a duplicate the pre-insert check raced past
        if e.code == "23505":
            logger.warning(f"Duplicate product rejected by database: {request.product_name}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"error": "duplicate", "details": "A product with this name or barcode already exists"}
            )
        logger.error(f"Database error creating product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Failed to create product"}
        )
    except Exception as e:
        logger.error(f"Failed to create product: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "create_error", "details": "Failed to create product"}
        )


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    status_code=status.HTTP_200_OK,
    summary="Get product details",
)
async def show_product(product_id: int) -> ProductResponse:
    supabase_client = get_supabase_client()

    try:
        product = await get_product_by_id(supabase_client, product_id)
    except Exception as e:
        logger.error(f"Failed to fetch product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "fetch_error", "details": "Failed to retrieve product"}
        )

    if not product:
        raise _product_not_found(product_id)

    return ProductResponse(**product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    status_code=status.HTTP_200_OK,
    summary="Update a product",
)
async def replace_product(product_id: int, request: ProductRequest) -> ProductResponse:
    supabase_client = get_supabase_client()

    try:
        product = await update_product(
            supabase_client, product_id, request.model_dump(mode="json", exclude_none=True)
        )
    except ValueError as e:
        logger.warning(f"Validation error updating product {product_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"error": "validation_error", "details": str(e)}
        )
    except Exception as e:
        logger.error(f"Failed to update product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "update_error", "details": "Failed to update product"}
        )

    if not product:
        raise _product_not_found(product_id)

    return ProductResponse(**product)


@router.delete(
    "/{product_id}",
    response_model=ProductDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a product",
)
async def destroy_product(product_id: int) -> ProductDeleteResponse:
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_product(supabase_client, product_id)
    except Exception as e:
        logger.error(f"Failed to delete product {product_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": "delete_error", "details": "Failed to delete product"}
        )

    if not deleted:
        raise _product_not_found(product_id)

    return ProductDeleteResponse(message="Product deleted successfully")
