"""
Category CRUD API endpoints.

Endpoints:
- GET /categories - List all categories with product counts
- POST /categories - Create a category
- GET /categories/{category_id} - Get single category
- PUT /categories/{category_id} - Update category
- DELETE /categories/{category_id} - Delete category (blocked while products are assigned)
"""

import logging
from typing import List
from fastapi import APIRouter, HTTPException, status
from postgrest.exceptions import APIError

from bizdesk.db.client import get_supabase_client
from bizdesk.services.category_service import (
    CategoryInUseError,
    get_all_categories,
    create_category,
    get_category_by_id,
    update_category,
    delete_category,
)
from bizdesk.schemas.categories import (
    CategoryRequest,
    CategoryResponse,
    CategoryDeleteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get(
    "",
    response_model=List[CategoryResponse],
    status_code=status.HTTP_200_OK,
    summary="List all categories",
    description="""
    Retrieve all categories, newest first.

    Each category includes products_count. The list is read straight from the
    database so edits show up immediately.
    """
)
async def list_categories() -> List[CategoryResponse]:
    """List all categories."""
    supabase_client = get_supabase_client()

    try:
        categories = await get_all_categories(supabase_client)
        return [CategoryResponse(**cat) for cat in categories]

    except Exception as e:
        logger.error(f"Failed to fetch categories: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve categories from database"
            }
        )


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category",
)
async def store_category(request: CategoryRequest) -> CategoryResponse:
    """Create a new category."""
    logger.info(f"Creating category: name={request.category_name}")

    supabase_client = get_supabase_client()

    try:
        created = await create_category(supabase_client, request.model_dump(exclude_none=True))
        return CategoryResponse(**created)

    except ValueError as e:
        logger.warning(f"Validation error creating category: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "validation_error",
                "details": str(e)
            }
        )
    except APIError as e:
        if e.code == "23505":  # unique_violation
            logger.warning(f"Duplicate category rejected by database: {request.category_name}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={
                    "error": "duplicate",
                    "details": "A category with this name already exists"
                }
            )
        logger.error(f"Database error creating category: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "create_error",
                "details": "Failed to create category"
            }
        )
    except Exception as e:
        logger.error(f"Failed to create category: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "create_error",
                "details": "Failed to create category"
            }
        )


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Get category details",
)
async def show_category(category_id: int) -> CategoryResponse:
    """Get details of a single category."""
    supabase_client = get_supabase_client()

    try:
        category = await get_category_by_id(supabase_client, category_id)
    except Exception as e:
        logger.error(f"Failed to fetch category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "fetch_error",
                "details": "Failed to retrieve category from database"
            }
        )

    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": f"Category {category_id} not found"
            }
        )

    return CategoryResponse(**category)


@router.put(
    "/{category_id}",
    response_model=CategoryResponse,
    status_code=status.HTTP_200_OK,
    summary="Update a category",
)
async def replace_category(category_id: int, request: CategoryRequest) -> CategoryResponse:
    """Update a category's name, description, icon or status."""
    logger.info(f"Updating category {category_id}")

    supabase_client = get_supabase_client()

    try:
        updated = await update_category(
            supabase_client, category_id, request.model_dump(exclude_none=True)
        )
    except ValueError as e:
        logger.warning(f"Validation error updating category {category_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "validation_error",
                "details": str(e)
            }
        )
    except Exception as e:
        logger.error(f"Failed to update category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "update_error",
                "details": "Failed to update category"
            }
        )

    if not updated:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": f"Category {category_id} not found"
            }
        )

    return CategoryResponse(**updated)


@router.delete(
    "/{category_id}",
    response_model=CategoryDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete a category",
    description="""
    Delete a category.

    Categories that still have products return 422; reassign or delete the
    products first.
    """
)
async def destroy_category(category_id: int) -> CategoryDeleteResponse:
    """Delete a category without products."""
    supabase_client = get_supabase_client()

    try:
        deleted = await delete_category(supabase_client, category_id)
    except CategoryInUseError as e:
        logger.warning(f"Refusing to delete category {category_id}: products assigned")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "category_in_use",
                "details": str(e)
            }
        )
    except Exception as e:
        logger.error(f"Failed to delete category {category_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "delete_error",
                "details": "Failed to delete category"
            }
        )

    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": "not_found",
                "details": f"Category {category_id} not found"
            }
        )

    return CategoryDeleteResponse(message="Category deleted successfully")
