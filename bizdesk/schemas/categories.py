"""
Pydantic models for category endpoints.

Categories group products in the shop catalog. Listings and single reads
include products_count so the UI can block deletes up front.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field


CategoryStatus = Literal["active", "inactive"]


class CategoryRequest(BaseModel):
    """Request body for creating or replacing a category."""
    category_name: str = Field(..., min_length=1, max_length=50, description="Unique category name")
    description: Optional[str] = Field(None, description="Free-text description")
    icon: Optional[str] = Field(None, max_length=50, description="Icon identifier for UI display")
    status: Optional[CategoryStatus] = Field(None, description="'active' or 'inactive'")


class CategoryResponse(BaseModel):
    """
    Response model for a single category.

    Fields:
        category_id: Primary key
        category_name: Display name (unique)
        description: Optional description
        icon: Optional icon identifier
        status: 'active' or 'inactive'
        products_count: Number of products assigned to the category
    """
    category_id: int = Field(..., description="Category ID")
    category_name: str = Field(..., description="Category display name")
    description: Optional[str] = None
    icon: Optional[str] = None
    status: Optional[str] = None
    products_count: int = Field(0, description="Number of products in this category")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CategoryDeleteResponse(BaseModel):
    message: str
