"""
Pydantic models for product endpoints.

A product belongs to one category and owns exactly one inventory row, which
is created together with the product.
"""

from datetime import date
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field


ProductStatus = Literal["active", "inactive"]


class ProductRequest(BaseModel):
    """Request body for creating or replacing a product."""
    product_name: str = Field(..., min_length=1, max_length=100, description="Unique product name")
    barcode: str = Field(..., min_length=1, max_length=50, description="Unique barcode")
    category_id: int = Field(..., description="Owning category ID")
    description: Optional[str] = None
    price: float = Field(..., ge=0, description="Selling price")
    cost: Optional[float] = Field(None, ge=0, description="Unit cost")
    unit: str = Field(..., min_length=1, max_length=20, description="Unit of measure (e.g., 'pcs')")
    image_url: Optional[str] = None
    expiration_date: Optional[date] = None
    status: Optional[ProductStatus] = None


class ProductResponse(BaseModel):
    """A product with its category and (when loaded) inventory row."""
    product_id: int
    product_name: str
    barcode: str
    category_id: Optional[int] = None
    description: Optional[str] = None
    price: float
    cost: Optional[float] = None
    unit: Optional[str] = None
    image_url: Optional[str] = None
    expiration_date: Optional[str] = None
    is_active: Optional[bool] = None
    status: Optional[str] = None
    category: Optional[Dict[str, Any]] = None
    inventory: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ProductDeleteResponse(BaseModel):
    message: str
