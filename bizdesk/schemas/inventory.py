"""
Pydantic models for inventory endpoints.

Each product has one inventory row. The status field is derived, never
stored:
- 'out'        quantity == 0
- 'low'        quantity <= reorder_level
- 'available'  otherwise
"""

from datetime import date
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field


InventoryStatus = Literal["out", "low", "available"]


class InventoryFields(BaseModel):
    quantity: int = Field(..., ge=0, description="Units on hand")
    reorder_level: int = Field(..., ge=0, description="At or below this quantity the item is 'low'")
    reorder_quantity: int = Field(..., ge=1, description="Suggested units per reorder")
    last_restock_date: Optional[date] = None
    last_restock_quantity: Optional[int] = Field(None, ge=0)


class InventoryCreateRequest(InventoryFields):
    product_id: int = Field(..., description="Product this row tracks (one row per product)")


class InventoryUpdateRequest(InventoryFields):
    pass


class RestockRequest(BaseModel):
    """Request body for POST /inventories/{id}/restock."""
    quantity: int = Field(..., ge=1, description="Units to add to current stock")


class InventoryResponse(BaseModel):
    inventory_id: int
    product_id: int
    quantity: int
    reorder_level: int
    reorder_quantity: int
    last_restock_date: Optional[str] = None
    last_restock_quantity: Optional[int] = None
    status: InventoryStatus
    product: Optional[Dict[str, Any]] = None
    updated_at: Optional[str] = None


class RestockResponse(BaseModel):
    message: str
    inventory: InventoryResponse


class InventoryDeleteResponse(BaseModel):
    message: str
