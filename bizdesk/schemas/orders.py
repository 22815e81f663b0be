"""
Pydantic models for order endpoints.

Orders are service jobs (printing, lamination, uniforms...) made of product
line items. Lifecycle:

    Pending -> In Progress -> Completed   (via PUT status or POST /complete)
            \\-> Cancelled                 (via PUT status or POST /void)

total_amount is always computed server-side from the line items.
"""

from datetime import date
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


ServiceType = Literal[
    "Printing",
    "ID Creation",
    "Tela Purchase",
    "Lamination",
    "Document Binding",
    "Uniform",
    "Other",
]
OrderStatus = Literal["Pending", "In Progress", "Completed", "Cancelled"]
OrderPaymentMethod = Literal["Cash", "GCash"]


class OrderItemRequest(BaseModel):
    """One line item; subtotal = quantity * unit_price."""
    product_id: int
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)
    notes: Optional[str] = None


class OrderCreateRequest(BaseModel):
    customer_name: Optional[str] = Field(None, max_length=100)
    service_type: ServiceType
    notes: Optional[str] = None
    preferred_pickup_date: Optional[date] = None
    order_items: List[OrderItemRequest] = Field(..., min_length=1, description="At least one line item")


class OrderUpdateRequest(BaseModel):
    """
    Partial update.

    When order_items is present the old items are replaced (stock for the old
    items is returned first) and total_amount is recomputed.
    """
    customer_name: Optional[str] = Field(None, max_length=100)
    service_type: Optional[ServiceType] = None
    status: Optional[OrderStatus] = None
    notes: Optional[str] = None
    preferred_pickup_date: Optional[date] = None
    order_items: Optional[List[OrderItemRequest]] = None


class CompleteOrderRequest(BaseModel):
    """Payment captured when an order is completed."""
    payment_method: OrderPaymentMethod
    amount: float = Field(..., ge=0)
    reference_number: Optional[str] = Field(None, max_length=100)
    notes: Optional[str] = None


class VoidOrderRequest(BaseModel):
    void_reason: str = Field(..., min_length=1, max_length=255, description="Why the order was voided")


class OrderItemResponse(BaseModel):
    order_item_id: int
    order_id: int
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: int
    unit_price: float
    subtotal: float
    notes: Optional[str] = None
    product: Optional[Dict[str, Any]] = None


class OrderResponse(BaseModel):
    order_id: int
    order_number: str
    customer_name: Optional[str] = None
    service_type: str
    status: str
    notes: Optional[str] = None
    preferred_pickup_date: Optional[str] = None
    total_amount: float
    completed_date: Optional[str] = None
    is_voided: Optional[bool] = False
    void_reason: Optional[str] = None
    voided_by: Optional[str] = None
    voided_at: Optional[str] = None
    order_items: List[OrderItemResponse] = Field(default_factory=list)
    payment: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class CompleteOrderResponse(BaseModel):
    message: str
    order: OrderResponse
    payment: Dict[str, Any]


class VoidOrderResponse(BaseModel):
    message: str
    order: OrderResponse


class OrderDeleteResponse(BaseModel):
    message: str
