"""Pydantic models for product transaction (stock movement) endpoints."""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel

MovementType = Literal["IN", "OUT"]
Trend = Literal["up", "down", "stable"]


class ProductTransactionResponse(BaseModel):
    transaction_id: int
    product_id: Optional[int] = None
    type: MovementType
    quantity: int
    unit_price: Optional[float] = None
    total_amount: Optional[float] = None
    previous_quantity: Optional[int] = None
    new_quantity: Optional[int] = None
    reference_type: Optional[str] = None
    reference_id: Optional[int] = None
    notes: Optional[str] = None
    user_id: Optional[str] = None
    product: Optional[Dict[str, Any]] = None
    created_at: Optional[str] = None


class ProductTransactionPage(BaseModel):
    data: List[ProductTransactionResponse]
    current_page: int
    per_page: int
    total: int
    last_page: int


class MovementStatistics(BaseModel):
    total_in: int
    total_out: int
    total_adjustments: int
    net_movement: int


class ProductMovementsResponse(BaseModel):
    transactions: List[ProductTransactionResponse]
    statistics: MovementStatistics


class PeriodRange(BaseModel):
    start: str
    end: str


class ProductGrowth(BaseModel):
    product_id: int
    product_name: Optional[str] = None
    current_stock: int
    current_in: int
    current_out: int
    current_net: int
    previous_in: int
    previous_out: int
    previous_net: int
    growth_rate: float
    trend: Trend


class GrowthRatesResponse(BaseModel):
    period: str
    current_period: PeriodRange
    previous_period: PeriodRange
    products: List[ProductGrowth]
