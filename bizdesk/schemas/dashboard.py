"""Pydantic models for the dashboard endpoint."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class DashboardStats(BaseModel):
    total_products: int
    low_stock_count: int
    active_orders: int
    today_revenue: float
    total_revenue: float


class OrdersByStatus(BaseModel):
    pending: int = 0
    in_progress: int = 0
    completed: int = 0
    cancelled: int = 0


class LowStockItem(BaseModel):
    product_name: Optional[str] = None
    quantity: int
    reorder_level: int


class TopProduct(BaseModel):
    product_name: Optional[str] = None
    total_sold: int


class ServiceRevenue(BaseModel):
    service_type: str
    revenue: float


class DailySales(BaseModel):
    day: int
    label: str
    revenue: float
    orders: int


class WeeklySales(BaseModel):
    week: str = Field(..., description="'Week 1', 'Week 2', ...")
    label: str = Field(..., description="e.g. 'Sep 28-Oct 4'")
    period: str
    revenue: float
    orders: int


class MonthlySales(BaseModel):
    month: int
    label: str
    fullMonth: str
    revenue: float
    orders: int


class DashboardResponse(BaseModel):
    stats: DashboardStats
    orders_by_status: OrdersByStatus
    low_stock_items: List[LowStockItem]
    recent_orders: List[Dict[str, Any]]
    top_products: List[TopProduct]
    revenue_by_service: List[ServiceRevenue]
    daily_sales: List[DailySales]
    weekly_sales: List[WeeklySales]
    monthly_sales: List[MonthlySales]
