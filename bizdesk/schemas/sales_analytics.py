"""
Pydantic models for sales analytics endpoints.

Period labels: daily 'YYYY-MM-DD', monthly 'YYYY-MM', yearly 'YYYY'.
"""

from typing import List, Literal
from pydantic import BaseModel

Period = Literal["daily", "monthly", "yearly"]
Trend = Literal["up", "down", "stable"]


class PeriodSales(BaseModel):
    date: str
    total_sales: float
    total_orders: int


class SalesAnalyticsResponse(BaseModel):
    period: Period
    date: str
    current: PeriodSales
    previous: PeriodSales
    growth_rate: float
    trend: Trend


class DailyComparison(BaseModel):
    today: PeriodSales
    yesterday: PeriodSales
    growth_rate: float
    trend: Trend


class PeriodComparison(BaseModel):
    current: PeriodSales
    previous: PeriodSales
    growth_rate: float
    trend: Trend


class SalesOverviewResponse(BaseModel):
    daily: DailyComparison
    monthly: PeriodComparison
    yearly: PeriodComparison


class SalesSummaryRow(BaseModel):
    date: str
    period_type: Period
    total_sales: float
    total_orders: int
    previous_period_sales: float
    growth_rate: float


class SalesSummaryUpdateResponse(BaseModel):
    message: str
    summaries: List[SalesSummaryRow]
