from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal


class DashboardStats(BaseModel):
    total_categories: int
    total_products: int
    total_customers: int
    total_orders: int
    total_revenue: Decimal
    pending_orders: int


class DailyVisitorData(BaseModel):
    date: str
    visitors: int


class OrderOverview(BaseModel):
    id: int
    user_name: str
    total_amount: Decimal
    final_amount: Decimal
    status: str
    payment_status: str
    created_at: datetime


class TopProduct(BaseModel):
    product_name: str
    quantity: int
    revenue: Decimal


class SalesReport(BaseModel):
    total_sales: Decimal
    total_orders: int
    avg_order_value: Decimal
    top_products: List[TopProduct]


class VisitCreate(BaseModel):
    visitor_key: str = Field(min_length=1)
    path: Optional[str] = None
