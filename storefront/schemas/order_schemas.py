from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from storefront.constants.order_status import OrderStatus, PaymentStatus


class OrderItemInput(BaseModel):
    product_id: int
    quantity: int = Field(gt=0)
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)


class OrderCreate(BaseModel):
    items: List[OrderItemInput] = Field(min_length=1)
    coupon_code: Optional[str] = None


class OrderRead(BaseModel):
    id: int
    user_id: int
    total_amount: Decimal
    discount_amount: Decimal
    final_amount: Decimal
    coupon_id: Optional[int]
    status: OrderStatus
    payment_status: PaymentStatus
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderItemRead(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: Decimal
    created_at: datetime

    class Config:
        from_attributes = True


class OrderDetail(OrderRead):
    items: List[OrderItemRead]


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus
