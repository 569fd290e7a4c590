from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from storefront.constants.order_status import OrderStatus, PaymentStatus
from storefront.models.order_item import OrderItem


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)

    total_amount: Decimal = Field(max_digits=10, decimal_places=2)
    discount_amount: Decimal = Field(default=Decimal("0.00"), max_digits=10, decimal_places=2)
    final_amount: Decimal = Field(max_digits=10, decimal_places=2)
    coupon_id: Optional[int] = Field(default=None, foreign_key="coupons.id")

    status: OrderStatus = Field(default=OrderStatus.pending, index=True)
    payment_status: PaymentStatus = Field(default=PaymentStatus.pending, index=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["OrderItem"] = Relationship(back_populates="order")

    @property
    def is_fulfilled(self) -> bool:
        return (
            self.status == OrderStatus.completed
            and self.payment_status == PaymentStatus.completed
        )
