from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class Coupon(SQLModel, table=True):
    __tablename__ = "coupons"

    id: Optional[int] = Field(default=None, primary_key=True)
    code: str = Field(index=True, unique=True)

    # exactly one of the two discount modes is set
    discount_percentage: Optional[Decimal] = Field(default=None, max_digits=5, decimal_places=2)
    discount_amount: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)

    min_order_amount: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    max_uses: Optional[int] = None
    current_uses: int = Field(default=0)
    expires_at: Optional[datetime] = None
    is_active: bool = Field(default=True)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
