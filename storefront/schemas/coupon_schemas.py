from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, timezone
from decimal import Decimal


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    # timestamps are stored as naive UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class CouponCreate(BaseModel):
    code: str = Field(min_length=1)
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    discount_amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    min_order_amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    max_uses: Optional[int] = Field(default=None, gt=0)
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, value):
        return _naive_utc(value)


class CouponUpdate(BaseModel):
    code: str = Field(default=None, min_length=1)
    is_active: bool = None

    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100, decimal_places=2)
    discount_amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    min_order_amount: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    max_uses: Optional[int] = Field(default=None, gt=0)
    expires_at: Optional[datetime] = None

    @field_validator("expires_at")
    @classmethod
    def normalize_expiry(cls, value):
        return _naive_utc(value)


class CouponRead(BaseModel):
    id: int
    code: str
    discount_percentage: Optional[Decimal]
    discount_amount: Optional[Decimal]
    min_order_amount: Optional[Decimal]
    max_uses: Optional[int]
    current_uses: int
    expires_at: Optional[datetime]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CouponValidateRequest(BaseModel):
    code: str
    order_amount: Decimal = Field(ge=0, decimal_places=2)


class CouponValidation(BaseModel):
    valid: bool
    discount: Decimal
    coupon: Optional[CouponRead] = None
