from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
from decimal import Decimal


class CartAddRequest(BaseModel):
    product_id: int
    quantity: int = Field(default=1, gt=0)


class CartUpdateRequest(BaseModel):
    quantity: int = Field(gt=0)


class CartItemRead(BaseModel):
    id: int
    user_id: int
    product_id: int
    quantity: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CartSummary(BaseModel):
    items: List[CartItemRead]
    total: Decimal        # priced from the live catalog
    item_count: int       # sum of quantities
