from pydantic import BaseModel, Field, HttpUrl
from typing import Optional
from datetime import datetime
from decimal import Decimal


class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    category_id: int
    digital_file_url: Optional[HttpUrl] = None
    download_limit: Optional[int] = Field(default=None, gt=0)


class ProductUpdate(BaseModel):
    # non-nullable columns: may be omitted but never sent as null
    name: str = Field(default=None, min_length=1)
    price: Decimal = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    category_id: int = None
    is_active: bool = None

    # nullable columns: explicit null clears the value
    description: Optional[str] = None
    digital_file_url: Optional[HttpUrl] = None
    download_limit: Optional[int] = Field(default=None, gt=0)


class ProductRead(BaseModel):
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    category_id: int
    digital_file_url: Optional[str]
    download_limit: Optional[int]
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
