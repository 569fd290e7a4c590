from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    slug: Optional[str] = None   # derived from the name when omitted


class CategoryUpdate(BaseModel):
    name: str = Field(default=None, min_length=1)
    description: Optional[str] = None
    slug: str = Field(default=None, min_length=1)
    is_active: bool = None


class CategoryRead(BaseModel):
    id: int
    name: str
    description: Optional[str]
    slug: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
