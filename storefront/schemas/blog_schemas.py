from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class BlogPostCreate(BaseModel):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    slug: Optional[str] = None   # derived from the title when omitted


class BlogPostUpdate(BaseModel):
    title: str = Field(default=None, min_length=1)
    content: str = Field(default=None, min_length=1)
    slug: str = Field(default=None, min_length=1)
    is_published: bool = None
    excerpt: Optional[str] = None


class BlogPostRead(BaseModel):
    id: int
    title: str
    content: str
    excerpt: Optional[str]
    slug: str
    author_id: int
    is_published: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
