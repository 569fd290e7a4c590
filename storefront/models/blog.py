from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class BlogPost(SQLModel, table=True):
    __tablename__ = "blog_posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    content: str
    excerpt: Optional[str] = None
    slug: str = Field(index=True, unique=True)
    author_id: int = Field(foreign_key="users.id")
    is_published: bool = Field(default=False)   # drafts until published
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
