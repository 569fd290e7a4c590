from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class SiteVisit(SQLModel, table=True):
    __tablename__ = "site_visits"

    id: Optional[int] = Field(default=None, primary_key=True)
    visitor_key: str = Field(index=True)   # anonymous cookie / session id
    path: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
