from pydantic import BaseModel
from typing import Optional
from datetime import datetime


class DownloadCreate(BaseModel):
    user_id: int
    product_id: int
    order_id: int


class DownloadRead(BaseModel):
    id: int
    user_id: int
    product_id: int
    order_id: int
    download_count: int
    expires_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class DownloadValidation(BaseModel):
    valid: bool
    download: Optional[DownloadRead] = None


class DownloadTokenResponse(BaseModel):
    token: str
    expires_in: int   # seconds


class TokenValidation(BaseModel):
    valid: bool
    download_id: Optional[int] = None
    user_id: Optional[int] = None


class DownloadLink(BaseModel):
    download_id: int
    download_url: str
    download_count: int
    download_limit: Optional[int]


class DownloadTokenInput(BaseModel):
    token: str
