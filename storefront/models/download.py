from sqlmodel import SQLModel, Field
from sqlalchemy import UniqueConstraint
from typing import Optional
from datetime import datetime


class DownloadGrant(SQLModel, table=True):
    __tablename__ = "downloads"
    __table_args__ = (
        UniqueConstraint("user_id", "product_id", "order_id", name="uq_download_user_product_order"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    product_id: int = Field(foreign_key="products.id")
    order_id: int = Field(foreign_key="orders.id", index=True)

    download_count: int = Field(default=0)
    expires_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=datetime.utcnow)


class RevokedDownloadToken(SQLModel, table=True):
    """Download tokens that failed validation once and must stay dead."""

    __tablename__ = "revoked_download_tokens"

    jti: str = Field(primary_key=True)
    revoked_at: datetime = Field(default_factory=datetime.utcnow)
