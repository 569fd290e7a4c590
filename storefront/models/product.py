from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, TYPE_CHECKING
from datetime import datetime
from decimal import Decimal

if TYPE_CHECKING:
    from .category import Category


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    price: Decimal = Field(max_digits=10, decimal_places=2)
    category_id: int = Field(foreign_key="categories.id", index=True)

    # digital delivery: a product is downloadable only when it carries a file URL
    digital_file_url: Optional[str] = None
    download_limit: Optional[int] = None   # None = unlimited downloads

    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    category: Optional["Category"] = Relationship(back_populates="products")

    @property
    def is_digital(self) -> bool:
        return bool(self.digital_file_url)
