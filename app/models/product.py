# app/models/product.py

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field


# ============================================
# Catalog entities
# ============================================

# Recognized variant attribute keys. Anything else is rejected so the
# attribute map cannot turn into an open schema.
VariantAttribute = Literal["color", "capacity"]


class Product(BaseModel):
    """A catalog product, identified by its slug."""

    id: Optional[str] = None
    slug: str
    name: str
    category: str = ""
    brand: str = ""
    model: str = ""

    gross_price: float = 0.0
    margin_pct: float = 0.0
    base_price: float = 0.0

    active: bool = True

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class Variant(BaseModel):
    """A purchasable color/attribute instance of a product."""

    id: Optional[str] = None
    product_id: str
    color: str = ""
    stock: int = Field(default=0, ge=0)

    # Assigned outside the import
    sku: Optional[str] = None
    ean: Optional[str] = None

    attributes: dict[VariantAttribute, str] = Field(default_factory=dict)

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
