# app/models/feed.py

from typing import Optional, Literal
from pydantic import BaseModel, Field


# ============================================
# Spreadsheet feed
# ============================================

class SpreadsheetRow(BaseModel):
    """One data row of the stock spreadsheet."""

    sheet: str
    row_number: int
    raw_name: str
    base_key: str
    color: str = ""
    stock_signal: str = ""
    stock: Optional[int] = None  # None = no signal, keep existing stock
    category: str = ""


# ============================================
# Price matching
# ============================================

MatchMethod = Literal["exact", "normalized", "partial", "unmatched"]


class PriceMatch(BaseModel):
    """Result of looking up a canonical key in the price map."""

    price: float = 0.0
    method: MatchMethod = "unmatched"
    matched_key: Optional[str] = None

    @property
    def matched(self) -> bool:
        return self.method != "unmatched" and self.price > 0


# ============================================
# AI batch matching
# ============================================

class AIVariant(BaseModel):
    """A color/stock pair reported by the AI matcher."""

    color: str = ""
    capacity: str = ""
    stock: str = ""


class AIProduct(BaseModel):
    """A product as returned by the AI matcher."""

    base_name: str
    usd_price: float = 0.0
    variants: list[AIVariant] = Field(default_factory=list)


class AIBatchResult(BaseModel):
    """Full JSON reply for one batch."""

    products: list[AIProduct] = Field(default_factory=list)
