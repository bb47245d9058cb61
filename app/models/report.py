# app/models/report.py

from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field


# ============================================
# Unmatched reasons
# ============================================

UnmatchedReason = Literal[
    "sin_stock",
    "no_encontrado",
    "formato_diferente",
    "precio_invalido",
    "openai_sin_precio",
]

ImportMethod = Literal["traditional", "ai"]


# ============================================
# Import Report
# ============================================

class ImportReport(BaseModel):
    """Outcome of one import pass. Owned by the caller."""

    method: ImportMethod = "traditional"
    timestamp: datetime
    duration_ms: int = 0

    created_products: int = 0
    updated_products: int = 0
    created_variants: int = 0
    updated_variants: int = 0
    zeroed_variants: int = 0
    unmatched: int = 0
    deprecated_products: int = 0

    created_product_slugs: list[str] = Field(default_factory=list)
    updated_product_slugs: list[str] = Field(default_factory=list)
    created_variant_keys: list[str] = Field(default_factory=list)
    updated_variant_keys: list[str] = Field(default_factory=list)
    zeroed_variant_keys: list[str] = Field(default_factory=list)
    deprecated_slugs: list[str] = Field(default_factory=list)

    unmatched_items: dict[str, int] = Field(default_factory=dict)
    unmatched_reasons: dict[str, UnmatchedReason] = Field(default_factory=dict)

    errors: list[str] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def match_rate(self) -> float:
        """Percentage of processed products that got a price."""
        priced = self.created_products + self.updated_products
        total = priced + len(self.unmatched_items)
        return (priced / total * 100) if total else 0.0
