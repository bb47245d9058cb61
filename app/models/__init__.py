# app/models/__init__.py

from app.models.product import (
    Product,
    Variant,
    VariantAttribute,
)
from app.models.feed import (
    SpreadsheetRow,
    MatchMethod,
    PriceMatch,
    AIVariant,
    AIProduct,
    AIBatchResult,
)
from app.models.report import (
    ImportReport,
    ImportMethod,
    UnmatchedReason,
)

__all__ = [
    # Catalog
    "Product",
    "Variant",
    "VariantAttribute",
    # Feeds
    "SpreadsheetRow",
    "MatchMethod",
    "PriceMatch",
    "AIVariant",
    "AIProduct",
    "AIBatchResult",
    # Report
    "ImportReport",
    "ImportMethod",
    "UnmatchedReason",
]
