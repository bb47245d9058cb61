# app/core/__init__.py

from app.core.errors import (
    CatalogImportError,
    SpreadsheetError,
    ConfigurationError,
    AIMatchError,
)
from app.core.normalizers import (
    normalize_name,
    comparison_form,
    strip_color,
    infer_color,
    slugify,
)
from app.core.price_list import parse_prices, infer_category
from app.core.spreadsheet import read_spreadsheet, group_products, map_stock
from app.core.matching import PriceMatcher, match_price
from app.core.classification import classify_unmatched
from app.core.report import ReportBuilder
from app.core.store import CatalogStore, InMemoryCatalogStore
from app.core.reconciliation import import_catalog, import_catalog_with_ai

__all__ = [
    "CatalogImportError",
    "SpreadsheetError",
    "ConfigurationError",
    "AIMatchError",
    "normalize_name",
    "comparison_form",
    "strip_color",
    "infer_color",
    "slugify",
    "parse_prices",
    "infer_category",
    "read_spreadsheet",
    "group_products",
    "map_stock",
    "PriceMatcher",
    "match_price",
    "classify_unmatched",
    "ReportBuilder",
    "CatalogStore",
    "InMemoryCatalogStore",
    "import_catalog",
    "import_catalog_with_ai",
]
