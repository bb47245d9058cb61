# tests/conftest.py

"""
Shared fixtures: in-memory workbooks and catalog store.
"""

from io import BytesIO

import pytest
from openpyxl import Workbook

from app.core.store import InMemoryCatalogStore
from app.models import Product, Variant


def build_workbook(sheets: dict[str, list[tuple]]) -> bytes:
    """
    Build XLSX bytes. Each row tuple fills columns B, C, D... in order
    (column A is left empty, like the supplier files).
    """
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets.items():
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append([None, *row])

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def seed_product(
    store: InMemoryCatalogStore,
    name: str,
    slug: str,
    variants: dict[str, int] | None = None,
    gross_price: float = 100.0,
) -> Product:
    """Put an active product (and its variants) in the store."""
    product = store.save_product(Product(slug=slug, name=name, gross_price=gross_price, base_price=gross_price))
    for color, stock in (variants or {}).items():
        store.save_variant(Variant(product_id=product.id, color=color, stock=stock))
    return product


@pytest.fixture
def make_workbook():
    return build_workbook


@pytest.fixture
def store():
    return InMemoryCatalogStore()


@pytest.fixture
def seed(store):
    """seed(name, slug, variants={color: stock}) -> Product"""
    def _seed(name: str, slug: str, variants: dict[str, int] | None = None, **kwargs) -> Product:
        return seed_product(store, name, slug, variants, **kwargs)
    return _seed
