# app/core/store.py

"""
Catalog Store port.

The import only needs these six operations; how products and variants
are persisted is up to the implementation (see app/database.py).
"""

import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from app.models import Product, Variant


class CatalogStore(Protocol):
    """Storage operations used by an import pass."""

    def mark_all_inactive(self) -> None:
        ...

    def get_inactive_slugs(self) -> list[str]:
        ...

    def find_product_by_slug(self, slug: str) -> Optional[Product]:
        ...

    def save_product(self, product: Product) -> Product:
        """Create or update a product. Returns it with its id set."""
        ...

    def list_variants(self, product_id: str) -> list[Variant]:
        ...

    def save_variant(self, variant: Variant) -> Variant:
        """Create or update a variant. Returns it with its id set."""
        ...


class InMemoryCatalogStore:
    """Dict-backed store, used for tests and dry runs."""

    def __init__(self):
        self.products: dict[str, Product] = {}   # slug -> product
        self.variants: dict[str, Variant] = {}   # id -> variant

    def mark_all_inactive(self) -> None:
        for product in self.products.values():
            product.active = False

    def get_inactive_slugs(self) -> list[str]:
        return [slug for slug, p in self.products.items() if not p.active]

    def find_product_by_slug(self, slug: str) -> Optional[Product]:
        product = self.products.get(slug)
        return product.model_copy() if product else None

    def save_product(self, product: Product) -> Product:
        now = datetime.now(timezone.utc)
        stored = product.model_copy()
        if stored.id is None:
            stored.id = str(uuid.uuid4())
            stored.created_at = now
        stored.updated_at = now
        self.products[stored.slug] = stored
        return stored.model_copy()

    def list_variants(self, product_id: str) -> list[Variant]:
        return [v.model_copy() for v in self.variants.values() if v.product_id == product_id]

    def save_variant(self, variant: Variant) -> Variant:
        now = datetime.now(timezone.utc)
        stored = variant.model_copy()
        if stored.id is None:
            stored.id = str(uuid.uuid4())
            stored.created_at = now
        stored.updated_at = now
        self.variants[stored.id] = stored
        return stored.model_copy()

    # Convenience accessors for callers inspecting the store

    def get_product(self, slug: str) -> Optional[Product]:
        return self.products.get(slug)

    def variants_of(self, slug: str) -> list[Variant]:
        product = self.products.get(slug)
        if product is None:
            return []
        return self.list_variants(product.id)
