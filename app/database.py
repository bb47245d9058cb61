# app/database.py

import logging
from functools import lru_cache
from typing import Optional

from supabase import create_client, Client

from app.config import get_settings
from app.core.errors import ConfigurationError
from app.models import Product, Variant

settings = get_settings()
logger = logging.getLogger(__name__)

PRODUCTS_TABLE = "products"
VARIANTS_TABLE = "variants"

# Columns managed by the database
_SERVER_FIELDS = {"id", "created_at", "updated_at"}


@lru_cache()
def get_supabase() -> Client:
    """Admin client (bypasses RLS). Created on first use."""
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be configured")
    return create_client(settings.supabase_url, settings.supabase_service_role_key)


# ============================================
# Catalog store backed by Supabase
# ============================================

class SupabaseCatalogStore:
    """Catalog store on the `products` and `variants` tables."""

    def __init__(self, client: Optional[Client] = None):
        self.client = client or get_supabase()

    def mark_all_inactive(self) -> None:
        self.client.table(PRODUCTS_TABLE).update({"active": False}).eq("active", True).execute()

    def get_inactive_slugs(self) -> list[str]:
        response = self.client.table(PRODUCTS_TABLE).select("slug").eq("active", False).execute()
        return [row["slug"] for row in response.data or []]

    def find_product_by_slug(self, slug: str) -> Optional[Product]:
        response = self.client.table(PRODUCTS_TABLE).select("*").eq("slug", slug).limit(1).execute()
        return Product.model_validate(response.data[0]) if response.data else None

    def save_product(self, product: Product) -> Product:
        data = product.model_dump(mode="json", exclude=_SERVER_FIELDS)

        if product.id is None:
            response = self.client.table(PRODUCTS_TABLE).insert(data).execute()
        else:
            response = self.client.table(PRODUCTS_TABLE).update(data).eq("id", product.id).execute()

        if not response.data:
            raise RuntimeError(f"Saving product {product.slug} returned no row")
        return Product.model_validate(response.data[0])

    def list_variants(self, product_id: str) -> list[Variant]:
        response = self.client.table(VARIANTS_TABLE).select("*").eq("product_id", product_id).execute()
        return [Variant.model_validate(row) for row in response.data or []]

    def save_variant(self, variant: Variant) -> Variant:
        data = variant.model_dump(mode="json", exclude=_SERVER_FIELDS)

        if variant.id is None:
            response = self.client.table(VARIANTS_TABLE).insert(data).execute()
        else:
            response = self.client.table(VARIANTS_TABLE).update(data).eq("id", variant.id).execute()

        if not response.data:
            raise RuntimeError(f"Saving variant {variant.product_id}:{variant.color} returned no row")
        return Variant.model_validate(response.data[0])
