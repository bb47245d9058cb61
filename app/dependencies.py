# app/dependencies.py

"""
Shared FastAPI dependencies.

Tests override get_catalog_store to run imports against memory.
"""

from app.core.store import CatalogStore
from app.database import SupabaseCatalogStore


def get_catalog_store() -> CatalogStore:
    """
    Catalog store used by the import endpoints.

    Raises ConfigurationError when Supabase is not configured.
    This is a sync function -- FastAPI auto-runs it in a threadpool.
    """
    return SupabaseCatalogStore()
