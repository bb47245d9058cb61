# app/core/classification.py

"""
Classification of products that could not be priced.

Gives the admin a hint of what to fix in the source data.
"""

from app.core.normalizers import normalize_name
from app.models import UnmatchedReason

# How far after the name to look for "sin stock" (about one line)
SIN_STOCK_WINDOW = 150


def _searchable_text(prices_text: str) -> str:
    """Price text with each line normalized the same way keys are."""
    return "\n".join(normalize_name(line) for line in prices_text.splitlines()).lower()


def classify_unmatched(key: str, prices_text: str | None) -> UnmatchedReason:
    """
    Explain why a canonical key got no price.

    First applicable wins:
    - sin_stock: listed, but flagged out of stock
    - no_encontrado: not listed at all
    - formato_diferente: only the first two words are listed
    - precio_invalido: listed without a usable price
    """
    text = _searchable_text(prices_text or "")
    needle = key.lower()

    idx = text.find(needle) if needle else -1
    if idx < 0:
        parts = needle.split()
        if len(parts) >= 2 and f"{parts[0]} {parts[1]}" in text:
            return "formato_diferente"
        return "no_encontrado"

    snippet = text[idx:idx + SIN_STOCK_WINDOW]
    if "sin stock" in snippet:
        return "sin_stock"

    return "precio_invalido"
