# app/core/price_list.py

"""
Parsing of the free-form USD price list.

Lines look like "Moto G55 8/256 GB 5G DS ..... $255" or
"iPhone 17 256 GB   Sin Stock". Lines without a price and without digits
act as section headers ("CELULARES", "NOTEBOOKS").
"""

import re
from typing import Optional

from app.core.normalizers import normalize_name

_PRICE_RE = re.compile(r"\$\s*([0-9][0-9.,]*)")
_EXCLUSION_MARKERS = ("sin stock", "sin precio")
_NAME_TRIM = "-–:.|·•*\t "

# Keyword -> category, first hit wins
CATEGORY_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("macbook", "notebook", "laptop", "nb "), "notebooks"),
    (("ipad", "tablet", "galaxy tab", "redmi pad", "xiaomi pad"), "tablets"),
    (("watch", "smartband", "mi band"), "smartwatch"),
    (("airpods", "auricular", "buds", "jbl", "headphone", "earbuds", "parlante", "speaker"), "audio"),
    (("playstation", "ps5", "ps4", "xbox", "nintendo", "joystick", "dualsense"), "gaming"),
    (("pencil", "magsafe", "cargador", "charger", "funda", "cable"), "accesorios"),
    (("iphone",), "iphone"),
    (("samsung", "galaxy"), "samsung"),
    (("moto ", "motorola"), "moto"),
    (("xiaomi", "redmi", "poco"), "xiaomi"),
]
DEFAULT_CATEGORY = "otros"


def is_excluded_line(line: str) -> bool:
    """True for lines explicitly marked out of stock or without price."""
    lowered = line.lower()
    return any(marker in lowered for marker in _EXCLUSION_MARKERS)


def parse_amount(raw: str) -> Optional[float]:
    """
    Parse a price token such as "1,299" or "1,299.50".

    Commas are thousands separators. Returns None if unparseable.
    """
    cleaned = raw.replace(",", "").rstrip(".")
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_prices(text: str | None) -> dict[str, float]:
    """
    Turn the price list into a map of canonical name -> USD price.

    Excluded lines ("Sin Stock", "Sin precio") never make it into the map.
    Later lines overwrite earlier ones with the same key.
    """
    prices: dict[str, float] = {}
    if not text or not text.strip():
        return prices

    for line in text.splitlines():
        line = line.strip()
        if not line or is_excluded_line(line):
            continue

        match = _PRICE_RE.search(line)
        if not match:
            continue

        usd = parse_amount(match.group(1))
        name = _PRICE_RE.sub("", line).strip(_NAME_TRIM)
        key = normalize_name(name)

        if key and usd is not None and usd > 0:
            prices[key] = usd

    return prices


# ============================================
# Category inference for price-only entries
# ============================================

def _is_section_line(line: str) -> bool:
    if not line or _PRICE_RE.search(line) or is_excluded_line(line):
        return False
    return not any(ch.isdigit() for ch in line)


def find_section(name: str, text: str | None) -> Optional[str]:
    """
    Return the section header (lower-cased) under which `name` is listed.

    Returns None when the name is not found or appears before any header.
    """
    if not text or not name:
        return None

    key = normalize_name(name).lower()
    section: Optional[str] = None

    for line in text.splitlines():
        line = line.strip()
        if _is_section_line(line):
            section = line.strip(_NAME_TRIM).lower()
            continue
        if section and key and key in normalize_name(line).lower():
            return section

    return None


def infer_category_from_keywords(name: str) -> str:
    """Guess a category from well-known words in the product name."""
    lowered = f"{name.lower()} "
    for keywords, category in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return DEFAULT_CATEGORY


def infer_category(name: str, text: str | None) -> str:
    """Category for a product that only exists in the price list."""
    return find_section(name, text) or infer_category_from_keywords(name)
