# app/core/normalizers.py

"""
Product name normalization.

Both feeds spell the same product differently ("256GB" vs "256 GB",
"Wifi" vs "WiFi", trailing colors, "(Negro,Blanco...)" annotations).
Everything here is a pure string -> string function.
"""

import re

# ============================================
# Patterns
# ============================================

_PARENS_RE = re.compile(r"\s*\([^)]*\)\s*")
_WS_RE = re.compile(r"\s+")

# 13.3" / 13,3 " / 13' -> 13"
_INCH_RE = re.compile(r"(\d+)(?:[.,]\d+)?\s*[\"'”″]")

# 256GB -> 256 GB (units must not run into more letters)
_UNIT_RE = re.compile(r"(\d)(GB|TB|MHz|mm)(?![A-Za-z])", re.IGNORECASE)

# 12/512GB, 12 / 512 GB -> 12/512 GB
_DUAL_CAPACITY_RE = re.compile(r"(\d+)\s*/\s*(\d+)\s*(GB|TB)(?![A-Za-z])", re.IGNORECASE)

_WIFI_RE = re.compile(r"\bwi-?fi\b", re.IGNORECASE)

# Order matters: most specific first
COMPARISON_SUFFIXES = [" 5g ds", " 4g ds", " 5g", " 4g", " ds", " wifi", " wi-fi", " lte"]

# "ipad 11 a16" -> "ipad a16 11"
_IPAD_ORDER_RE = re.compile(
    r"\b(ipad(?: air| pro| mini)?) (\d{1,2}(?:\.\d)?) ((?:a|m)\d{1,2}(?: pro)?)\b"
)


# ============================================
# Color vocabulary
# ============================================

# Words that are a color on their own
COLOR_WORDS = {
    "negro", "black", "blanco", "white", "azul", "blue", "rosa", "pink",
    "amarillo", "yellow", "verde", "green", "silver", "plata", "starlight",
    "midnight", "purple", "púrpura", "morado", "violeta", "lavender", "lavanda",
    "gray", "grey", "gris", "oro", "gold", "dorado", "red", "rojo", "orange",
    "naranja", "coral", "arena", "sand", "celeste", "teal", "mint", "menta",
    "graphite", "grafito", "cream", "crema", "natural", "titanium", "titanio",
    "ultramarine", "beige", "marrón", "brown",
}

# Words that only name a color next to another color word
# ("Azul Oscuro", "Space Gray", "Deep Blue", "Sage Green")
COLOR_MODIFIERS = {
    "space", "deep", "dark", "light", "oscuro", "claro", "cosmic", "pearl",
    "perlado", "sage", "mist", "sky", "rose", "jet", "desert", "cloud",
}

# Display names for color inference, multi-word first
KNOWN_COLORS = [
    "Space Gray", "Space Black", "Sage Green", "Mist Blue", "Deep Blue",
    "Cosmic Orange", "Azul Oscuro", "Rose Gold", "Desert Titanium",
    "Natural Titanium", "Negro", "Black", "Blanco", "White", "Azul", "Blue",
    "Rosa", "Pink", "Amarillo", "Yellow", "Verde", "Green", "Silver",
    "Starlight", "Midnight", "Purple", "Natural", "Lavender", "Gold", "Red",
    "Rojo", "Gris", "Gray",
]


# ============================================
# Canonical names
# ============================================

def collapse_whitespace(s: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return _WS_RE.sub(" ", s).strip()


def normalize_name(raw: str | None) -> str:
    """
    Canonical display form of a product name.

    Handles:
    - Multi-color annotations in parentheses
    - Inch notation (13.3" -> 13")
    - Missing space before capacity units (256GB -> 256 GB)
    - WiFi spelling

    Casing is preserved; the result is idempotent.
    """
    if not raw:
        return ""

    s = raw.replace("\u00a0", " ")
    s = _PARENS_RE.sub(" ", s)
    s = _INCH_RE.sub(r'\1"', s)
    s = collapse_whitespace(s)
    s = _UNIT_RE.sub(r"\1 \2", s)
    s = _DUAL_CAPACITY_RE.sub(r"\1/\2 \3", s)
    s = _WIFI_RE.sub("WiFi", s)
    return collapse_whitespace(s)


def comparison_form(name: str | None) -> str:
    """
    Aggressive form used only for matching.

    Lower-cased, connectivity suffixes ("5G DS", "WiFi", "LTE") and
    punctuation removed, iPad size/chip order unified.
    """
    if not name:
        return ""

    s = name.lower().replace("\u00a0", " ")
    s = _PARENS_RE.sub(" ", s)
    s = collapse_whitespace(s)

    for suffix in COMPARISON_SUFFIXES:
        if s.endswith(suffix):
            s = s[: -len(suffix)]

    s = s.replace('"', "").replace("+", " ")
    s = collapse_whitespace(s)

    if "ipad" in s:
        s = _IPAD_ORDER_RE.sub(r"\1 \3 \2", s)

    return s


def strip_color(name: str | None) -> str:
    """
    Remove a trailing color from a display name.

    "Moto G35 Negro" -> "Moto G35"
    "iPhone 17 Azul Oscuro" -> "iPhone 17"
    """
    if not name:
        return ""

    s = collapse_whitespace(_PARENS_RE.sub(" ", name))
    parts = s.split(" ")
    if len(parts) < 2:
        return s

    vocabulary = COLOR_WORDS | COLOR_MODIFIERS

    # Two-word phrases first, otherwise "Azul Oscuro" would only lose "Oscuro"
    if len(parts) >= 3:
        first, second = parts[-2].lower(), parts[-1].lower()
        if first in vocabulary and second in vocabulary and (first in COLOR_WORDS or second in COLOR_WORDS):
            return " ".join(parts[:-2])

    if parts[-1].lower() in COLOR_WORDS:
        return " ".join(parts[:-1])

    return s


def infer_color(name: str | None) -> str:
    """Find a known color mentioned in a raw name. Returns "" if none."""
    if not name:
        return ""

    lowered = name.lower()
    for color in KNOWN_COLORS:
        if re.search(rf"\b{re.escape(color.lower())}\b", lowered):
            return color
    return ""


# ============================================
# Identity helpers
# ============================================

def slugify(name: str) -> str:
    """Slug of a canonical name: lower-case, spaces to hyphens."""
    return collapse_whitespace(name).lower().replace(" ", "-")


def infer_brand_model(name: str) -> tuple[str, str]:
    """
    Split a canonical name into (brand, model).

    The first word is taken as the brand.
    """
    parts = collapse_whitespace(name).split(" ")
    if not parts or not parts[0]:
        return "", ""
    return parts[0], " ".join(parts[1:])
