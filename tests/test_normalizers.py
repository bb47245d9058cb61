# tests/test_normalizers.py

"""
Tests for product name normalization.
"""

import pytest

from app.core.normalizers import (
    normalize_name,
    comparison_form,
    strip_color,
    infer_color,
    slugify,
    infer_brand_model,
)


# ============================================
# Canonical names
# ============================================

class TestNormalizeName:
    """Test the canonical display form."""

    @pytest.mark.parametrize("raw", [
        "Moto G55 8/256GB 5G DS",
        'MacBook Air 13.3" M2 8/256GB',
        "iPad 11 Wi-Fi 128GB (Azul,Rosa)",
        "Watch Serie 10 42mm",
        "  Samsung   Galaxy A16  4 / 128 GB ",
    ])
    def test_idempotent(self, raw):
        """Normalizing twice changes nothing."""
        once = normalize_name(raw)
        assert normalize_name(once) == once

    def test_capacity_spacing_unified(self):
        """256GB and 256 GB end up the same."""
        assert normalize_name("Moto G55 8/256GB 5G DS") == normalize_name("Moto G55 8/256 GB 5G DS")
        assert normalize_name("Moto G55 8/256GB 5G DS") == "Moto G55 8/256 GB 5G DS"

    def test_parenthetical_colors_removed(self):
        assert normalize_name("Moto G35 (Negro,Verde,Azul)") == "Moto G35"

    def test_inch_notation(self):
        assert normalize_name('MacBook Air 13.3" M2') == 'MacBook Air 13" M2'

    def test_wifi_spelling(self):
        assert normalize_name("iPad 11 Wi-Fi 128GB") == "iPad 11 WiFi 128 GB"

    def test_empty(self):
        assert normalize_name(None) == ""
        assert normalize_name("   ") == ""


# ============================================
# Comparison form
# ============================================

class TestComparisonForm:
    """Test the aggressive form used for matching."""

    def test_connectivity_suffix_ignored(self):
        """'Moto G35 4G' compares equal to 'Moto G35'."""
        assert comparison_form("Moto G35 4G") == comparison_form("Moto G35")

    def test_dual_sim_suffix_ignored(self):
        assert comparison_form("Moto G55 8/256 GB 5G DS") == "moto g55 8/256 gb"

    def test_case_insensitive(self):
        assert comparison_form("IPHONE 16 128 GB") == comparison_form("iPhone 16 128 GB")

    def test_ipad_size_chip_order(self):
        """Size and chip can come in either order."""
        assert comparison_form("iPad 11 A16 128 GB") == comparison_form("iPad A16 11 128 GB")


# ============================================
# Colors
# ============================================

class TestColors:
    """Test color stripping and inference."""

    def test_strip_single_color(self):
        assert strip_color("Moto G35 Negro") == "Moto G35"

    def test_strip_two_word_color(self):
        """A two-word color goes away entirely."""
        assert strip_color("iPhone 17 Azul Oscuro") == "iPhone 17"
        assert strip_color("MacBook Air 13 M4 Sky Blue") == "MacBook Air 13 M4"

    def test_no_color_left_alone(self):
        assert strip_color("Moto G55 8/256 GB 5G DS") == "Moto G55 8/256 GB 5G DS"

    def test_lone_color_word_kept(self):
        """A name that is only a color has nothing to strip from."""
        assert strip_color("Negro") == "Negro"

    def test_infer_prefers_multi_word_color(self):
        assert infer_color("iPhone 17 Azul Oscuro") == "Azul Oscuro"

    def test_infer_single_color(self):
        assert infer_color("Moto G35 negro") == "Negro"

    def test_infer_none(self):
        assert infer_color("Moto G55 8/256 GB") == ""


# ============================================
# Identity helpers
# ============================================

class TestIdentity:
    """Test slug and brand/model helpers."""

    def test_slugify(self):
        assert slugify("Moto G35 4G") == "moto-g35-4g"

    def test_brand_model(self):
        assert infer_brand_model("Samsung Galaxy A16") == ("Samsung", "Galaxy A16")

    def test_brand_model_empty(self):
        assert infer_brand_model("") == ("", "")


# ============================================
# Run Tests
# ============================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
