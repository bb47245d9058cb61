# tests/test_spreadsheet.py

"""
Tests for spreadsheet row extraction.
"""

import zipfile
from io import BytesIO

import pytest

from app.core.errors import SpreadsheetError
from app.core.spreadsheet import (
    read_spreadsheet,
    group_products,
    map_stock,
    is_section_title,
    cell_to_str,
)


def truncate_member(data: bytes, member: str) -> bytes:
    """Rewrite an XLSX with one zip member cut in half."""
    out = BytesIO()
    with zipfile.ZipFile(BytesIO(data)) as src, zipfile.ZipFile(out, "w") as dst:
        for item in src.infolist():
            content = src.read(item.filename)
            if item.filename == member:
                content = content[:len(content) // 2]
            dst.writestr(item, content)
    return out.getvalue()


# ============================================
# Stock mapping
# ============================================

class TestStockMapping:
    """Test stock descriptor -> stock tier."""

    @pytest.mark.parametrize("signal, expected", [
        ("Sin Stock", 0),
        ("SIN STOCK", 0),
        ("Bajo", 2),
        ("Stock bajo", 2),
        ("Disponible", 10),
        ("Consultar", 10),
        ("", None),
        (None, None),
        ("   ", None),
    ])
    def test_map_stock(self, signal, expected):
        assert map_stock(signal) == expected


class TestCells:
    """Test cell helpers."""

    def test_section_title(self):
        assert is_section_title("SAMSUNG")
        assert is_section_title("Notebooks Apple")
        assert not is_section_title("Moto G35")
        assert not is_section_title("")

    def test_numeric_cell(self):
        assert cell_to_str(5225.0) == "5225"
        assert cell_to_str(12.5) == "12.5"
        assert cell_to_str(None) == ""
        assert cell_to_str("  Negro ") == "Negro"


# ============================================
# Row extraction
# ============================================

class TestReadSpreadsheet:
    """Test reading uploaded workbooks."""

    def test_rows_and_sections(self, make_workbook):
        data = make_workbook({
            "Celulares": [
                ("Modelo", "Color", "Stock"),
                ("MOTOROLA",),
                ("Moto G35 4G", "Negro", "Disponible"),
                ("Moto G35 4G", "Verde", "Bajo"),
                ("SAMSUNG",),
                ("Samsung Galaxy A16 4/128GB", "Azul", None, "Sin Stock"),
            ],
        })

        rows = read_spreadsheet(data)

        assert [(r.base_key, r.color, r.stock, r.category) for r in rows] == [
            ("Moto G35 4G", "Negro", 10, "motorola"),
            ("Moto G35 4G", "Verde", 2, "motorola"),
            ("Samsung Galaxy A16 4/128 GB", "Azul", 0, "samsung"),
        ]
        assert rows[0].sheet == "Celulares"
        assert rows[0].row_number == 3

    def test_header_row_skipped_before_section_check(self, make_workbook):
        """'Modelo | Color' is a header, not a category."""
        data = make_workbook({"Hoja1": [
            ("Modelo", "Color", "Stock"),
            ("Moto G35 4G", "Negro", "Disponible"),
        ]})

        rows = read_spreadsheet(data)

        assert len(rows) == 1
        assert rows[0].category == ""

    def test_section_name_on_header_row(self, make_workbook):
        """'SAMSUNG | Color | Stock' sets the category and yields no row."""
        data = make_workbook({"Hoja1": [
            ("SAMSUNG", "Color", "Stock"),
            ("Galaxy A16 4/128GB", "Azul", "Disponible"),
            ("Producto", "Color", "Stock"),
            ("Galaxy A26 8/256GB", "Negro", "Disponible"),
        ]})

        rows = read_spreadsheet(data)

        assert [(r.base_key, r.category) for r in rows] == [
            ("Galaxy A16 4/128 GB", "samsung"),
            ("Galaxy A26 8/256 GB", "samsung"),
        ]

    def test_empty_stock_is_no_signal(self, make_workbook):
        data = make_workbook({"Hoja1": [("Moto G35 4G", "Negro")]})

        row = read_spreadsheet(data)[0]

        assert row.stock is None
        assert row.stock_signal == ""

    def test_color_taken_from_name(self, make_workbook):
        """With no color cell, a color in the name is used and stripped from the key."""
        data = make_workbook({"Hoja1": [("iPhone 17 256GB Azul Oscuro", None, "Disponible")]})

        row = read_spreadsheet(data)[0]

        assert row.base_key == "iPhone 17 256 GB"
        assert row.color == "Azul Oscuro"

    def test_all_sheets_read(self, make_workbook):
        data = make_workbook({
            "Celulares": [("APPLE",), ("iPhone 16 128GB", "Negro", "Disponible")],
            "Tablets": [("iPad 11 A16 128GB", "Azul", "Disponible")],
        })

        rows = read_spreadsheet(data)

        assert [r.sheet for r in rows] == ["Celulares", "Tablets"]
        # Category resets per sheet
        assert rows[1].category == ""

    def test_unreadable_file(self):
        with pytest.raises(SpreadsheetError):
            read_spreadsheet(b"this is not a workbook")

    def test_broken_sheet_xml(self, make_workbook):
        """A valid zip whose sheet XML is cut short is still a SpreadsheetError."""
        data = make_workbook({"Hoja1": [
            ("Moto G35 4G", "Negro", "Disponible"),
            ("Moto G35 4G", "Verde", "Bajo"),
            ("Moto G55 8/256GB 5G DS", "Azul", "Disponible"),
        ]})

        with pytest.raises(SpreadsheetError):
            read_spreadsheet(truncate_member(data, "xl/worksheets/sheet1.xml"))

    def test_empty_upload(self):
        with pytest.raises(SpreadsheetError):
            read_spreadsheet(b"")


class TestGroupProducts:
    """Test grouping rows by product."""

    def test_colors_grouped_in_order(self, make_workbook):
        data = make_workbook({"Hoja1": [
            ("Moto G35 4G", "Negro", "Disponible"),
            ("Moto G35 4G", "Verde", "Disponible"),
            ("Moto G35 4G", "Negro", "Bajo"),
            ("Moto G55 8/256GB 5G DS", None, "Disponible"),
        ]})

        groups = group_products(read_spreadsheet(data))

        assert groups == {
            "Moto G35 4G": ["Negro", "Verde"],
            "Moto G55 8/256 GB 5G DS": [],
        }


# ============================================
# Run Tests
# ============================================

if __name__ == "__main__":
    pytest.main([__file__, "-v"])
