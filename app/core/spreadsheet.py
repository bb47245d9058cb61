# app/core/spreadsheet.py

"""
Row extraction from the stock spreadsheet.

Expected layout per sheet:
    B = product name (or a section header such as "SAMSUNG")
    C = color (or the literal "Color" on header rows)
    D / E = stock descriptor ("Disponible", "Bajo", "Sin Stock", empty)
"""

import logging
import numbers
from io import BytesIO
from typing import Any, Iterator, Optional
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.workbook.workbook import Workbook

from app.core.errors import SpreadsheetError
from app.core.normalizers import normalize_name, strip_color, infer_color
from app.models import SpreadsheetRow

logger = logging.getLogger(__name__)

NAME_COL = 1
COLOR_COL = 2
STOCK_COLS = (3, 4)

# Column B captions of header rows, never a category
COLUMN_LABELS = {
    "modelo", "producto", "productos", "nombre", "descripcion", "descripción",
    "articulo", "artículo", "equipo", "model", "product", "name", "item",
}


def load_workbook_bytes(data: bytes) -> Workbook:
    """Open an uploaded XLSX. Raises SpreadsheetError if it is unreadable."""
    if not data:
        raise SpreadsheetError("Spreadsheet is empty")
    try:
        return load_workbook(filename=BytesIO(data), read_only=True, data_only=True)
    except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError, SyntaxError) as e:
        raise SpreadsheetError(f"Spreadsheet could not be read: {e}") from e


def cell_to_str(value: Any) -> str:
    """Render a cell the way it shows in Excel: 5225.0 -> '5225'."""
    if value is None:
        return ""
    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        if float(value).is_integer():
            return str(int(value))
        return str(value)
    return str(value).strip()


def is_section_title(name: str) -> bool:
    """
    Heuristic for section header rows.

    A non-empty name with no digits at all ("SAMSUNG", "Notebooks") names
    a category; product names always carry a model number or capacity.
    """
    name = name.strip()
    if not name:
        return False
    return not any(ch.isdigit() for ch in name)


def map_stock(signal: str | None) -> Optional[int]:
    """
    Map a stock descriptor to a stock tier.

    Returns None when there is no signal, meaning "keep what is stored".
    """
    s = (signal or "").strip().lower()
    if not s:
        return None
    if "sin" in s:
        return 0
    if "bajo" in s:
        return 2
    return 10


def _cell(row: tuple, idx: int) -> str:
    return cell_to_str(row[idx]) if idx < len(row) else ""


def extract_rows(workbook: Workbook) -> Iterator[SpreadsheetRow]:
    """
    Yield every data row of every sheet, top to bottom.

    Section header rows update the current category instead of producing
    a row. The category resets at the start of each sheet.
    """
    for ws in workbook.worksheets:
        category = ""
        for row_number, row in enumerate(ws.iter_rows(values_only=True), start=1):
            if not row:
                continue

            name = _cell(row, NAME_COL)
            color = _cell(row, COLOR_COL)

            # Header rows: "SAMSUNG | Color | Stock" still names a section,
            # "Modelo | Color | Stock" does not
            if color.lower() == "color":
                if is_section_title(name) and name.strip().lower() not in COLUMN_LABELS:
                    category = name.strip().lower()
                continue

            if is_section_title(name):
                category = name.strip().lower()
                continue

            if not name:
                continue

            base_key = normalize_name(strip_color(name))
            if not base_key:
                logger.debug(f"Skipping row {row_number} of {ws.title}: no product name left after cleanup")
                continue

            stock_signal = next((s for s in (_cell(row, c) for c in STOCK_COLS) if s), "")

            yield SpreadsheetRow(
                sheet=ws.title or "",
                row_number=row_number,
                raw_name=name,
                base_key=base_key,
                color=color or infer_color(name),
                stock_signal=stock_signal,
                stock=map_stock(stock_signal),
                category=category,
            )


def read_spreadsheet(data: bytes) -> list[SpreadsheetRow]:
    """
    Open the workbook and extract all rows up front.

    Any structural problem surfaces here, before the catalog is touched.
    """
    workbook = load_workbook_bytes(data)
    sheet_count = len(workbook.sheetnames)
    try:
        # Sheet XML is parsed lazily, so a broken sheet fails here (ParseError is a SyntaxError)
        rows = list(extract_rows(workbook))
    except (KeyError, ValueError, OSError, SyntaxError) as e:
        raise SpreadsheetError(f"Spreadsheet could not be read: {e}") from e
    finally:
        workbook.close()

    logger.info(f"Extracted {len(rows)} rows from {sheet_count} sheets")
    return rows


def group_products(rows: list[SpreadsheetRow]) -> dict[str, list[str]]:
    """Group rows by base key, keeping distinct colors in order of appearance."""
    groups: dict[str, list[str]] = {}
    for row in rows:
        if not row.base_key:
            continue
        colors = groups.setdefault(row.base_key, [])
        if row.color and row.color not in colors and row.color != row.base_key:
            colors.append(row.color)
    return groups
