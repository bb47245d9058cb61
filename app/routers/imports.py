# app/routers/imports.py

"""
Catalog import routes.

Runs one import pass from an uploaded spreadsheet and a pasted price list.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from app.config import get_settings
from app.core.errors import AIMatchError, ConfigurationError, SpreadsheetError
from app.core.reconciliation import import_catalog, import_catalog_with_ai
from app.core.store import CatalogStore
from app.dependencies import get_catalog_store
from app.models import ImportReport

settings = get_settings()
logger = logging.getLogger(__name__)
router = APIRouter()

# At most one import pass in flight per process
_import_lock = asyncio.Lock()


# ============================================
# Import Endpoint
# ============================================

@router.post("/imports", response_model=ImportReport)
async def run_import(
    file: UploadFile = File(...),
    prices_text: str = Form(""),
    fx_rate: float = Form(...),
    default_margin_pct: Optional[float] = Form(None),
    use_ai: bool = Form(False),
    store: CatalogStore = Depends(get_catalog_store),
):
    """
    Import the catalog.

    1. Reads the uploaded XLSX (all sheets)
    2. Prices each product from the price list (or with Claude if use_ai)
    3. Upserts products/variants, zeroes missing stock, flags deprecated products
    """
    if _import_lock.locked():
        raise HTTPException(status_code=409, detail="An import is already running")

    async with _import_lock:
        spreadsheet = await file.read()
        logger.info(
            f"Import requested: file={file.filename!r} ({len(spreadsheet)} bytes), "
            f"fx_rate={fx_rate}, margin={default_margin_pct}, use_ai={use_ai}"
        )

        try:
            if use_ai:
                report = await asyncio.wait_for(
                    import_catalog_with_ai(spreadsheet, prices_text, store, fx_rate, default_margin_pct),
                    timeout=settings.ai_import_deadline_seconds,
                )
            else:
                report = await run_in_threadpool(
                    import_catalog, spreadsheet, prices_text, store, fx_rate, default_margin_pct
                )
        except (ValueError, SpreadsheetError) as e:
            raise HTTPException(status_code=400, detail=str(e))
        except ConfigurationError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except AIMatchError as e:
            logger.error(f"AI import failed: {e}")
            raise HTTPException(status_code=502, detail=f"AI matching failed: {e}")
        except asyncio.TimeoutError:
            logger.error(f"AI import exceeded {settings.ai_import_deadline_seconds}s")
            raise HTTPException(status_code=504, detail="AI import timed out")

    return report
