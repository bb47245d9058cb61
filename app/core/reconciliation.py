# app/core/reconciliation.py

"""
Catalog import: reconcile the spreadsheet and the price list into the store.

One pass runs these steps in order:

1. Read the spreadsheet (any structural error aborts before step 2)
2. Mark every product inactive
3. Price and upsert each spreadsheet row
4. Create products that only appear in the price list
5. Zero the stock of variants not seen this pass
6. Report products left inactive as deprecated

Products reached in steps 3-4 are reactivated. Whatever stays inactive
is what the suppliers no longer list.
"""

import logging
from collections import Counter
from typing import Optional

from anthropic import AsyncAnthropic

from app.config import get_settings
from app.core.ai_assist import build_product_lines, match_with_ai
from app.core.classification import classify_unmatched
from app.core.matching import PriceMatcher
from app.core.normalizers import comparison_form, infer_brand_model, slugify
from app.core.price_list import infer_category, parse_prices
from app.core.report import ReportBuilder
from app.core.spreadsheet import group_products, map_stock, read_spreadsheet
from app.core.store import CatalogStore
from app.integrations import claude
from app.models import ImportMethod, ImportReport, Product, Variant

settings = get_settings()
logger = logging.getLogger(__name__)

EMPTY_PRICE_LIST_ERROR = "Price list is empty: no product could be priced"


def _check_fx_rate(fx_rate: float) -> None:
    if fx_rate is None or fx_rate <= 0:
        raise ValueError(f"fx_rate must be positive, got {fx_rate}")


def _color_id(color: str) -> str:
    return (color or "").strip().lower()


# ============================================
# Import pass state
# ============================================

class ImportPass:
    """
    Mutable state of one import pass.

    Tracks which products were priced and which colors were seen, so each
    product is counted once and the stock sweep knows what to leave alone.
    """

    def __init__(
        self,
        store: CatalogStore,
        fx_rate: float,
        margin_pct: float,
        method: ImportMethod = "traditional",
    ):
        self.store = store
        self.fx_rate = fx_rate
        self.margin_pct = margin_pct
        self.report = ReportBuilder(method=method)

        self.products: dict[str, Product] = {}        # slug -> product priced this pass
        self.seen_colors: dict[str, set[str]] = {}    # slug -> colors present in the feed
        self.consumed_price_keys: set[str] = set()

    def price_product(self, key: str, usd_price: float, category: str = "") -> Product:
        """
        Create or update the product for a canonical key and reactivate it.

        gross = usd * fx, base = gross * (1 + margin%), both to 2 decimals.
        """
        slug = slugify(key)
        gross_price = round(usd_price * self.fx_rate, 2)
        base_price = round(usd_price * self.fx_rate * (1 + self.margin_pct / 100), 2)

        product = self.products.get(slug)
        if product is not None:
            # Already counted this pass; a later row may still carry a new price
            if product.gross_price != gross_price or product.base_price != base_price:
                product.gross_price = gross_price
                product.base_price = base_price
                product = self.store.save_product(product)
                self.products[slug] = product
            return product

        existing = self.store.find_product_by_slug(slug)

        if existing is None:
            brand, model = infer_brand_model(key)
            product = self.store.save_product(Product(
                slug=slug,
                name=key,
                category=category,
                brand=brand,
                model=model,
                gross_price=gross_price,
                margin_pct=self.margin_pct,
                base_price=base_price,
                active=True,
            ))
            self.report.product_created(slug)
            logger.debug(f"Created product {slug} at {gross_price}")
        else:
            existing.gross_price = gross_price
            existing.margin_pct = self.margin_pct
            existing.base_price = base_price
            existing.active = True
            if not existing.category and category:
                existing.category = category
            product = self.store.save_product(existing)
            self.report.product_updated(slug)

        self.products[slug] = product
        return product

    def upsert_variant(self, product: Product, color: str, stock: Optional[int]) -> Variant:
        """
        Create or update the variant of `product` with this color.

        Colors compare case-insensitively. A None stock keeps what is
        stored (new variants start at 0).
        """
        color = (color or "").strip()
        self.seen_colors.setdefault(product.slug, set()).add(_color_id(color))

        existing = next(
            (v for v in self.store.list_variants(product.id) if _color_id(v.color) == _color_id(color)),
            None,
        )

        if existing is None:
            variant = self.store.save_variant(Variant(
                product_id=product.id,
                color=color,
                stock=stock if stock is not None else 0,
                attributes={"color": color} if color else {},
            ))
            self.report.variant_created(product.slug, color)
            return variant

        if stock is not None:
            existing.stock = stock
        variant = self.store.save_variant(existing)
        self.report.variant_updated(product.slug, existing.color)
        return variant

    def ensure_default_variant(self, product: Product) -> None:
        """Give a product with no variants a colorless one with placeholder stock."""
        if self.store.list_variants(product.id):
            return
        self.store.save_variant(Variant(
            product_id=product.id,
            color="",
            stock=settings.price_only_default_stock,
        ))
        self.report.variant_created(product.slug, "")

    def sweep_stock(self) -> None:
        """
        Zero the stock of variants that were not in this feed.

        Only products with at least one variant seen this pass are swept;
        price-only products keep their variants untouched.
        """
        for slug, colors in self.seen_colors.items():
            product = self.products.get(slug)
            if product is None:
                continue
            for variant in self.store.list_variants(product.id):
                if _color_id(variant.color) in colors or variant.stock == 0:
                    continue
                variant.stock = 0
                self.store.save_variant(variant)
                self.report.variant_zeroed(slug, variant.color)

    def finish(self) -> ImportReport:
        """Record deprecated products and freeze the report."""
        self.report.set_deprecated(self.store.get_inactive_slugs())
        report = self.report.finalize()

        logger.info(
            f"Import ({report.method}) finished in {report.duration_ms}ms: "
            f"{report.created_products} created, {report.updated_products} updated, "
            f"{report.created_variants}/{report.updated_variants}/{report.zeroed_variants} "
            f"variants created/updated/zeroed, {report.unmatched} unmatched, "
            f"{report.deprecated_products} deprecated, match rate {report.match_rate:.0f}%"
        )
        return report


# ============================================
# Deterministic import
# ============================================

def import_catalog(
    spreadsheet: bytes,
    prices_text: str,
    store: CatalogStore,
    fx_rate: float,
    margin_pct: Optional[float] = None,
) -> ImportReport:
    """
    Run one deterministic import pass.

    Raises ValueError for a non-positive fx_rate and SpreadsheetError if
    the workbook cannot be read; the store is untouched in both cases.
    """
    _check_fx_rate(fx_rate)
    if margin_pct is None:
        margin_pct = settings.default_margin_pct

    rows = read_spreadsheet(spreadsheet)
    prices = parse_prices(prices_text)
    matcher = PriceMatcher(prices)

    run = ImportPass(store, fx_rate, margin_pct, method="traditional")
    if not prices:
        logger.warning(EMPTY_PRICE_LIST_ERROR)
        run.report.add_error(EMPTY_PRICE_LIST_ERROR)

    store.mark_all_inactive()

    # Spreadsheet rows
    for row in rows:
        match = matcher.match(row.base_key)

        if not match.matched:
            if row.base_key in run.report.unmatched_reasons:
                reason = run.report.unmatched_reasons[row.base_key]
            else:
                reason = classify_unmatched(row.base_key, prices_text)
            run.report.record_unmatched(row.base_key, reason)
            logger.debug(f"No price for {row.base_key!r} ({row.sheet}:{row.row_number}): {reason}")
            continue

        if match.method != "exact":
            logger.debug(f"{row.base_key!r} priced via {match.method} match on {match.matched_key!r}")

        run.consumed_price_keys.add(match.matched_key)
        product = run.price_product(row.base_key, match.price, row.category)
        run.upsert_variant(product, row.color, row.stock)

    # Price-only entries
    for key, usd_price in prices.items():
        if key in run.consumed_price_keys or slugify(key) in run.products:
            continue
        product = run.price_product(key, usd_price, infer_category(key, prices_text))
        run.ensure_default_variant(product)

    run.sweep_stock()
    return run.finish()


# ============================================
# AI-assisted import
# ============================================

async def import_catalog_with_ai(
    spreadsheet: bytes,
    prices_text: str,
    store: CatalogStore,
    fx_rate: float,
    margin_pct: Optional[float] = None,
    client: Optional[AsyncAnthropic] = None,
) -> ImportReport:
    """
    Run one import pass with prices assigned by Claude.

    All Claude calls complete before the catalog is touched, so a failed
    batch (AIMatchError) leaves the store as it was.
    """
    _check_fx_rate(fx_rate)
    if margin_pct is None:
        margin_pct = settings.default_margin_pct
    owns_client = client is None
    if owns_client:
        client = claude.get_client()

    try:
        rows = read_spreadsheet(spreadsheet)
        groups = group_products(rows)
        results = await match_with_ai(build_product_lines(groups), prices_text, client)
    finally:
        if owns_client:
            await client.close()

    occurrences = Counter(row.base_key for row in rows)
    categories: dict[str, str] = {}
    for row in rows:
        categories.setdefault(row.base_key, row.category)

    run = ImportPass(store, fx_rate, margin_pct, method="ai")
    if not (prices_text or "").strip():
        run.report.add_error(EMPTY_PRICE_LIST_ERROR)

    # Map reported names back onto the names that were sent
    by_form = {comparison_form(key): key for key in groups}
    resolved: set[str] = set()

    store.mark_all_inactive()

    for reported, result in results.items():
        key = reported if reported in groups else by_form.get(comparison_form(reported), reported)
        resolved.add(key)

        if result.usd_price <= 0:
            run.report.record_unmatched(key, "openai_sin_precio", occurrences.get(key, 1))
            continue

        category = categories.get(key) or infer_category(key, prices_text)
        product = run.price_product(key, result.usd_price, category)

        if not result.variants:
            run.ensure_default_variant(product)
            continue

        for variant in result.variants:
            run.upsert_variant(product, variant.color, map_stock(variant.stock))

    for key in groups:
        if key not in resolved:
            logger.warning(f"Claude returned nothing for {key!r}")
            run.report.record_unmatched(key, "openai_sin_precio", occurrences[key])

    run.sweep_stock()
    return run.finish()
