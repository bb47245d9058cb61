# app/core/report.py

from datetime import datetime, timezone

from app.models import ImportReport, ImportMethod, UnmatchedReason


def variant_key(slug: str, color: str) -> str:
    """Audit key of a variant: 'slug:color'."""
    return f"{slug}:{color.strip()}"


class ReportBuilder:
    """Accumulates the outcome of one import pass."""

    def __init__(self, method: ImportMethod = "traditional"):
        self.method = method
        self.started_at = datetime.now(timezone.utc)

        self.created_product_slugs: list[str] = []
        self.updated_product_slugs: list[str] = []
        self.created_variant_keys: list[str] = []
        self.updated_variant_keys: list[str] = []
        self.zeroed_variant_keys: list[str] = []
        self.deprecated_slugs: list[str] = []

        self.unmatched = 0
        self.unmatched_items: dict[str, int] = {}
        self.unmatched_reasons: dict[str, UnmatchedReason] = {}

        self.errors: list[str] = []

    def product_created(self, slug: str) -> None:
        self.created_product_slugs.append(slug)

    def product_updated(self, slug: str) -> None:
        self.updated_product_slugs.append(slug)

    def variant_created(self, slug: str, color: str) -> None:
        self.created_variant_keys.append(variant_key(slug, color))

    def variant_updated(self, slug: str, color: str) -> None:
        self.updated_variant_keys.append(variant_key(slug, color))

    def variant_zeroed(self, slug: str, color: str) -> None:
        self.zeroed_variant_keys.append(variant_key(slug, color))

    def record_unmatched(self, key: str, reason: UnmatchedReason, occurrences: int = 1) -> None:
        """
        Record rows that got no price.

        Rows are grouped by key; the first reason seen for a key is kept.
        """
        self.unmatched += occurrences
        self.unmatched_items[key] = self.unmatched_items.get(key, 0) + occurrences
        self.unmatched_reasons.setdefault(key, reason)

    def set_deprecated(self, slugs: list[str]) -> None:
        self.deprecated_slugs = sorted(slugs)

    def add_error(self, message: str) -> None:
        self.errors.append(message)

    def finalize(self) -> ImportReport:
        """Freeze the accumulated state into an ImportReport."""
        duration_ms = int((datetime.now(timezone.utc) - self.started_at).total_seconds() * 1000)

        return ImportReport(
            method=self.method,
            timestamp=self.started_at,
            duration_ms=duration_ms,
            created_products=len(self.created_product_slugs),
            updated_products=len(self.updated_product_slugs),
            created_variants=len(self.created_variant_keys),
            updated_variants=len(self.updated_variant_keys),
            zeroed_variants=len(self.zeroed_variant_keys),
            unmatched=self.unmatched,
            deprecated_products=len(self.deprecated_slugs),
            created_product_slugs=list(self.created_product_slugs),
            updated_product_slugs=list(self.updated_product_slugs),
            created_variant_keys=list(self.created_variant_keys),
            updated_variant_keys=list(self.updated_variant_keys),
            zeroed_variant_keys=list(self.zeroed_variant_keys),
            deprecated_slugs=list(self.deprecated_slugs),
            unmatched_items=dict(self.unmatched_items),
            unmatched_reasons=dict(self.unmatched_reasons),
            errors=list(self.errors),
        )
