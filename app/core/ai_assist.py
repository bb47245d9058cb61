# app/core/ai_assist.py

"""
AI-assisted price matching.

Alternative to the deterministic parser + matcher: spreadsheet products
are sent to Claude in fixed-size batches along with the raw price list.
Batches run sequentially; any failure aborts the whole AI path.
"""

import logging
from typing import Optional

from anthropic import AsyncAnthropic

from app.config import get_settings
from app.core.normalizers import normalize_name
from app.integrations import claude
from app.models import AIProduct

settings = get_settings()
logger = logging.getLogger(__name__)

MAX_SAMPLE_COLORS = 3


def build_product_lines(groups: dict[str, list[str]]) -> list[str]:
    """
    Render one compact line per product.

    "Moto G35 (Negro,Verde,Azul...)": at most 3 sample colors, with an
    ellipsis when there are more.
    """
    lines: list[str] = []
    for name, colors in groups.items():
        if not colors:
            lines.append(name)
            continue
        sample = ",".join(colors[:MAX_SAMPLE_COLORS])
        more = "..." if len(colors) > MAX_SAMPLE_COLORS else ""
        lines.append(f"{name} ({sample}{more})")
    return lines


def batched(items: list[str], size: int) -> list[list[str]]:
    """Split items into consecutive batches of at most `size`."""
    if size <= 0:
        raise ValueError("batch size must be positive")
    return [items[i:i + size] for i in range(0, len(items), size)]


async def match_with_ai(
    lines: list[str],
    prices_text: str,
    client: AsyncAnthropic,
    batch_size: Optional[int] = None,
    batch_timeout: Optional[float] = None,
) -> dict[str, AIProduct]:
    """
    Match all product lines, one batch at a time.

    Returns products keyed by their normalized base name. Raises
    AIMatchError on the first failed batch.
    """
    if batch_size is None:
        batch_size = settings.ai_batch_size
    if batch_timeout is None:
        batch_timeout = settings.ai_batch_timeout_seconds

    batches = batched(lines, batch_size)
    logger.info(f"Matching {len(lines)} products with Claude in {len(batches)} batches")

    results: dict[str, AIProduct] = {}

    for number, batch in enumerate(batches, start=1):
        logger.info(f"Batch {number}/{len(batches)}: {len(batch)} products (e.g. {batch[:3]})")

        products = await claude.match_price_batch(client, batch, prices_text, timeout=batch_timeout)

        for product in products:
            key = normalize_name(product.base_name)
            if key:
                results[key] = product

        if len(products) < len(batch):
            logger.warning(
                f"Batch {number}/{len(batches)}: sent {len(batch)} products, "
                f"Claude returned {len(products)}"
            )

    logger.info(f"AI matching finished: {len(results)} products")
    return results
