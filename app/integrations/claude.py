# app/integrations/claude.py

"""
Claude AI integration for batch price matching.

Sends a batch of spreadsheet product names together with the raw price
list and asks Claude to assign a USD price and variants to each one.
"""

import json
import logging
from typing import Optional

from anthropic import AsyncAnthropic, APIError
from pydantic import ValidationError

from app.config import get_settings
from app.core.errors import AIMatchError, ConfigurationError
from app.models import AIBatchResult, AIProduct

settings = get_settings()
logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert at matching retail product names across supplier lists. "
    "Always answer with valid JSON that includes EVERY product you were given."
)


def get_client(api_key: Optional[str] = None) -> AsyncAnthropic:
    """
    Build a Claude client.

    Raises ConfigurationError when no API key is configured, so the AI
    path fails before any work is done.
    """
    key = api_key or settings.anthropic_api_key
    if not key:
        raise ConfigurationError("ANTHROPIC_API_KEY is not configured")
    return AsyncAnthropic(api_key=key)


def build_prompt(products: list[str], prices_text: str) -> str:
    """Prompt for one batch of product lines."""
    product_list = "\n".join(products)

    return f"""Match these products with their USD prices.

PRICES:
{prices_text}

PRODUCTS TO MATCH:
{product_list}

Return JSON with ALL the products:
{{"products":[{{"base_name":"product name","usd_price":price_number,"variants":[{{"color":"color name","stock":"disponible"}}]}}]}}

Rules:
- If a product says "Sin Stock" in the price list -> usd_price: 0
- Ignore minor differences: "256GB" = "256 GB", "5G DS" = "5G"
- If there is NO price -> usd_price: 0
- Use the colors listed in parentheses as variants
- Include ALL products in the answer"""


def parse_batch_reply(text: str) -> list[AIProduct]:
    """
    Parse Claude's reply into products.

    Raises AIMatchError if the reply is not the expected JSON.
    """
    # Clean up potential markdown formatting
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
    if text.endswith("```"):
        text = text[:-3]
    text = text.strip()

    try:
        result = AIBatchResult.model_validate(json.loads(text))
    except (json.JSONDecodeError, ValidationError) as e:
        raise AIMatchError(f"Claude returned an unparseable reply: {e}") from e

    return result.products


async def match_price_batch(
    client: AsyncAnthropic,
    products: list[str],
    prices_text: str,
    timeout: float,
) -> list[AIProduct]:
    """
    Match one batch of product lines against the price list.

    The request is deterministic (temperature 0) and bounded by `timeout`.
    """
    try:
        response = await client.messages.create(
            model=settings.ai_model,
            max_tokens=settings.ai_max_tokens,
            temperature=0,
            system=SYSTEM_PROMPT,
            messages=[{"role": "user", "content": build_prompt(products, prices_text)}],
            timeout=timeout,
        )
    except APIError as e:
        raise AIMatchError(f"Claude API error: {e}") from e

    text = "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    )
    if not text.strip():
        raise AIMatchError("Claude returned an empty reply")

    return parse_batch_reply(text)
