# app/core/matching.py

"""
Price lookup for spreadsheet products.

Finds the USD price of a canonical key in the price map using three tiers,
first hit wins:
1. Exact key lookup
2. Comparison-form equality (suffixes, casing and punctuation ignored)
3. Keyword overlap on the first tokens of both names
"""

import re
from difflib import SequenceMatcher

from app.core.normalizers import comparison_form
from app.models import PriceMatch

SIGNATURE_TOKENS = 3
MIN_OVERLAP = 2
MIN_SIGNATURE_LENGTH = 8

_TRAILING_NUMBER_RE = re.compile(r"(\d+)\D*$")


def _signature(tokens: list[str]) -> tuple[list[str], str]:
    head = tokens[:SIGNATURE_TOKENS]
    return head, " ".join(head)


def _has_digit(token: str) -> bool:
    return any(ch.isdigit() for ch in token)


def _trailing_number(token: str) -> str:
    """'4/128' -> '128', 'a16' -> '16', 'pro' -> ''."""
    match = _TRAILING_NUMBER_RE.search(token)
    return match.group(1) if match else ""


def _has_number_conflict(query: list[str], candidate: list[str]) -> bool:
    """
    True when both signatures carry a numbered token (model, capacity)
    the other lacks.

    Tokens ending in the same number are compatible, so "4/128" agrees
    with "128" while "watch serie 10" still cannot borrow the price of
    "watch serie 11".
    """
    query_only = {t for t in query if _has_digit(t)} - set(candidate)
    candidate_only = {t for t in candidate if _has_digit(t)} - set(query)

    query_numbers = {_trailing_number(t) for t in query_only}
    candidate_numbers = {_trailing_number(t) for t in candidate_only}
    query_only = {t for t in query_only if _trailing_number(t) not in candidate_numbers}
    candidate_only = {t for t in candidate_only if _trailing_number(t) not in query_numbers}

    return bool(query_only) and bool(candidate_only)


def _common_length(a: str, b: str) -> int:
    match = SequenceMatcher(None, a, b, autojunk=False).find_longest_match(0, len(a), 0, len(b))
    return match.size


class PriceMatcher:
    """
    Matcher bound to one price map.

    Comparison forms of the price keys are computed once, so a whole
    import pass can reuse the same instance.
    """

    def __init__(self, prices: dict[str, float]):
        self.prices = prices
        self._forms: list[tuple[str, str, list[str]]] = []
        for key in prices:
            form = comparison_form(key)
            self._forms.append((key, form, form.split()))

    def match(self, key: str) -> PriceMatch:
        if not key or not self.prices:
            return PriceMatch()

        # ============================================
        # Tier 1: Exact
        # ============================================
        price = self.prices.get(key)
        if price:
            return PriceMatch(price=price, method="exact", matched_key=key)

        # ============================================
        # Tier 2: Normalized
        # ============================================
        query = comparison_form(key)
        for price_key, form, _ in self._forms:
            if form == query:
                return PriceMatch(price=self.prices[price_key], method="normalized", matched_key=price_key)

        # ============================================
        # Tier 3: Keyword overlap
        # ============================================
        best = self._best_partial(query)
        if best is not None:
            return PriceMatch(price=self.prices[best], method="partial", matched_key=best)

        return PriceMatch()

    def _best_partial(self, query: str) -> str | None:
        """
        Best keyword-overlap candidate, or None.

        Ties on overlap go to the longest common substring of the two
        comparison forms, then to price-list order.
        """
        query_tokens, query_sig = _signature(query.split())
        if len(query_sig) <= MIN_SIGNATURE_LENGTH:
            return None
        query_set = set(query_tokens)

        best_key = None
        best_rank = (0, 0)

        for price_key, form, tokens in self._forms:
            cand_tokens, cand_sig = _signature(tokens)
            if len(cand_sig) <= MIN_SIGNATURE_LENGTH:
                continue

            overlap = sum(1 for t in cand_tokens if t in query_set)
            if overlap < MIN_OVERLAP:
                continue
            if _has_number_conflict(query_tokens, cand_tokens):
                continue

            rank = (overlap, _common_length(query, form))
            if rank > best_rank:
                best_key, best_rank = price_key, rank

        return best_key


def match_price(key: str, prices: dict[str, float]) -> PriceMatch:
    """Match a single key. Prefer PriceMatcher when matching many keys."""
    return PriceMatcher(prices).match(key)
