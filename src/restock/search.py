"""Fuzzy product search over the household catalog."""

import re
from collections.abc import Iterable

from rapidfuzz import fuzz, process

from .matcher import normalize_name
from .models import MatchCandidate, Product

DEFAULT_THRESHOLD = 0.3
MIN_QUERY_LENGTH = 2

_QUANTITY_SUFFIX = re.compile(r"\s+\d+[xX]?\s*$")
_ANNOTATION_SUFFIX = re.compile(r"\s*\([^)]*\)\s*$")


def clean_query(query: str) -> str:
    """Strip trailing quantities and annotations, e.g. "Bananen 12x" -> "Bananen"."""
    trimmed = query.strip()
    cleaned = _QUANTITY_SUFFIX.sub("", trimmed).strip()
    cleaned = _ANNOTATION_SUFFIX.sub("", cleaned).strip()
    return cleaned or trimmed


class ProductSearchIndex:
    """Ranks catalog products against free text.

    Scores follow the convention the matcher expects: 0.0 is identical and
    1.0 is unrelated. Products scoring above ``threshold`` are left out.
    """

    def __init__(self, products: Iterable[Product], threshold: float = DEFAULT_THRESHOLD):
        self.products = {product.id: product for product in products}
        self.threshold = threshold

    def search(self, query: str, limit: int | None = None) -> list[MatchCandidate]:
        """Search products by name.

        Args:
            query: Free text typed by the user
            limit: Maximum number of candidates

        Returns:
            Candidates ordered best first
        """
        if not query or len(query.strip()) < MIN_QUERY_LENGTH:
            return []

        choices = {product_id: product.name for product_id, product in self.products.items()}
        results = process.extract(
            clean_query(query),
            choices,
            scorer=fuzz.WRatio,
            processor=normalize_name,
            limit=None,
            score_cutoff=(1 - self.threshold) * 100,
        )

        candidates = [
            MatchCandidate(name=name, score=round(1 - ratio / 100, 4), product_id=product_id)
            for name, ratio, product_id in results
        ]
        candidates.sort(key=lambda c: (c.score, c.name.lower()))
        if limit is not None:
            candidates = candidates[:limit]
        return candidates
