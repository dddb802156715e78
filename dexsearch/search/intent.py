"""Intent classification for search queries."""

import re
from typing import List, Optional

from .catalog import TYPE_KEYWORDS, REGION_NAMES, CATEGORY_KEYWORDS
from .models.query import (
    ClassifiedQuery,
    NameQuery,
    TypeQuery,
    GenerationQuery,
    RegionQuery,
    CategoryQuery,
)


_TOKEN_RE = re.compile(r"[a-z0-9]+")
_GENERATION_DIGITS = "123456789"


class QueryClassifier:
    """
    Maps raw text to exactly one intent.

    Rules are evaluated in a fixed order and the first match wins:
    type, generation, region, category, then name. A text naming several
    intents ("fire legendary") resolves to the earliest rule.
    """

    def classify(self, text: str) -> ClassifiedQuery:
        stripped = (text or "").strip()
        lowered = stripped.lower()
        tokens = _TOKEN_RE.findall(lowered)

        for rule in (
            self._match_type,
            self._match_generation,
            self._match_region,
            self._match_category,
        ):
            result = rule(lowered, tokens)
            if result is not None:
                return result

        return NameQuery(stripped)

    def _match_type(self, lowered: str, tokens: List[str]) -> Optional[ClassifiedQuery]:
        token_set = set(tokens)
        for type_id in TYPE_KEYWORDS:
            if type_id in token_set:
                return TypeQuery(type_id)
        return None

    def _match_generation(self, lowered: str, tokens: List[str]) -> Optional[ClassifiedQuery]:
        # "generation" contains "gen"
        if "gen" not in lowered:
            return None
        for digit in _GENERATION_DIGITS:
            if digit in lowered:
                return GenerationQuery(int(digit))
        return None

    def _match_region(self, lowered: str, tokens: List[str]) -> Optional[ClassifiedQuery]:
        for region in REGION_NAMES:
            if region in lowered:
                return RegionQuery(region)
        return None

    def _match_category(self, lowered: str, tokens: List[str]) -> Optional[ClassifiedQuery]:
        for keywords, category in CATEGORY_KEYWORDS:
            if any(keyword in lowered for keyword in keywords):
                return CategoryQuery(category)
        return None


_default_classifier = QueryClassifier()


def classify(text: str) -> ClassifiedQuery:
    """Convenience function to classify a query with the default rules."""
    return _default_classifier.classify(text)
