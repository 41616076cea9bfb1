"""Aggregate referer classifications over a stream of referers.

Access logs repeat the same referers many times, so results are memoized
per distinct referer string.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from typing import Optional

from cachetools import LRUCache

from refererparser.models import Medium, Referer, SearchReferer
from refererparser.parser import Parser

logger = logging.getLogger(__name__)

# Sentinel value for memoized unclassifiable referers
_NOT_CLASSIFIABLE = object()


class RefererSummary:
    """Counts referers by medium, source and search term.

    Usage:
        summary = RefererSummary(parser, page_host="www.example.com")
        summary.add_all(lines)
        summary.top_sources(5)
    """

    def __init__(
        self,
        parser: Parser,
        page_host: Optional[str] = None,
        internal_domains: Optional[list[str]] = None,
        cache_size: int = 10000,
    ) -> None:
        self.parser = parser
        self.page_host = page_host
        self.internal_domains = internal_domains or []
        self._cache: LRUCache = LRUCache(maxsize=cache_size)

        self.total = 0
        self.not_classifiable = 0
        self.mediums: Counter[Medium] = Counter()
        self.sources: Counter[tuple[Medium, str]] = Counter()
        self.search_terms: Counter[str] = Counter()

    def classify(self, referer: str) -> Optional[Referer]:
        """Classify a referer, using the memo when possible."""
        cached = self._cache.get(referer)
        if cached is not None:
            return None if cached is _NOT_CLASSIFIABLE else cached

        result = self.parser.parse(referer, self.page_host, self.internal_domains)
        self._cache[referer] = _NOT_CLASSIFIABLE if result is None else result
        return result

    def add(self, referer: str) -> Optional[Referer]:
        """Classify a referer and record the result."""
        referer = referer.strip()
        self.total += 1

        result = self.classify(referer)
        if result is None:
            self.not_classifiable += 1
            return None

        self.mediums[result.medium] += 1
        source = getattr(result, "source", None)
        if source:
            self.sources[(result.medium, source)] += 1
        if isinstance(result, SearchReferer) and result.term:
            self.search_terms[result.term.strip().lower()] += 1

        return result

    def add_all(self, referers: Iterable[str]) -> int:
        """Record every non-blank referer.

        Returns:
            Number of referers recorded
        """
        count = 0
        for referer in referers:
            if not referer.strip():
                continue
            self.add(referer)
            count += 1
        logger.debug(f"Summarized {count} referers ({len(self._cache)} distinct cached)")
        return count

    def top_sources(self, n: int = 10) -> list[tuple[Medium, str, int]]:
        return [(medium, source, count) for (medium, source), count in self.sources.most_common(n)]

    def top_search_terms(self, n: int = 10) -> list[tuple[str, int]]:
        return self.search_terms.most_common(n)

    def get_stats(self) -> dict:
        """Get summary statistics as a plain dict."""
        return {
            "total": self.total,
            "not_classifiable": self.not_classifiable,
            "mediums": {medium.value: count for medium, count in self.mediums.most_common()},
            "cache_size": len(self._cache),
        }
