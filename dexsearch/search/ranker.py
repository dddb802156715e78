"""Fuzzy name ranking against the cached name pool."""

import logging
import threading
from typing import Iterable, List, Optional

from config.settings import settings
from .models.candidates import Candidate, NameEntry
from .repository import CatalogRepository

logger = logging.getLogger("search.ranker")

CANDIDATE_LIMIT = 20
MIN_DISTANCE_THRESHOLD = 2


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character edits turning `a` into `b`.

    Full (|a|+1) x (|b|+1) matrix; an empty side costs the length of the other.
    """
    m, n = len(a), len(b)
    if m == 0:
        return n
    if n == 0:
        return m

    matrix = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        matrix[i][0] = i
    for j in range(n + 1):
        matrix[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            matrix[i][j] = min(
                matrix[i - 1][j] + 1,         # deletion
                matrix[i][j - 1] + 1,         # insertion
                matrix[i - 1][j - 1] + cost,  # substitution
            )

    return matrix[m][n]


def acceptance_threshold(query: str) -> int:
    return max(MIN_DISTANCE_THRESHOLD, len(query) // 3)


def rank(query: str, pool: Iterable[NameEntry], limit: int = CANDIDATE_LIMIT) -> List[Candidate]:
    """
    Rank pool entries by relevance to `query`.

    An entry is kept when its edit distance is within the threshold or its
    name contains the query. Order: exact match, then prefix matches, then
    ascending distance, then ascending id.
    """
    needle = query.lower()
    threshold = acceptance_threshold(query)

    scored = []
    for entry in pool:
        name = entry.name.lower()
        distance = levenshtein_distance(needle, name)
        if distance <= threshold or needle in name:
            sort_key = (name != needle, not name.startswith(needle), distance, entry.id)
            scored.append((sort_key, entry, distance))

    scored.sort(key=lambda item: item[0])

    return [
        Candidate(id=entry.id, display_name=entry.name, relevance=distance)
        for _, entry, distance in scored[:limit]
    ]


class NamePoolCache:
    """
    Read-only cache of the name listing used for fuzzy ranking.

    The listing is fetched once on first use. A failed fetch is not cached,
    so the next name search retries it.
    """

    def __init__(self, repository: CatalogRepository, pool_size: Optional[int] = None):
        self._repository = repository
        self._pool_size = pool_size or settings.name_pool_size
        self._pool: Optional[List[NameEntry]] = None
        self._lock = threading.Lock()

    def get(self) -> List[NameEntry]:
        """Return the pool, fetching it if needed. Repository errors propagate."""
        pool = self._pool
        if pool is not None:
            return pool

        with self._lock:
            if self._pool is None:
                logger.info(f"Loading name pool (limit={self._pool_size})")
                entries = self._repository.list_names(limit=self._pool_size, offset=0)
                self._pool = list(entries)
                logger.info(f"Name pool loaded: {len(self._pool)} entries")
            return self._pool

    def peek(self) -> Optional[List[NameEntry]]:
        """Return the pool only if it is already loaded."""
        return self._pool

    def invalidate(self) -> None:
        with self._lock:
            self._pool = None

    @property
    def is_loaded(self) -> bool:
        return self._pool is not None
