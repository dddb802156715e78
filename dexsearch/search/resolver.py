"""Candidate resolution: turns a classified query into ranked candidates."""

import logging
from typing import Dict, List, Optional

from config.settings import settings
from . import catalog
from .errors import CandidateLookupFailed
from .models.candidates import Candidate, NameEntry
from .models.query import (
    ClassifiedQuery,
    NameQuery,
    TypeQuery,
    GenerationQuery,
    RegionQuery,
    CategoryQuery,
)
from .ranker import NamePoolCache, rank
from .repository import CatalogRepository

logger = logging.getLogger("search.resolver")


class CandidateResolver:
    """
    Produces the ordered candidate list for each intent kind.

    - Name: fuzzy rank against the cached name pool
    - Type: the repository's type listing, in listing order
    - Generation / Region: contiguous id range from the lookup table
    - Category: curated id list

    Only the repository-backed lookups (name pool, type listing) can fail;
    their errors are raised as CandidateLookupFailed.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        name_pool: Optional[NamePoolCache] = None,
        limit: Optional[int] = None,
    ):
        self.repository = repository
        self.name_pool = name_pool or NamePoolCache(repository)
        self.limit = limit or settings.candidate_limit

    def resolve(self, query: ClassifiedQuery) -> List[Candidate]:
        if isinstance(query, NameQuery):
            return self._resolve_name(query)
        if isinstance(query, TypeQuery):
            return self._resolve_type(query)
        if isinstance(query, GenerationQuery):
            return self._from_ids(catalog.generation_ids(query.generation, self.limit))
        if isinstance(query, RegionQuery):
            return self._resolve_region(query)
        if isinstance(query, CategoryQuery):
            return self._from_ids(catalog.category_ids(query.category, self.limit))
        raise TypeError(f"Unsupported query: {query!r}")

    def _resolve_name(self, query: NameQuery) -> List[Candidate]:
        try:
            pool = self.name_pool.get()
        except Exception as e:
            logger.warning(f"Name pool lookup failed: {e}")
            raise CandidateLookupFailed(query.kind.value, e) from e
        return rank(query.text, pool, limit=self.limit)

    def _resolve_type(self, query: TypeQuery) -> List[Candidate]:
        try:
            entries = self.repository.list_by_type(query.type_id)
        except Exception as e:
            logger.warning(f"Type listing failed for '{query.type_id}': {e}")
            raise CandidateLookupFailed(query.kind.value, e) from e
        return [
            Candidate(id=entry.id, display_name=entry.name, relevance=0)
            for entry in entries[:self.limit]
        ]

    def _resolve_region(self, query: RegionQuery) -> List[Candidate]:
        generation = catalog.region_generation(query.region)
        if generation is None:
            logger.info(f"Region '{query.region}' has no generation mapping")
            return []
        return self._from_ids(catalog.generation_ids(generation, self.limit))

    def _from_ids(self, ids: List[int]) -> List[Candidate]:
        names = self._known_names()
        return [Candidate(id=i, display_name=names.get(i), relevance=0) for i in ids[:self.limit]]

    def _known_names(self) -> Dict[int, str]:
        # Label static candidates only when the pool is already loaded
        pool: Optional[List[NameEntry]] = self.name_pool.peek()
        if not pool:
            return {}
        return {entry.id: entry.name for entry in pool}
