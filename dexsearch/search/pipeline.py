"""
Search pipeline: one logical search operation.

1. Classify intent
2. Resolve candidates (fuzzy rank for names, tables/listings otherwise)
3. Fetch full records concurrently, in candidate order
4. Log the query if notable
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .errors import CandidateLookupFailed
from .executor import FetchOrchestrator
from .intent import QueryClassifier
from .logger import log_query
from .models.candidates import Candidate
from .models.query import ClassifiedQuery
from .ranker import NamePoolCache
from .repository import CatalogRepository
from .resolver import CandidateResolver

logger = logging.getLogger("search.pipeline")


@dataclass
class SearchOutcome:
    """Everything one search operation produced."""
    query: ClassifiedQuery
    candidates: List[Candidate] = field(default_factory=list)
    records: List[Any] = field(default_factory=list)
    dropped: int = 0
    latency_ms: int = 0


class SearchPipeline:
    """
    Runs classify -> resolve -> fetch for a single query text.

    Collaborators are injected; the name pool cache is shared across runs
    so the listing is fetched only once.
    """

    def __init__(
        self,
        repository: CatalogRepository,
        name_pool: Optional[NamePoolCache] = None,
        classifier: Optional[QueryClassifier] = None,
        resolver: Optional[CandidateResolver] = None,
        orchestrator: Optional[FetchOrchestrator] = None,
    ):
        self.repository = repository
        self.name_pool = name_pool or NamePoolCache(repository)
        self.classifier = classifier or QueryClassifier()
        self.resolver = resolver or CandidateResolver(repository, self.name_pool)
        self.orchestrator = orchestrator or FetchOrchestrator(repository)

    def run(self, text: str) -> SearchOutcome:
        """
        Execute a search for `text`.

        Raises:
            CandidateLookupFailed: the candidate list could not be built
        """
        start_time = time.time()
        classified = self.classifier.classify(text)

        try:
            candidates = self.resolver.resolve(classified)
        except CandidateLookupFailed as e:
            e.query = classified
            latency_ms = int((time.time() - start_time) * 1000)
            log_query(
                query=text,
                kind=classified.kind.value,
                candidates=0,
                results=0,
                dropped=0,
                error_type=e.kind.value,
                latency_ms=latency_ms,
            )
            raise

        report = self.orchestrator.fetch_report(candidates)
        latency_ms = int((time.time() - start_time) * 1000)

        log_query(
            query=text,
            kind=classified.kind.value,
            candidates=len(candidates),
            results=len(report.records),
            dropped=report.dropped,
            error_type=None,
            latency_ms=latency_ms,
        )
        logger.debug(
            f"{classified.kind.value} search: {len(candidates)} candidates, "
            f"{len(report.records)} records in {latency_ms}ms"
        )

        return SearchOutcome(
            query=classified,
            candidates=candidates,
            records=report.records,
            dropped=report.dropped,
            latency_ms=latency_ms,
        )
