"""Concurrent record retrieval that preserves candidate order."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, List, Optional

from config.settings import settings
from .errors import ItemFetchFailed
from .models.candidates import Candidate, FetchSlot
from .repository import CatalogRepository

logger = logging.getLogger("search.executor")


@dataclass
class FetchReport:
    """Outcome of one fan-out: records in rank order plus what was dropped."""
    records: List[Any] = field(default_factory=list)
    failures: List[ItemFetchFailed] = field(default_factory=list)

    @property
    def dropped(self) -> int:
        return len(self.failures)


class FetchOrchestrator:
    """
    Fetches full records for a candidate list concurrently.

    One unit of work per candidate writes only its own slot. After every
    unit has finished, slots are read back by index, so completion order
    never changes the result order. A failed unit leaves its slot empty
    and the candidate is dropped.
    """

    def __init__(self, repository: CatalogRepository, max_workers: Optional[int] = None):
        self.repository = repository
        self.max_workers = max_workers if max_workers is not None else settings.fetch_max_workers

    def fetch_all(self, candidates: List[Candidate]) -> List[Any]:
        """Return full records for `candidates`, in candidate order."""
        return self.fetch_report(candidates).records

    def fetch_report(self, candidates: List[Candidate]) -> FetchReport:
        if not candidates:
            return FetchReport()

        slots = [FetchSlot(index=i, candidate_id=c.id) for i, c in enumerate(candidates)]
        results: List[Optional[Any]] = [None] * len(slots)
        failures: List[Optional[ItemFetchFailed]] = [None] * len(slots)

        workers = len(slots)
        if self.max_workers:
            workers = min(workers, self.max_workers)

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="search-fetch") as executor:
            future_to_slot = {
                executor.submit(self.repository.fetch_by_id, slot.candidate_id): slot
                for slot in slots
            }

            # Join on every unit, successful or not
            for future in as_completed(future_to_slot):
                slot = future_to_slot[future]
                try:
                    results[slot.index] = future.result()
                except Exception as e:
                    failure = ItemFetchFailed(slot.candidate_id, e)
                    failures[slot.index] = failure
                    logger.warning(str(failure))

        report = FetchReport(
            records=[record for record in results if record is not None],
            failures=[failure for failure in failures if failure is not None],
        )
        logger.debug(
            f"Fetched {len(report.records)}/{len(slots)} records "
            f"({report.dropped} dropped)"
        )
        return report


def fetch_all(repository: CatalogRepository, candidates: List[Candidate]) -> List[Any]:
    """Convenience function to fetch records with a default orchestrator."""
    return FetchOrchestrator(repository).fetch_all(candidates)
