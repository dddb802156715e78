"""Search error taxonomy.

Only CandidateLookupFailed reaches the user-visible error state. The other
failures degrade the result (fewer records, no recent-search entry) and are
logged where they happen.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """User-visible error kinds exposed to presentation."""
    CANDIDATE_LOOKUP_FAILED = "candidate_lookup_failed"


class SearchError(Exception):
    """Base class for search failures."""
    pass


class ClassificationAmbiguous(SearchError):
    """Reserved: classification always resolves through the name fallback."""
    pass


class CandidateLookupFailed(SearchError):
    """The step that builds the candidate id list failed."""

    kind = ErrorKind.CANDIDATE_LOOKUP_FAILED

    def __init__(self, query_kind: str, cause: Optional[BaseException] = None):
        self.query_kind = query_kind
        self.cause = cause
        # Set by the pipeline once the failing query is known
        self.query = None
        super().__init__(f"Candidate lookup failed for {query_kind} query: {cause}")


class ItemFetchFailed(SearchError):
    """A single candidate could not be retrieved. Recovered by dropping it."""

    def __init__(self, candidate_id: int, cause: Optional[BaseException] = None):
        self.candidate_id = candidate_id
        self.cause = cause
        super().__init__(f"Fetch failed for candidate {candidate_id}: {cause}")


class PersistenceFailed(SearchError):
    """Recent-search load or save failed."""
    pass
