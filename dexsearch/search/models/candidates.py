"""Candidate and fetch bookkeeping models."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class NameEntry:
    """Lightweight listing entry returned by the repository."""
    id: int
    name: str


@dataclass(frozen=True)
class Candidate:
    """
    Ranked reference to a full record, prior to retrieval.

    relevance is the edit distance for name queries and 0 for
    intents whose order comes from a listing or a fixed table.
    """
    id: int
    display_name: Optional[str] = None
    relevance: int = 0


@dataclass(frozen=True)
class FetchSlot:
    """Indexed placeholder used to reassemble fetched records in rank order."""
    index: int
    candidate_id: int
