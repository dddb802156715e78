# Creature search core
# Raw text → classify intent → resolve candidates → concurrent ordered fetch → publish

from .intent import QueryClassifier, classify
from .ranker import levenshtein_distance, rank, NamePoolCache
from .resolver import CandidateResolver
from .executor import FetchOrchestrator, fetch_all
from .pipeline import SearchPipeline, SearchOutcome
from .controller import SearchController
from .recent import RecentSearches, InMemoryRecentSearchStore, SqlRecentSearchStore
from .errors import ErrorKind, CandidateLookupFailed

__all__ = [
    "QueryClassifier",
    "classify",
    "levenshtein_distance",
    "rank",
    "NamePoolCache",
    "CandidateResolver",
    "FetchOrchestrator",
    "fetch_all",
    "SearchPipeline",
    "SearchOutcome",
    "SearchController",
    "RecentSearches",
    "InMemoryRecentSearchStore",
    "SqlRecentSearchStore",
    "ErrorKind",
    "CandidateLookupFailed",
]
