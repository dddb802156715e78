# Search models
from .query import (
    Query,
    QueryKind,
    Category,
    ClassifiedQuery,
    NameQuery,
    TypeQuery,
    GenerationQuery,
    RegionQuery,
    CategoryQuery,
    describe,
)
from .candidates import NameEntry, Candidate, FetchSlot
from .session import SearchState, SearchResult, SessionSnapshot, SearchSession

__all__ = [
    "Query",
    "QueryKind",
    "Category",
    "ClassifiedQuery",
    "NameQuery",
    "TypeQuery",
    "GenerationQuery",
    "RegionQuery",
    "CategoryQuery",
    "describe",
    "NameEntry",
    "Candidate",
    "FetchSlot",
    "SearchState",
    "SearchResult",
    "SessionSnapshot",
    "SearchSession",
]
