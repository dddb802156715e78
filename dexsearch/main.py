"""
dexsearch - FastAPI application
Hosts the creature search pipeline out of process
"""
from typing import Optional

from fastapi import FastAPI, Query

from dexsearch.schemas import IntentOut, RecentSearchesOut, SearchResponse
from dexsearch.search.errors import CandidateLookupFailed
from dexsearch.search.models.query import describe
from dexsearch.search.pipeline import SearchPipeline
from dexsearch.search.recent import RecentSearches

# Version tracking
APP_VERSION = "v0.1.0"
APP_NAME = "dexsearch"


def create_app(
    pipeline: Optional[SearchPipeline] = None,
    recent: Optional[RecentSearches] = None,
) -> FastAPI:
    """
    Build the HTTP app.

    Without arguments the app searches live PokeAPI data and keeps recent
    searches in the configured database.
    """
    if pipeline is None:
        from dexsearch.api_client import PokeApiClient
        pipeline = SearchPipeline(PokeApiClient())
    if recent is None:
        from dexsearch.db import init_db
        from dexsearch.search.recent import SqlRecentSearchStore
        init_db()
        recent = RecentSearches(SqlRecentSearchStore())

    app = FastAPI(
        title=APP_NAME,
        description="Fuzzy, intent-aware creature search",
        version=APP_VERSION,
    )

    @app.get("/health")
    def health():
        return {"status": "ok", "version": APP_VERSION}

    @app.get("/search", response_model=SearchResponse)
    def search(q: str = Query(..., min_length=1, max_length=100)):
        """
        Run one search.

        Each request is a single admitted query, so no debounce applies.
        A failed candidate lookup is reported in the body with no results.
        """
        try:
            outcome = pipeline.run(q)
        except CandidateLookupFailed as e:
            return SearchResponse(
                query=q,
                intent=IntentOut(**describe(e.query)),
                results=[],
                count=0,
                error=e.kind.value,
            )

        recent.add(q)
        return SearchResponse(
            query=q,
            intent=IntentOut(**describe(outcome.query)),
            results=outcome.records,
            count=len(outcome.records),
            dropped=outcome.dropped,
            latency_ms=outcome.latency_ms,
        )

    @app.get("/recent", response_model=RecentSearchesOut)
    def get_recent():
        return RecentSearchesOut(searches=recent.items)

    @app.delete("/recent", response_model=RecentSearchesOut)
    def clear_recent():
        recent.clear()
        return RecentSearchesOut(searches=[])

    return app
