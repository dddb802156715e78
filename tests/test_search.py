"""
Search and recent-search endpoints
"""
import pytest
from fastapi.testclient import TestClient

from dexsearch.main import create_app
from dexsearch.search.intent import QueryClassifier
from dexsearch.search.pipeline import SearchPipeline
from dexsearch.search.recent import InMemoryRecentSearchStore, RecentSearches

from conftest import FakeRepository


@pytest.fixture
def client():
    return TestClient(create_app(
        pipeline=SearchPipeline(FakeRepository(failures={172})),
        recent=RecentSearches(InMemoryRecentSearchStore()),
    ))


def test_search_returns_ranked_records(client):
    """Name search returns records in relevance order"""
    response = client.get("/search?q=pikachu")
    assert response.status_code == 200

    data = response.json()
    assert data["intent"] == {"kind": "NAME", "value": "pikachu"}
    assert [r["name"] for r in data["results"]] == ["pikachu", "pikachu-rock-star"]
    assert data["count"] == 2
    assert data["dropped"] == 1
    assert data["error"] is None


def test_search_reports_intent(client):
    """Generation search is classified and resolved from the id table"""
    data = client.get("/search?q=gen 1").json()
    assert data["intent"] == {"kind": "GENERATION", "value": 1}
    assert [r["id"] for r in data["results"]] == list(range(1, 21))


def test_search_requires_query(client):
    """Empty query is a validation error"""
    response = client.get("/search?q=")
    assert response.status_code == 422


def test_lookup_failure_is_reported_in_body():
    """A failed type listing is a recoverable error, not a 5xx"""
    client = TestClient(create_app(
        pipeline=SearchPipeline(FakeRepository(fail_types=True)),
        recent=RecentSearches(InMemoryRecentSearchStore()),
    ))
    response = client.get("/search?q=fire")
    assert response.status_code == 200

    data = response.json()
    assert data["error"] == "candidate_lookup_failed"
    assert data["intent"] == {"kind": "TYPE", "value": "fire"}
    assert data["results"] == []
    assert client.get("/recent").json()["searches"] == []


def test_recent_searches_endpoints(client):
    """Successful searches are remembered most-recent-first"""
    client.get("/search?q=mew")
    client.get("/search?q=eevee")
    client.get("/search?q=MEW")

    assert client.get("/recent").json()["searches"] == ["MEW", "eevee"]

    response = client.delete("/recent")
    assert response.json()["searches"] == []
    assert client.get("/recent").json()["searches"] == []


class CountingClassifier(QueryClassifier):
    def __init__(self):
        self.calls = 0

    def classify(self, text):
        self.calls += 1
        return super().classify(text)


def test_failed_search_classifies_once():
    """The intent in an error response comes from the pipeline run"""
    classifier = CountingClassifier()
    client = TestClient(create_app(
        pipeline=SearchPipeline(FakeRepository(fail_types=True), classifier=classifier),
        recent=RecentSearches(InMemoryRecentSearchStore()),
    ))
    data = client.get("/search?q=fire").json()

    assert data["intent"] == {"kind": "TYPE", "value": "fire"}
    assert classifier.calls == 1
