"""
Shared fixtures: an in-process catalog with latency and failure injection.
"""
import threading
import time
from typing import Dict, Iterable, List, Optional

import pytest

from dexsearch.schemas import CreatureRecord
from dexsearch.search.models.candidates import NameEntry
from dexsearch.search.repository import (
    CatalogRepository,
    RecordNotFound,
    TransportError,
)


DEFAULT_NAMES = [
    NameEntry(1, "bulbasaur"),
    NameEntry(4, "charmander"),
    NameEntry(5, "charmeleon"),
    NameEntry(6, "charizard"),
    NameEntry(7, "squirtle"),
    NameEntry(25, "pikachu"),
    NameEntry(26, "raichu"),
    NameEntry(133, "eevee"),
    NameEntry(149, "dragonite"),
    NameEntry(150, "mewtwo"),
    NameEntry(151, "mew"),
    NameEntry(172, "pichu"),
    NameEntry(10080, "pikachu-rock-star"),
]


class FakeRepository(CatalogRepository):
    """
    Catalog double.

    - delays: id -> seconds to sleep before answering
    - failures: ids whose fetch raises TransportError
    - blockers: id -> Event the fetch waits on before answering
    """

    def __init__(
        self,
        names: Optional[List[NameEntry]] = None,
        delays: Optional[Dict[int, float]] = None,
        failures: Iterable[int] = (),
        types: Optional[Dict[str, List[NameEntry]]] = None,
        fail_listing: bool = False,
        fail_types: bool = False,
    ):
        self.names = list(DEFAULT_NAMES if names is None else names)
        self.delays = dict(delays or {})
        self.failures = set(failures)
        self.types = dict(types or {})
        self.fail_listing = fail_listing
        self.fail_types = fail_types
        self.blockers: Dict[int, threading.Event] = {}

        self._lock = threading.Lock()
        self.fetched: List[int] = []
        self.completed: List[int] = []
        self.list_calls = 0

    def list_names(self, limit: int, offset: int = 0) -> List[NameEntry]:
        with self._lock:
            self.list_calls += 1
        if self.fail_listing:
            raise TransportError("listing unavailable")
        return self.names[offset:offset + limit]

    def fetch_by_id(self, record_id: int) -> CreatureRecord:
        with self._lock:
            self.fetched.append(record_id)

        blocker = self.blockers.get(record_id)
        if blocker is not None:
            blocker.wait(timeout=5)
        if record_id in self.delays:
            time.sleep(self.delays[record_id])

        with self._lock:
            self.completed.append(record_id)

        if record_id in self.failures:
            raise TransportError(f"boom {record_id}")

        name = next((e.name for e in self.names if e.id == record_id), None)
        if name is None and record_id > 5000:
            raise RecordNotFound(f"no record {record_id}")
        return CreatureRecord(id=record_id, name=name or f"creature-{record_id}")

    def list_by_type(self, type_id: str) -> List[NameEntry]:
        if self.fail_types:
            raise TransportError("type listing unavailable")
        return list(self.types.get(type_id, []))


@pytest.fixture
def repository():
    return FakeRepository()


def wait_for(predicate, timeout: float = 3.0, interval: float = 0.01) -> bool:
    """Poll until predicate() is true or the timeout elapses."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()
