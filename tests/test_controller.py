"""
Search session controller: debounce, generation tokens, publishing.
"""
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from dexsearch.search.controller import SearchController
from dexsearch.search.errors import CandidateLookupFailed, ErrorKind
from dexsearch.search.models.query import NameQuery
from dexsearch.search.models.session import SearchState
from dexsearch.search.pipeline import SearchOutcome, SearchPipeline
from dexsearch.search.recent import InMemoryRecentSearchStore, RecentSearches
from dexsearch.search.repository import TransportError

from conftest import FakeRepository, wait_for


class ScriptedPipeline:
    """Pipeline double: per-text gates and errors, one record per text."""

    def __init__(self):
        self.gates = {}
        self.errors = {}
        self.runs = []
        self._lock = threading.Lock()

    def run(self, text):
        with self._lock:
            self.runs.append(text)
        gate = self.gates.get(text)
        if gate is not None:
            gate.wait(timeout=5)
        if text in self.errors:
            raise self.errors[text]
        return SearchOutcome(query=NameQuery(text), records=[f"{text}-record"])


@pytest.fixture
def pipeline():
    return ScriptedPipeline()


@pytest.fixture
def controller(pipeline):
    ctrl = SearchController(pipeline, RecentSearches(InMemoryRecentSearchStore()), debounce_seconds=0.05)
    yield ctrl
    ctrl.close()


# =============================================================================
# Debounce
# =============================================================================

def test_rapid_keystrokes_admit_only_last_text(controller, pipeline):
    for text in ("p", "pi", "pik", "pika", "pikachu"):
        controller.update_query(text)

    assert controller.state == SearchState.DEBOUNCING
    assert wait_for(lambda: controller.results == ["pikachu-record"])
    assert pipeline.runs == ["pikachu"]
    assert controller.state == SearchState.IDLE


def test_nothing_runs_before_quiet_period():
    pipeline = ScriptedPipeline()
    ctrl = SearchController(pipeline, debounce_seconds=5)
    try:
        ctrl.update_query("mew")
        assert ctrl.state == SearchState.DEBOUNCING
        assert pipeline.runs == []
    finally:
        ctrl.close()


def test_empty_text_cancels_pending_and_clears(controller, pipeline):
    controller.submit("mew").result(timeout=3)
    assert controller.results == ["mew-record"]

    controller.update_query("mewtwo")
    controller.update_query("")

    assert controller.state == SearchState.IDLE
    assert controller.results == []
    assert not wait_for(lambda: "mewtwo" in pipeline.runs, timeout=0.2)


def test_duplicate_admission_is_skipped(controller, pipeline):
    controller.update_query("eevee")
    assert wait_for(lambda: controller.results == ["eevee-record"])

    controller.update_query("eeve")
    controller.update_query("eevee")
    assert not wait_for(lambda: len(pipeline.runs) > 1, timeout=0.2)
    assert controller.state == SearchState.IDLE


# =============================================================================
# Staleness
# =============================================================================

def test_stale_result_is_never_published(controller, pipeline):
    pipeline.gates["slow"] = threading.Event()

    slow = controller.submit("slow")
    fast = controller.submit("fast")

    assert fast.result(timeout=3).published
    assert controller.results == ["fast-record"]

    pipeline.gates["slow"].set()
    stale = slow.result(timeout=3)

    assert stale.token < fast.result().token
    assert not stale.published
    assert controller.results == ["fast-record"]
    assert controller.recent_searches == ["fast"]


def test_superseded_queued_queries_never_run(pipeline):
    executor = ThreadPoolExecutor(max_workers=1)
    ctrl = SearchController(pipeline, debounce_seconds=0.05, executor=executor)
    pipeline.gates["a"] = threading.Event()
    try:
        first = ctrl.submit("a")
        assert wait_for(lambda: pipeline.runs == ["a"])

        queued = [ctrl.submit(text) for text in ("ab", "abc", "abcd", "abcde")]
        pipeline.gates["a"].set()

        assert queued[-1].result(timeout=3).published
        assert not any(f.result(timeout=3).published for f in queued[:-1])
        assert not first.result(timeout=3).published
        assert pipeline.runs == ["a", "abcde"]
        assert ctrl.results == ["abcde-record"]
    finally:
        ctrl.close()
        executor.shutdown(wait=False)


def test_is_searching_tracks_current_operation(controller, pipeline):
    gate = threading.Event()
    pipeline.gates["charizard"] = gate
    seen = []
    controller.subscribe(lambda snap: seen.append(snap.is_searching))

    future = controller.submit("charizard")
    assert controller.is_searching
    assert controller.state == SearchState.SEARCHING

    gate.set()
    future.result(timeout=3)
    assert wait_for(lambda: not controller.is_searching)
    assert True in seen and seen[-1] is False


def test_reset_discards_in_flight(controller, pipeline):
    pipeline.gates["dragonite"] = threading.Event()
    future = controller.submit("dragonite")

    controller.reset()
    pipeline.gates["dragonite"].set()

    assert not future.result(timeout=3).published
    assert controller.results == []
    assert controller.snapshot().query == ""


# =============================================================================
# Errors and recent searches
# =============================================================================

def test_lookup_failure_sets_error_and_clears_results(controller, pipeline):
    controller.submit("pikachu").result(timeout=3)
    pipeline.errors["fire"] = CandidateLookupFailed("TYPE", TransportError("down"))

    result = controller.submit("fire").result(timeout=3)

    assert result.published
    assert controller.last_error == ErrorKind.CANDIDATE_LOOKUP_FAILED
    assert controller.results == []
    assert controller.recent_searches == ["pikachu"]


def test_success_clears_previous_error(controller, pipeline):
    pipeline.errors["fire"] = CandidateLookupFailed("TYPE")
    controller.submit("fire").result(timeout=3)
    assert controller.last_error is not None

    controller.submit("mew").result(timeout=3)
    assert controller.last_error is None


def test_unexpected_error_does_not_leave_session_searching(controller, pipeline):
    pipeline.errors["glitch"] = RuntimeError("bug")

    future = controller.submit("glitch")
    with pytest.raises(RuntimeError):
        future.result(timeout=3)

    assert not controller.is_searching
    assert controller.state == SearchState.IDLE


def test_recent_searches_most_recent_first(controller):
    for text in ("Pikachu", "mew", "pikachu"):
        controller.submit(text).result(timeout=3)

    assert controller.recent_searches == ["pikachu", "mew"]

    controller.clear_recent_searches()
    assert controller.recent_searches == []


class BlockingCheckRecent(RecentSearches):
    """Starts a newer search from inside add() and records whether it got through."""

    def __init__(self):
        super().__init__(InMemoryRecentSearchStore())
        self.controller = None
        self.newer_admitted_during_add = []

    def add(self, text):
        if text == "mew":
            newer = threading.Thread(target=self.controller.submit, args=("eevee",))
            newer.start()
            newer.join(timeout=0.1)
            self.newer_admitted_during_add.append(not newer.is_alive())
        super().add(text)


def test_recent_search_is_recorded_before_newer_query_is_admitted(pipeline):
    recent = BlockingCheckRecent()
    ctrl = SearchController(pipeline, recent, debounce_seconds=0.05)
    recent.controller = ctrl
    try:
        ctrl.submit("mew").result(timeout=3)

        assert recent.newer_admitted_during_add == [False]
        assert wait_for(lambda: ctrl.recent_searches == ["eevee", "mew"])
    finally:
        ctrl.close()


def test_listener_receives_snapshots(controller):
    snapshots = []
    unsubscribe = controller.subscribe(snapshots.append)

    controller.submit("mew").result(timeout=3)
    assert wait_for(lambda: any(s.results == ["mew-record"] for s in snapshots))

    unsubscribe()
    count = len(snapshots)
    controller.submit("eevee").result(timeout=3)
    assert len(snapshots) == count


def test_failing_listener_does_not_break_search(controller):
    def broken(snapshot):
        raise ValueError("listener bug")

    controller.subscribe(broken)
    assert controller.submit("mew").result(timeout=3).published


# =============================================================================
# Against the real pipeline
# =============================================================================

def test_debounced_search_over_fake_catalog():
    repo = FakeRepository(delays={25: 0.05, 10080: 0.01})
    ctrl = SearchController.for_repository(repo, InMemoryRecentSearchStore(), debounce_seconds=0.05)
    try:
        ctrl.update_query("pika")
        ctrl.update_query("pikachu")

        assert wait_for(lambda: len(ctrl.results) == 3)
        assert [r.name for r in ctrl.results] == ["pikachu", "pikachu-rock-star", "pichu"]
        assert ctrl.recent_searches == ["pikachu"]
    finally:
        ctrl.close()


def test_catalog_lookup_failure_surfaces_as_error():
    repo = FakeRepository(fail_listing=True)
    ctrl = SearchController(SearchPipeline(repo), debounce_seconds=0.01)
    try:
        result = ctrl.submit("pikachu").result(timeout=3)
        assert result.error == ErrorKind.CANDIDATE_LOOKUP_FAILED
        assert ctrl.last_error == ErrorKind.CANDIDATE_LOOKUP_FAILED
        assert ctrl.recent_searches == []
    finally:
        ctrl.close()


# =============================================================================
# Shutdown
# =============================================================================

def test_closed_controller_ignores_input(pipeline):
    ctrl = SearchController(pipeline, debounce_seconds=0.01)
    ctrl.close()

    ctrl.update_query("mew")
    assert ctrl.state == SearchState.IDLE
    assert not wait_for(lambda: pipeline.runs, timeout=0.1)

    with pytest.raises(RuntimeError):
        ctrl.submit("mew")
