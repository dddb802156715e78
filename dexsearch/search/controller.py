"""Search session controller: debounced input, last-query-wins publishing."""

import dataclasses
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional

from config.settings import settings
from .errors import CandidateLookupFailed, ErrorKind
from .models.query import Query
from .models.session import SearchResult, SearchSession, SearchState, SessionSnapshot
from .pipeline import SearchPipeline
from .recent import RecentSearches
from .repository import CatalogRepository, RecentSearchStore

logger = logging.getLogger("search.controller")

Listener = Callable[[SessionSnapshot], None]


class SearchController:
    """
    Owns the live query stream of one search UI instance.

    Flow:
    - update_query() restarts a debounce timer on every keystroke
    - when the timer expires the text is admitted under a new generation token
      and the pipeline runs on a worker thread
    - a finished operation is published only if its token is still current;
      older operations finish but their results are dropped on arrival

    All session mutation happens under one lock, so the session behaves as
    if it were driven from a single thread of control.
    """

    def __init__(
        self,
        pipeline: SearchPipeline,
        recent: Optional[RecentSearches] = None,
        debounce_seconds: Optional[float] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        self.pipeline = pipeline
        self.recent = recent or RecentSearches()
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.session = SearchSession()

        self._lock = threading.RLock()
        self._timer: Optional[threading.Timer] = None
        self._timer_seq = 0
        self._listeners: List[Listener] = []
        self._closed = False

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=2,
            thread_name_prefix="search-session",
        )

    @classmethod
    def for_repository(
        cls,
        repository: CatalogRepository,
        recent_store: Optional[RecentSearchStore] = None,
        **kwargs: Any,
    ) -> "SearchController":
        """Build a controller with a default pipeline over `repository`."""
        return cls(SearchPipeline(repository), RecentSearches(recent_store), **kwargs)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def update_query(self, text: str) -> None:
        """
        Accept a keystroke's worth of text.

        Non-empty text (re)starts the debounce timer. Empty text cancels any
        pending admission, invalidates in-flight work and clears results.
        """
        text = text or ""
        with self._lock:
            if self._closed:
                return
            self._cancel_timer()
            self.session.query = text

            if not text.strip():
                self.session.next_token()
                self.session.last_admitted = None
                self.session.in_flight_token = None
                self.session.results = []
                self.session.last_error = None
                self.session.state = SearchState.IDLE
            else:
                self._timer_seq += 1
                timer = threading.Timer(
                    self.debounce_seconds,
                    self._on_debounce_expired,
                    args=(text, self._timer_seq),
                )
                timer.daemon = True
                self._timer = timer
                self.session.state = SearchState.DEBOUNCING
                timer.start()

        self._notify()

    def submit(self, text: str) -> Future:
        """Admit `text` immediately, skipping the debounce period."""
        with self._lock:
            if self._closed:
                raise RuntimeError("Search controller is closed")
            self._cancel_timer()
            self.session.query = text
            future = self._admit(text)
        self._notify()
        return future

    def reset(self) -> None:
        """Search dismissed: drop pending and in-flight work and clear state."""
        with self._lock:
            self._cancel_timer()
            self.session.next_token()
            self.session.clear()
        self._notify()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            self._cancel_timer()
            self.session.next_token()
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)

    # ------------------------------------------------------------------
    # Debounce and admission
    # ------------------------------------------------------------------

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_debounce_expired(self, text: str, seq: int) -> None:
        with self._lock:
            # A newer keystroke replaced this timer after it had already fired
            if seq != self._timer_seq or self._timer is None or self._closed:
                return
            self._timer = None

            if text == self.session.last_admitted:
                logger.debug(f"Skipping duplicate query '{text}'")
                self.session.state = (
                    SearchState.SEARCHING if self.session.is_searching else SearchState.IDLE
                )
            else:
                self._admit(text)

        self._notify()

    def _admit(self, text: str) -> Future:
        # Caller holds the lock
        query = Query(text=text, token=self.session.next_token())
        self.session.last_admitted = text
        self.session.in_flight_token = query.token
        self.session.state = SearchState.SEARCHING
        logger.info(f"Admitted query token={query.token}")
        return self._executor.submit(self._run, query)

    # ------------------------------------------------------------------
    # Operation and publishing
    # ------------------------------------------------------------------

    def _run(self, query: Query) -> SearchResult:
        with self._lock:
            # Superseded while queued
            if not self.session.is_current(query.token):
                logger.debug(f"Skipping superseded query token={query.token}")
                return SearchResult(token=query.token, query_text=query.text)

        try:
            outcome = self.pipeline.run(query.text)
            result = SearchResult(token=query.token, query_text=query.text, records=outcome.records)
        except CandidateLookupFailed as e:
            logger.warning(f"Search token={query.token} failed: {e}")
            result = SearchResult(token=query.token, query_text=query.text, error=e.kind)
        except Exception:
            logger.exception(f"Search token={query.token} crashed")
            self._abandon(query.token)
            raise

        published = self._publish(result)
        return dataclasses.replace(result, published=published)

    def _publish(self, result: SearchResult) -> bool:
        with self._lock:
            if not self.session.is_current(result.token):
                logger.debug(
                    f"Discarding stale result token={result.token} "
                    f"(current={self.session.current_token})"
                )
                return False

            self.session.in_flight_token = None
            self.session.published_token = result.token
            self.session.results = list(result.records)
            self.session.last_error = result.error
            self.session.state = (
                SearchState.DEBOUNCING if self._timer is not None else SearchState.IDLE
            )
            if result.ok:
                self.recent.add(result.query_text)

        logger.info(f"Published token={result.token}: {len(result.records)} results")
        self._notify()
        return True

    def _abandon(self, token: int) -> None:
        with self._lock:
            if self.session.in_flight_token == token:
                self.session.in_flight_token = None
                self.session.state = (
                    SearchState.DEBOUNCING if self._timer is not None else SearchState.IDLE
                )
        self._notify()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a presentation listener. Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            snapshot = self.session.snapshot()
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Search listener failed")

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return self.session.snapshot()

    @property
    def state(self) -> SearchState:
        return self.snapshot().state

    @property
    def is_searching(self) -> bool:
        return self.snapshot().is_searching

    @property
    def results(self) -> List[Any]:
        return self.snapshot().results

    @property
    def last_error(self) -> Optional[ErrorKind]:
        return self.snapshot().last_error

    @property
    def recent_searches(self) -> List[str]:
        return self.recent.items

    def clear_recent_searches(self) -> None:
        self.recent.clear()
