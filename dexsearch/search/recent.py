"""Recent searches: bounded, most-recent-first, case-insensitively unique."""

import logging
import threading
from typing import List, Optional

from config.settings import settings
from .errors import PersistenceFailed
from .repository import RecentSearchStore

logger = logging.getLogger("search.recent")


class InMemoryRecentSearchStore(RecentSearchStore):
    """Process-local store, used by default and in tests."""

    def __init__(self, searches: Optional[List[str]] = None):
        self._searches = list(searches or [])
        self._lock = threading.Lock()

    def get_recent_searches(self) -> List[str]:
        with self._lock:
            return list(self._searches)

    def set_recent_searches(self, searches: List[str]) -> None:
        with self._lock:
            self._searches = list(searches)


class SqlRecentSearchStore(RecentSearchStore):
    """SQLAlchemy-backed store. Rows keep their list position."""

    def __init__(self, session_factory=None):
        if session_factory is None:
            from dexsearch.db import SessionLocal
            session_factory = SessionLocal
        self._session_factory = session_factory

    def get_recent_searches(self) -> List[str]:
        from dexsearch.models import RecentSearch

        db = self._session_factory()
        try:
            rows = db.query(RecentSearch).order_by(RecentSearch.position).all()
            return [row.query for row in rows]
        finally:
            db.close()

    def set_recent_searches(self, searches: List[str]) -> None:
        from dexsearch.models import RecentSearch

        db = self._session_factory()
        try:
            db.query(RecentSearch).delete()
            db.add_all(
                RecentSearch(position=i, query=text)
                for i, text in enumerate(searches)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class RecentSearches:
    """
    Recent-search list kept in front of a persistence store.

    The in-memory list is authoritative; store failures are logged as
    PersistenceFailed and never interrupt a search.
    """

    def __init__(self, store: Optional[RecentSearchStore] = None, limit: Optional[int] = None):
        self.store = store or InMemoryRecentSearchStore()
        self.limit = limit or settings.recent_search_limit
        self._lock = threading.Lock()
        self._items: List[str] = self._load()

    def _load(self) -> List[str]:
        try:
            return list(self.store.get_recent_searches())[:self.limit]
        except Exception as e:
            logger.warning(str(PersistenceFailed(f"Could not load recent searches: {e}")))
            return []

    def _save(self, items: List[str]) -> None:
        try:
            self.store.set_recent_searches(items)
        except Exception as e:
            logger.warning(str(PersistenceFailed(f"Could not save recent searches: {e}")))

    def add(self, query: str) -> List[str]:
        """Move `query` to the front, dropping case-insensitive duplicates."""
        if not query:
            return self.items

        with self._lock:
            folded = query.lower()
            items = [item for item in self._items if item.lower() != folded]
            items.insert(0, query)
            self._items = items[:self.limit]
            snapshot = list(self._items)

        self._save(snapshot)
        return snapshot

    def clear(self) -> None:
        with self._lock:
            self._items = []
        self._save([])

    @property
    def items(self) -> List[str]:
        with self._lock:
            return list(self._items)
