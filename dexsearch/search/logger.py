"""Notable-query log for reviewing search quality.

Appends JSON lines for searches that failed a lookup, found nothing, or
dropped records. Controlled by the SEARCH_LOGGING setting.
"""

import hashlib
import json
import logging
import threading
from dataclasses import dataclass, asdict
from datetime import datetime
from pathlib import Path
from typing import Optional

from config.settings import settings

logger = logging.getLogger("search.logger")

LOG_FILENAME = "search_queries.jsonl"

_log_lock = threading.Lock()


@dataclass
class QueryLog:
    """Log entry for a search query."""
    timestamp: str
    query_hash: str  # SHA256 of normalized query for privacy
    kind: Optional[str]
    candidates: int
    results: int
    dropped: int
    error_type: Optional[str]
    latency_ms: int


def _hash_query(query: str) -> str:
    return hashlib.sha256(query.lower().strip().encode()).hexdigest()[:16]


def _log_file() -> Path:
    return Path(settings.log_directory) / LOG_FILENAME


def log_query(
    query: str,
    kind: Optional[str],
    candidates: int,
    results: int,
    dropped: int,
    error_type: Optional[str],
    latency_ms: int,
) -> None:
    """
    Record a search if logging is enabled and the search was notable:
    - error_type is set
    - nothing was found
    - some candidates could not be fetched
    """
    if not settings.search_logging:
        return

    if error_type is None and results > 0 and dropped == 0:
        return

    entry = QueryLog(
        timestamp=datetime.utcnow().isoformat() + "Z",
        query_hash=_hash_query(query),
        kind=kind,
        candidates=candidates,
        results=results,
        dropped=dropped,
        error_type=error_type,
        latency_ms=latency_ms,
    )
    _write_log(entry)


def _write_log(entry: QueryLog) -> None:
    path = _log_file()
    with _log_lock:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(json.dumps(asdict(entry)) + "\n")
        except OSError as e:
            logger.warning(f"Could not write query log: {e}")


def get_recent_logs(limit: int = 100) -> list[dict]:
    """Read recent log entries for review."""
    path = _log_file()
    if not path.exists():
        return []

    entries = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                entries.append(json.loads(line))

    return entries[-limit:]


def clear_logs() -> None:
    path = _log_file()
    if path.exists():
        path.unlink()
