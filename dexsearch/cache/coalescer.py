"""
Request coalescing for concurrent lookups of the same resource.

The fetch orchestrator fans out one thread per candidate, and separate
searches can overlap while the user types. When two of them ask for the
same record at once, only the first reaches the API; the others wait for
its answer.
"""
import threading
import logging
from typing import Dict, Optional, Callable, Any
from dataclasses import dataclass, field

logger = logging.getLogger("cache.coalescer")


@dataclass
class PendingFetch:
    """One upstream call that other callers may join."""
    done: threading.Event = field(default_factory=threading.Event)
    value: Optional[Any] = None
    error: Optional[BaseException] = None
    joined: int = 0


class RequestCoalescer:
    """
    Shares one upstream call among concurrent callers of the same key.

    The first caller runs fetch_fn; later callers block until it finishes
    and receive the same value or the same exception.
    """

    def __init__(self, timeout: float = 30.0):
        self._pending: Dict[str, PendingFetch] = {}
        self._lock = threading.Lock()
        self._timeout = timeout

    def get_or_fetch(self, key: str, fetch_fn: Callable[[], Any]) -> Any:
        """
        Run fetch_fn for `key`, or wait for the call already running.

        Raises:
            TimeoutError: the running call did not finish within the timeout
            Exception: whatever fetch_fn raised
        """
        with self._lock:
            pending = self._pending.get(key)
            leader = pending is None
            if leader:
                pending = PendingFetch()
                self._pending[key] = pending
            else:
                pending.joined += 1
                logger.debug(f"Joining in-flight fetch for {key} (joined: {pending.joined})")

        if leader:
            try:
                pending.value = fetch_fn()
            except BaseException as e:
                pending.error = e
                raise
            finally:
                with self._lock:
                    self._pending.pop(key, None)
                pending.done.set()
            return pending.value

        if not pending.done.wait(timeout=self._timeout):
            logger.error(f"Timeout waiting for coalesced fetch: {key}")
            raise TimeoutError(f"Fetch for {key} timed out after {self._timeout}s")

        if pending.error is not None:
            raise pending.error
        return pending.value

    @property
    def active_requests(self) -> int:
        with self._lock:
            return len(self._pending)
