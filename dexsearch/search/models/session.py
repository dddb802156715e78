"""Session state models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from ..errors import ErrorKind


class SearchState(str, Enum):
    """Controller states for one search UI instance."""
    IDLE = "IDLE"
    DEBOUNCING = "DEBOUNCING"
    SEARCHING = "SEARCHING"


@dataclass(frozen=True)
class SearchResult:
    """Ordered records produced by one search operation, tagged with its token."""
    token: int
    query_text: str
    records: List[Any] = field(default_factory=list)
    error: Optional[ErrorKind] = None
    published: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SessionSnapshot:
    """Observable view of a session handed to presentation listeners."""
    state: SearchState
    query: str
    token: int
    is_searching: bool
    results: List[Any]
    last_error: Optional[ErrorKind]


@dataclass
class SearchSession:
    """
    Mutable state owned by a single session controller.

    Only the controller writes to it, always under its lock:
    - current_token identifies the query whose result may be published
    - published_token is the token of the result currently on screen
    - in_flight_token is the newest operation still running
    """
    current_token: int = 0
    query: str = ""
    last_admitted: Optional[str] = None
    results: List[Any] = field(default_factory=list)
    published_token: int = 0
    in_flight_token: Optional[int] = None
    last_error: Optional[ErrorKind] = None
    state: SearchState = SearchState.IDLE
    created_at: datetime = field(default_factory=datetime.utcnow)

    def next_token(self) -> int:
        """Issue a new generation token, invalidating anything older."""
        self.current_token += 1
        return self.current_token

    def is_current(self, token: int) -> bool:
        return token == self.current_token

    @property
    def is_searching(self) -> bool:
        return self.in_flight_token is not None and self.in_flight_token == self.current_token

    def clear(self) -> None:
        """Drop the visible query, results and error."""
        self.query = ""
        self.last_admitted = None
        self.results = []
        self.last_error = None
        self.in_flight_token = None
        self.state = SearchState.IDLE

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            state=self.state,
            query=self.query,
            token=self.current_token,
            is_searching=self.is_searching,
            results=list(self.results),
            last_error=self.last_error,
        )
