"""Collaborator contracts consumed by the search core.

The core never talks to the network or storage directly. It is handed a
CatalogRepository for data and a RecentSearchStore for persistence.
"""

from abc import ABC, abstractmethod
from typing import Any, List

from .models.candidates import NameEntry


class RepositoryError(Exception):
    """Base class for repository failures."""
    pass


class RecordNotFound(RepositoryError):
    """The requested record does not exist."""
    pass


class TransportError(RepositoryError):
    """The data source could not be reached or answered badly."""
    pass


class CatalogRepository(ABC):
    """Data source for creature listings and full records."""

    @abstractmethod
    def list_names(self, limit: int, offset: int = 0) -> List[NameEntry]:
        """
        List lightweight name entries.

        Used once to populate the ranker's name pool.
        """
        pass

    @abstractmethod
    def fetch_by_id(self, record_id: int) -> Any:
        """
        Fetch one full record.

        Raises:
            RecordNotFound: no record with this id
            TransportError: the source failed
        """
        pass

    @abstractmethod
    def list_by_type(self, type_id: str) -> List[NameEntry]:
        """List entries having the given type, in the source's order."""
        pass


class RecentSearchStore(ABC):
    """Opaque ordered string-list persistence."""

    @abstractmethod
    def get_recent_searches(self) -> List[str]:
        pass

    @abstractmethod
    def set_recent_searches(self, searches: List[str]) -> None:
        pass
