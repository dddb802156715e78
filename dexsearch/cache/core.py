"""
Core cache data structures.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from enum import Enum


class DataCategory(Enum):
    """Categories of catalog data with different lifetimes."""
    NAME_LISTING = "name_listing"   # full name listing, changes with new releases
    TYPE_LISTING = "type_listing"   # members of one type
    RECORD = "record"               # one full creature record


class CacheSource(Enum):
    """Where a returned value came from."""
    FRESH = "fresh"       # Within TTL
    UPSTREAM = "upstream" # Fetched from the API


@dataclass
class CacheEntry:
    """A cached value with the metadata needed for expiry."""
    data: Any
    fetched_at: datetime
    ttl_seconds: int
    category: DataCategory = DataCategory.RECORD

    @property
    def age_seconds(self) -> float:
        return (datetime.utcnow() - self.fetched_at).total_seconds()

    @property
    def is_fresh(self) -> bool:
        return self.age_seconds < self.ttl_seconds
