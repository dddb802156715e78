"""
Catalog cache with per-category TTL, LRU bound and request coalescing.
"""
from .core import CacheEntry, CacheSource, DataCategory
from .ttl_policies import TTL_CONFIG, get_ttl_for_category, get_category_for_endpoint
from .coalescer import RequestCoalescer
from .manager import CacheManager

__all__ = [
    # Core types
    "CacheEntry",
    "CacheSource",
    "DataCategory",
    # TTL policies
    "TTL_CONFIG",
    "get_ttl_for_category",
    "get_category_for_endpoint",
    # Coalescing
    "RequestCoalescer",
    # Manager
    "CacheManager",
]
