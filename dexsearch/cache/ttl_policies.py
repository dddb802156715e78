"""
TTL configuration and endpoint-to-category mapping.
"""
from typing import Dict

from .core import DataCategory


# TTL by category (in seconds)
TTL_CONFIG: Dict[DataCategory, int] = {
    DataCategory.NAME_LISTING: 86400,   # 24 hours
    DataCategory.TYPE_LISTING: 86400,   # 24 hours
    DataCategory.RECORD: 3600,          # 1 hour
}


def get_ttl_for_category(category: DataCategory) -> int:
    return TTL_CONFIG.get(category, TTL_CONFIG[DataCategory.RECORD])


def get_category_for_endpoint(endpoint: str) -> DataCategory:
    """
    Map a PokeAPI endpoint path to its cache category.

    - "pokemon" (paged listing) -> NAME_LISTING
    - "pokemon/25"              -> RECORD
    - "type/fire"               -> TYPE_LISTING
    """
    parts = [p for p in endpoint.strip("/").split("/") if p]
    if not parts:
        return DataCategory.RECORD

    if parts[0] == "type":
        return DataCategory.TYPE_LISTING
    if parts[0] == "pokemon" and len(parts) == 1:
        return DataCategory.NAME_LISTING
    return DataCategory.RECORD
