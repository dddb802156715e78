"""
Pydantic schemas for creature records and HTTP responses
"""
from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Union


# ===== RECORD SCHEMAS =====

class CreatureRecord(BaseModel):
    """Full creature record as displayed by the search UI"""
    id: int
    name: str
    types: List[str] = []
    height: int = 0
    weight: int = 0
    base_experience: Optional[int] = None
    sprite_url: Optional[str] = None
    stats: Dict[str, int] = {}

    class Config:
        from_attributes = True

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "CreatureRecord":
        """Build a record from a PokeAPI /pokemon/{id} payload"""
        type_slots = sorted(data.get("types") or [], key=lambda t: t.get("slot", 0))
        sprites = data.get("sprites") or {}
        return cls(
            id=data["id"],
            name=data["name"],
            types=[slot["type"]["name"] for slot in type_slots],
            height=data.get("height") or 0,
            weight=data.get("weight") or 0,
            base_experience=data.get("base_experience"),
            sprite_url=sprites.get("front_default"),
            stats={
                s["stat"]["name"]: s.get("base_stat", 0)
                for s in data.get("stats") or []
            },
        )


# ===== SEARCH SCHEMAS =====

class IntentOut(BaseModel):
    """How the query was classified"""
    kind: str
    value: Union[int, str]


class SearchResponse(BaseModel):
    """Ordered search results with the classified intent"""
    query: str
    intent: IntentOut
    results: List[CreatureRecord]
    count: int
    dropped: int = 0
    error: Optional[str] = None
    latency_ms: int = 0


class RecentSearchesOut(BaseModel):
    """Most-recent-first search history"""
    searches: List[str]
