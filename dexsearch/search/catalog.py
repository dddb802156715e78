"""Fixed lookup tables for non-name intents."""

from typing import Dict, List, Optional, Tuple

from .models.query import Category


# Enumerated creature types, in the order the classifier tests them
TYPE_KEYWORDS: Tuple[str, ...] = (
    "normal",
    "fire",
    "water",
    "electric",
    "grass",
    "ice",
    "fighting",
    "poison",
    "ground",
    "flying",
    "psychic",
    "bug",
    "rock",
    "ghost",
    "dragon",
    "dark",
    "steel",
    "fairy",
    # "unknown" is a placeholder type, never a search keyword
)

# Generation number -> half-open national dex id range
GENERATION_RANGES: Dict[int, Tuple[int, int]] = {
    1: (1, 152),
    2: (152, 252),
    3: (252, 387),
    4: (387, 494),
    5: (494, 650),
    6: (650, 722),
    7: (722, 810),
    8: (810, 906),
    9: (906, 1011),
}

# Region name -> generation that introduced it
REGION_GENERATIONS: Dict[str, int] = {
    "kanto": 1,
    "johto": 2,
    "hoenn": 3,
    "sinnoh": 4,
    "unova": 5,
    "kalos": 6,
    "alola": 7,
    "galar": 8,
    "paldea": 9,
}

# Regions, in the order the classifier tests them
REGION_NAMES: Tuple[str, ...] = tuple(REGION_GENERATIONS)

# Category keywords, tested in this order
CATEGORY_KEYWORDS: List[Tuple[Tuple[str, ...], Category]] = [
    (("legendary", "legend"), Category.LEGENDARY),
    (("starter",), Category.STARTER),
    (("evolution", "evolve"), Category.EVOLUTION),
]

CATEGORY_IDS: Dict[Category, List[int]] = {
    Category.LEGENDARY: [
        150, 151, 144, 145, 146, 249, 250, 251, 243, 244, 245,
        377, 378, 379, 380, 381, 382, 383, 384, 385, 386,
        480, 481, 482, 483, 484, 485, 486, 487, 488, 489, 490, 491, 492, 493,
    ],
    Category.STARTER: [
        1, 4, 7, 152, 155, 158, 252, 255, 258, 387, 390, 393,
        495, 498, 501, 650, 653, 656, 722, 725, 728, 810, 813, 816,
    ],
    Category.EVOLUTION: [
        1, 4, 7, 10, 13, 16, 19, 21, 23, 25, 27, 29, 32, 35, 37, 39, 41, 43, 46, 48,
    ],
}


def generation_ids(generation: int, limit: int) -> List[int]:
    """First `limit` ids of a generation, or [] for an unknown generation."""
    bounds = GENERATION_RANGES.get(generation)
    if bounds is None:
        return []
    start, stop = bounds
    return list(range(start, min(stop, start + limit)))


def region_generation(region: str) -> Optional[int]:
    return REGION_GENERATIONS.get(region.lower())


def category_ids(category: Category, limit: int) -> List[int]:
    return CATEGORY_IDS.get(category, [])[:limit]
