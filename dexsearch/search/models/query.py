"""Query and classification models."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class QueryKind(str, Enum):
    """Supported search intent kinds."""
    NAME = "NAME"
    TYPE = "TYPE"
    GENERATION = "GENERATION"
    REGION = "REGION"
    CATEGORY = "CATEGORY"


class Category(str, Enum):
    """Curated creature groups reachable by keyword."""
    LEGENDARY = "legendary"
    STARTER = "starter"
    EVOLUTION = "evolution"


@dataclass(frozen=True)
class Query:
    """
    Raw text admitted by the session controller.

    The token is assigned when the query becomes the current one and
    increases monotonically for the lifetime of a session.
    """
    text: str
    token: int


@dataclass(frozen=True)
class NameQuery:
    text: str
    kind = QueryKind.NAME

    @property
    def value(self) -> str:
        return self.text


@dataclass(frozen=True)
class TypeQuery:
    type_id: str
    kind = QueryKind.TYPE

    @property
    def value(self) -> str:
        return self.type_id


@dataclass(frozen=True)
class GenerationQuery:
    generation: int
    kind = QueryKind.GENERATION

    @property
    def value(self) -> int:
        return self.generation


@dataclass(frozen=True)
class RegionQuery:
    region: str
    kind = QueryKind.REGION

    @property
    def value(self) -> str:
        return self.region


@dataclass(frozen=True)
class CategoryQuery:
    category: Category
    kind = QueryKind.CATEGORY

    @property
    def value(self) -> str:
        return self.category.value


# Exactly one variant is produced per classified text
ClassifiedQuery = Union[NameQuery, TypeQuery, GenerationQuery, RegionQuery, CategoryQuery]


def describe(query: ClassifiedQuery) -> dict:
    """Flatten a classified query for logs and JSON responses."""
    return {"kind": query.kind.value, "value": query.value}
