"""
Query classifier: rule precedence and fallback.
"""
import pytest

from dexsearch.search.intent import QueryClassifier, classify
from dexsearch.search.models.query import (
    Category,
    CategoryQuery,
    GenerationQuery,
    NameQuery,
    QueryKind,
    RegionQuery,
    TypeQuery,
    describe,
)


@pytest.mark.parametrize("text,expected", [
    ("fire", TypeQuery("fire")),
    ("gen 1", GenerationQuery(1)),
    ("kanto", RegionQuery("kanto")),
    ("legendary", CategoryQuery(Category.LEGENDARY)),
    ("xyzzy", NameQuery("xyzzy")),
])
def test_documented_examples(text, expected):
    assert classify(text) == expected


@pytest.mark.parametrize("text,expected", [
    ("FIRE", TypeQuery("fire")),
    ("  Water types ", TypeQuery("water")),
    ("Generation 4", GenerationQuery(4)),
    ("gen9", GenerationQuery(9)),
    ("Paldea", RegionQuery("paldea")),
    ("legend", CategoryQuery(Category.LEGENDARY)),
    ("starters", CategoryQuery(Category.STARTER)),
    ("evolve", CategoryQuery(Category.EVOLUTION)),
    ("evolution line", CategoryQuery(Category.EVOLUTION)),
])
def test_each_rule(text, expected):
    assert classify(text) == expected


def test_type_beats_category():
    assert classify("fire legendary") == TypeQuery("fire")


def test_generation_beats_region():
    assert classify("kanto gen 2") == GenerationQuery(2)


def test_region_beats_category():
    assert classify("johto legends") == RegionQuery("johto")


def test_type_keywords_are_whole_tokens():
    # "dragon" inside a name is not a type keyword
    assert classify("dragonite") == NameQuery("dragonite")
    assert classify("dragon-type") == TypeQuery("dragon")


def test_gen_without_digit_falls_through():
    assert classify("gen") == NameQuery("gen")


def test_first_listed_type_wins():
    assert classify("water fire") == TypeQuery("fire")


def test_name_fallback_keeps_casing_and_trims():
    assert classify("  Pikachu  ") == NameQuery("Pikachu")


def test_empty_text_is_a_name_query():
    assert classify("") == NameQuery("")
    assert classify("   ") == NameQuery("")


@pytest.mark.parametrize("text", ["", "a", "fire", "gen 3", "sinnoh", "starter", "mr. mime", "123", "!!"])
def test_classifier_is_total(text):
    result = QueryClassifier().classify(text)
    assert result.kind in set(QueryKind)


def test_describe_flattens_variants():
    assert describe(TypeQuery("fire")) == {"kind": "TYPE", "value": "fire"}
    assert describe(GenerationQuery(3)) == {"kind": "GENERATION", "value": 3}
    assert describe(CategoryQuery(Category.STARTER)) == {"kind": "CATEGORY", "value": "starter"}


def test_unknown_type_is_not_a_keyword():
    assert classify("unknown") == NameQuery("unknown")
