"""Tests for the amount/unit cascade and the unit table."""

import pytest

from recipe_keeper.parser.amounts import extract_amount_and_unit
from recipe_keeper.parser.units import UNITS, normalize_unit


@pytest.mark.parametrize(
    "text,rule",
    [
        ("2 cups flour", "amount_unit"),
        ("2 fl. oz. rum", "amount_unit"),
        ("8 fluid  ounces water", "amount_multiword_unit"),
        ("3 eggs", "amount_only"),
        ("pinch of salt", "unit_only"),
        ("fresh herbs for garnish", "no_match"),
    ],
)
def test_rule_that_matched_is_reported(text, rule):
    assert extract_amount_and_unit(text).rule == rule


def test_mixed_fraction_wins_over_whole_number():
    match = extract_amount_and_unit("1 1/2 cups milk")
    assert match.amount == "1 1/2"
    assert match.unit == "cup"
    assert match.remainder == "milk"


def test_amount_glued_to_unit():
    match = extract_amount_and_unit("200g butter")
    assert match.amount == "200"
    assert match.unit == "gram"
    assert match.remainder == "butter"


def test_unit_needs_a_separator():
    # "garlic" starts with "g" but is not grams
    match = extract_amount_and_unit("2 garlic cloves")
    assert match.amount == "2"
    assert match.unit is None
    assert match.remainder == "garlic cloves"


def test_no_match_keeps_whole_text():
    match = extract_amount_and_unit("fresh herbs for garnish")
    assert match.amount is None
    assert match.unit is None
    assert match.remainder == "fresh herbs for garnish"


def test_range_followed_by_word_starting_with_unit_letter():
    match = extract_amount_and_unit("2 to 3 tomatoes")
    assert match.amount == "2 to 3"
    assert match.unit is None
    assert match.remainder == "tomatoes"


# -- unit table --


def test_every_alias_normalizes_to_its_key():
    for canonical, aliases in UNITS.items():
        for alias in aliases:
            if alias in ("t", "T"):
                continue
            assert normalize_unit(alias) == canonical, alias


def test_normalize_unit_is_case_insensitive():
    assert normalize_unit("TBSP") == "tablespoon"
    assert normalize_unit("Cups") == "cup"
    assert normalize_unit("ML") == "milliliter"


def test_size_descriptors_are_lowercased():
    assert normalize_unit("Medium") == "medium"
    assert normalize_unit("LG") == "lg"


def test_unknown_unit_is_returned_unchanged():
    assert normalize_unit("smidgen") == "smidgen"
