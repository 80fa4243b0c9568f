"""Tests for ingredient line parsing and formatting."""

import pytest

from recipe_keeper.models import ParsedIngredient
from recipe_keeper.parser.ingredients import (
    format_ingredient,
    normalize_fractions,
    parse_ingredient_line,
    parse_ingredient_lines,
)

# -- parse_ingredient_line --


def test_parse_simple_ingredient():
    assert parse_ingredient_line("1 cup flour") == ParsedIngredient(
        amount="1", unit="cup", ingredient="flour"
    )


@pytest.mark.parametrize("line", ["2 tbsp sugar", "2 tablespoons sugar", "2 Tbsp. sugar"])
def test_unit_spellings_normalize_to_same_result(line):
    assert parse_ingredient_line(line) == ParsedIngredient(
        amount="2", unit="tablespoon", ingredient="sugar"
    )


def test_parse_fraction():
    result = parse_ingredient_line("1/2 cup sugar")
    assert result.amount == "1/2"
    assert result.unit == "cup"
    assert result.ingredient == "sugar"


def test_parse_mixed_fraction():
    assert parse_ingredient_line("1 1/2 cups milk") == ParsedIngredient(
        amount="1 1/2", unit="cup", ingredient="milk"
    )


def test_parse_unicode_fraction():
    assert parse_ingredient_line("½ cup butter") == ParsedIngredient(
        amount="1/2", unit="cup", ingredient="butter"
    )
    assert parse_ingredient_line("¾ teaspoon salt") == ParsedIngredient(
        amount="3/4", unit="teaspoon", ingredient="salt"
    )


def test_unicode_fraction_glued_to_number():
    result = parse_ingredient_line("1½ cups stock")
    assert result.amount == "1 1/2"
    assert result.unit == "cup"
    assert result.ingredient == "stock"


def test_parse_decimal():
    assert parse_ingredient_line("1.5 pounds chicken") == ParsedIngredient(
        amount="1.5", unit="pound", ingredient="chicken"
    )


def test_parse_ranges():
    assert parse_ingredient_line("2-3 cloves garlic") == ParsedIngredient(
        amount="2-3", unit="clove", ingredient="garlic"
    )
    assert parse_ingredient_line("1 to 2 teaspoons vanilla") == ParsedIngredient(
        amount="1 to 2", unit="teaspoon", ingredient="vanilla"
    )


def test_parse_unitless():
    assert parse_ingredient_line("3 eggs") == ParsedIngredient(
        amount="3", ingredient="eggs"
    )


def test_size_descriptor_is_lowercased_unit():
    assert parse_ingredient_line("1 Large onion") == ParsedIngredient(
        amount="1", unit="large", ingredient="onion"
    )


def test_parse_no_amount():
    result = parse_ingredient_line("salt to taste")
    assert result == ParsedIngredient(ingredient="salt to taste")
    assert result.amount is None
    assert result.unit is None


def test_notes_extracted_from_trailing_parenthetical():
    assert parse_ingredient_line("1 cup flour (sifted)") == ParsedIngredient(
        amount="1", unit="cup", ingredient="flour", notes="sifted"
    )


def test_notes_with_trailing_comma():
    result = parse_ingredient_line("2 tablespoons butter (melted),")
    assert result.notes == "melted"
    assert result.ingredient == "butter"


def test_inner_parenthetical_is_not_notes():
    result = parse_ingredient_line("1 (14 oz) can diced tomatoes")
    assert result.notes is None
    assert result.amount == "1"
    assert result.ingredient == "(14 oz) can diced tomatoes"


def test_abbreviations():
    assert parse_ingredient_line("1 tbsp honey").unit == "tablespoon"
    assert parse_ingredient_line("2 tsp cinnamon").unit == "teaspoon"
    assert parse_ingredient_line("1 lb ground beef") == ParsedIngredient(
        amount="1", unit="pound", ingredient="ground beef"
    )


def test_case_sensitive_single_letter_units():
    assert parse_ingredient_line("1 T olive oil").unit == "tablespoon"
    assert parse_ingredient_line("1 t salt").unit == "teaspoon"


def test_multi_word_units():
    assert parse_ingredient_line("8 fluid ounces water") == ParsedIngredient(
        amount="8", unit="fluid ounce", ingredient="water"
    )
    assert parse_ingredient_line("2 fl oz lemon juice") == ParsedIngredient(
        amount="2", unit="fluid ounce", ingredient="lemon juice"
    )
    assert parse_ingredient_line("4 fl.oz cream") == ParsedIngredient(
        amount="4", unit="fluid ounce", ingredient="cream"
    )


def test_unit_without_amount():
    assert parse_ingredient_line("dash of salt") == ParsedIngredient(
        unit="dash", ingredient="salt"
    )
    assert parse_ingredient_line("pinch of cinnamon") == ParsedIngredient(
        unit="pinch", ingredient="cinnamon"
    )


def test_strips_bullets_and_ordinals():
    assert parse_ingredient_line("• 1 teaspoon salt") == ParsedIngredient(
        amount="1", unit="teaspoon", ingredient="salt"
    )
    assert parse_ingredient_line("1. 2 cups flour") == ParsedIngredient(
        amount="2", unit="cup", ingredient="flour"
    )
    assert parse_ingredient_line("- 3 eggs") == ParsedIngredient(
        amount="3", ingredient="eggs"
    )


@pytest.mark.parametrize("value", ["", "   ", None, 42])
def test_parse_degenerate_input(value):
    assert parse_ingredient_line(value) == ParsedIngredient(ingredient="")


# -- parse_ingredient_lines --


def test_parse_lines_preserves_order():
    parsed = parse_ingredient_lines(["1 cup flour", "2 eggs", "1/2 teaspoon salt"])
    assert parsed == [
        ParsedIngredient(amount="1", unit="cup", ingredient="flour"),
        ParsedIngredient(amount="2", ingredient="eggs"),
        ParsedIngredient(amount="1/2", unit="teaspoon", ingredient="salt"),
    ]


def test_parse_lines_empty():
    assert parse_ingredient_lines([]) == []


# -- format_ingredient --


def test_format_full():
    parsed = ParsedIngredient(
        amount="2", unit="tablespoon", ingredient="butter", notes="melted"
    )
    assert format_ingredient(parsed) == "2 tablespoon butter (melted)"


def test_format_ingredient_only():
    assert format_ingredient(ParsedIngredient(ingredient="salt to taste")) == "salt to taste"


def test_format_omits_empty_ingredient_without_extra_whitespace():
    assert format_ingredient(ParsedIngredient(amount="1", unit="cup", ingredient="")) == "1 cup"


@pytest.mark.parametrize(
    "line",
    ["1 cup flour", "2 tablespoons olive oil", "1 1/2 cups milk", "3 eggs"],
)
def test_format_reproduces_tokens(line):
    parsed = parse_ingredient_line(line)
    formatted = format_ingredient(parsed)
    assert parsed.amount in formatted
    assert parsed.ingredient in formatted
    if parsed.unit:
        assert parsed.unit in formatted


# -- normalize_fractions --


def test_normalize_fractions():
    assert normalize_fractions("⅓ cup") == "1/3 cup"
    assert normalize_fractions("2⅞") == "2 7/8"
