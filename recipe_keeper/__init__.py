"""Recipe text extraction and ingredient normalization."""

from recipe_keeper.models import (
    ExtractedRecipe,
    FetchFailed,
    InvalidUrl,
    NoRecipeFound,
    Nutrition,
    ParsedIngredient,
    ParseError,
    is_valid_recipe,
)
from recipe_keeper.parser.ingredients import (
    format_ingredient,
    parse_ingredient_line,
    parse_ingredient_lines,
)
from recipe_keeper.parser.pipeline import RecipeUrlExtractor, extract_recipe_from_url

__all__ = [
    "ExtractedRecipe",
    "FetchFailed",
    "InvalidUrl",
    "NoRecipeFound",
    "Nutrition",
    "ParsedIngredient",
    "ParseError",
    "RecipeUrlExtractor",
    "extract_recipe_from_url",
    "format_ingredient",
    "is_valid_recipe",
    "parse_ingredient_line",
    "parse_ingredient_lines",
]
