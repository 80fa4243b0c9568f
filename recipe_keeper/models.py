import html

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ParsedIngredient(BaseModel):
    """Structured ingredient data extracted from a raw ingredient line."""

    amount: str | None = None
    unit: str | None = None
    ingredient: str
    notes: str | None = None


class Nutrition(BaseModel):
    model_config = ConfigDict(frozen=True)

    calories: str | None = None
    protein: str | None = None
    fat: str | None = None
    carbohydrates: str | None = None


class ExtractedRecipe(BaseModel):
    """A recipe pulled from a web page.

    Ingredients and instructions are the raw extracted strings; turning an
    ingredient line into a ParsedIngredient is a separate step.
    """

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    title: str | None = None
    description: str | None = None
    ingredients: list[str] | None = None
    instructions: list[str] | None = None
    prep_time: int | None = None
    cook_time: int | None = None
    total_time: int | None = None
    servings: int | None = None
    recipe_yield: str | None = Field(default=None, alias="yield")
    image: str | None = None
    source_name: str | None = None
    source_url: str
    category: str | None = None
    cuisine: str | None = None
    keywords: list[str] | None = None
    nutrition: Nutrition | None = None

    @field_validator(
        "title", "description", "recipe_yield", "source_name", "category", "cuisine"
    )
    @classmethod
    def clean_text(cls, value: str | None) -> str | None:
        """Decode HTML entities and strip whitespace."""
        if value is None:
            return None
        return html.unescape(value).strip()

    @field_validator("ingredients", "instructions", "keywords")
    @classmethod
    def clean_lines(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        cleaned = [html.unescape(s).strip() for s in value]
        return [s for s in cleaned if s]


def is_valid_recipe(recipe: ExtractedRecipe | None) -> bool:
    """A recipe needs a title plus ingredients or instructions."""
    if recipe is None or not recipe.title:
        return False
    return bool(recipe.ingredients) or bool(recipe.instructions)


class ParseError(Exception):
    def __init__(self, error_type: str, message: str):
        self.error_type = error_type
        self.message = message
        super().__init__(message)


class InvalidUrl(ParseError):
    def __init__(self, message: str = "Invalid URL."):
        super().__init__("validation", message)


class FetchFailed(ParseError):
    """The remote server answered with a non-2xx status, or the request failed."""

    def __init__(
        self,
        message: str,
        status: int | None = None,
        status_text: str | None = None,
    ):
        self.status = status
        self.status_text = status_text
        super().__init__("http" if status is not None else "network", message)


class NoRecipeFound(ParseError):
    def __init__(
        self, message: str = "No recipe found on that page. Try a different URL."
    ):
        super().__init__("parse", message)
