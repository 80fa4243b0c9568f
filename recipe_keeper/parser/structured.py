"""Extract a recipe from Schema.org structured data (JSON-LD, then microdata)."""

import json
import logging
import math
import re

import extruct
from bs4 import BeautifulSoup

from recipe_keeper.models import ExtractedRecipe, Nutrition
from recipe_keeper.parser.durations import parse_duration

logger = logging.getLogger(__name__)

# Same cleanup extruct applies before giving up on a JSON-LD block.
_COMMENT_LINE_RE = re.compile(r"^\s*(?://.*|<!--.*|-->.*)$", re.MULTILINE)
_FIRST_INT_RE = re.compile(r"\d+")


def extract_from_json_ld(soup: BeautifulSoup, url: str) -> ExtractedRecipe | None:
    """Map the first Recipe found in the page's JSON-LD blocks.

    Blocks are scanned in document order. A block that fails to parse is
    skipped; once a Recipe is found no later block is consulted.
    """
    for script in soup.find_all("script", type="application/ld+json"):
        data = _load_json(script.string or script.get_text())
        if data is None:
            continue

        recipe_obj = _find_recipe_object(data)
        if recipe_obj is not None:
            logger.debug("Found recipe via json-ld")
            return map_recipe_schema(recipe_obj, url)

    logger.debug("No JSON-LD recipe found")
    return None


def extract_from_microdata(html: str, url: str) -> ExtractedRecipe | None:
    """Map the first schema.org Recipe item found in the page's microdata."""
    try:
        data = extruct.extract(
            html,
            base_url=url,
            syntaxes=["microdata"],
            uniform=True,
            errors="ignore",
        )
    except Exception:
        logger.debug("extruct failed to parse microdata", exc_info=True)
        return None

    for item in data.get("microdata", []):
        if isinstance(item, dict) and _is_recipe(item):
            logger.debug("Found recipe via microdata")
            return map_recipe_schema(item, url)

    logger.debug("No microdata recipe found")
    return None


def _load_json(raw: str | None):
    if not raw or not raw.strip():
        return None
    try:
        return json.loads(raw, strict=False)
    except ValueError:
        pass
    try:
        return json.loads(_COMMENT_LINE_RE.sub("", raw), strict=False)
    except ValueError:
        logger.debug("Skipping malformed JSON-LD block")
        return None


def _is_recipe(item) -> bool:
    if not isinstance(item, dict):
        return False
    item_type = item.get("@type")
    types = item_type if isinstance(item_type, list) else [item_type]
    # Microdata types may come through as full URLs ("http://schema.org/Recipe")
    return any(
        isinstance(t, str) and t.rstrip("/").rsplit("/", 1)[-1] == "Recipe"
        for t in types
    )


def _find_recipe_object(data) -> dict | None:
    """Find a Recipe as the block itself, inside a top-level array, or in @graph."""
    if _is_recipe(data):
        return data

    if isinstance(data, list):
        for item in data:
            if _is_recipe(item):
                return item

    if isinstance(data, dict) and isinstance(data.get("@graph"), list):
        for node in data["@graph"]:
            if _is_recipe(node):
                return node

    return None


def map_recipe_schema(data: dict, url: str) -> ExtractedRecipe:
    """Map a schema.org Recipe object onto ExtractedRecipe."""
    servings, recipe_yield = _normalize_yield(data.get("recipeYield"))

    return ExtractedRecipe(
        title=_as_text(data.get("name")),
        description=_as_text(data.get("description")),
        image=_extract_image(data.get("image")),
        source_name=_entity_name(data.get("author"))
        or _entity_name(data.get("publisher")),
        prep_time=parse_duration(data.get("prepTime")),
        cook_time=parse_duration(data.get("cookTime")),
        total_time=parse_duration(data.get("totalTime")),
        servings=servings,
        recipe_yield=recipe_yield,
        ingredients=_normalize_ingredients(data.get("recipeIngredient")),
        instructions=_normalize_instructions(data.get("recipeInstructions")),
        category=_joined_text(data.get("recipeCategory")),
        cuisine=_joined_text(data.get("recipeCuisine")),
        keywords=_normalize_keywords(data.get("keywords")),
        nutrition=_normalize_nutrition(data.get("nutrition")),
        source_url=url,
    )


def _as_text(value) -> str | None:
    return value if isinstance(value, str) else None


def _joined_text(value) -> str | None:
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, list):
        parts = [v.strip() for v in value if isinstance(v, str) and v.strip()]
        return ", ".join(parts) or None
    return None


def _entity_name(value) -> str | None:
    """Name of an author/publisher given as a string, an object, or a list."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        return _as_text(value.get("name"))
    return None


def _extract_image(image) -> str | None:
    """Resolve a string, object (url / @id), or list of either to one URL."""
    if isinstance(image, str):
        return image or None
    if isinstance(image, list):
        return _extract_image(image[0]) if image else None
    if isinstance(image, dict):
        if isinstance(image.get("url"), str) and image["url"]:
            return image["url"]
        if isinstance(image.get("@id"), str) and image["@id"]:
            return image["@id"]
    return None


def _normalize_yield(value) -> tuple[int | None, str | None]:
    """Return (servings, yield text) for a recipeYield value."""
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, bool) or value is None:
        return None, None
    if isinstance(value, float) and not math.isfinite(value):
        # json.loads accepts NaN and Infinity
        return None, None
    if isinstance(value, (int, float)):
        return int(value), None
    if isinstance(value, str):
        # "serves 4-6" -> 4
        match = _FIRST_INT_RE.search(value)
        return (int(match.group()) if match else None), value
    return None, None


def _normalize_ingredients(raw) -> list[str] | None:
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return None
    return [item.strip() for item in raw if isinstance(item, str)]


def _normalize_instructions(raw) -> list[str] | None:
    """Normalize recipeInstructions into a flat list of step strings."""
    if isinstance(raw, str):
        # Single text block: split on newlines
        return [s.strip() for s in raw.split("\n") if s.strip()]

    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return None

    steps = []
    for item in raw:
        if isinstance(item, str):
            steps.append(item.strip())
        elif isinstance(item, dict):
            if item.get("@type") == "HowToSection":
                sub_steps = item.get("itemListElement")
                if not isinstance(sub_steps, list):
                    continue
                for sub in sub_steps:
                    steps.append(_step_text(sub))
            else:
                steps.append(_step_text(item))
    return [s for s in steps if s]


def _step_text(step) -> str:
    """Step text, falling back from a plain string to `text` to `name`."""
    if isinstance(step, str):
        return step.strip()
    if isinstance(step, dict):
        for key in ("text", "name"):
            value = step.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return ""


def _normalize_keywords(value) -> list[str] | None:
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    if isinstance(value, list):
        return [k.strip() for k in value if isinstance(k, str) and k.strip()]
    return None


def _normalize_nutrition(value) -> Nutrition | None:
    if not isinstance(value, dict):
        return None

    def _field(key: str) -> str | None:
        raw = value.get(key)
        if raw is None or isinstance(raw, (dict, list)):
            return None
        return str(raw)

    return Nutrition(
        calories=_field("calories"),
        protein=_field("proteinContent"),
        fat=_field("fatContent"),
        carbohydrates=_field("carbohydrateContent"),
    )
