"""Heuristic extraction from HTML when no structured recipe data is usable."""

import logging
import re
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup, Tag

from recipe_keeper.models import ExtractedRecipe
from recipe_keeper.parser.durations import minutes_from_mention

logger = logging.getLogger(__name__)

TITLE_SELECTORS = (
    "h1.recipe-name",
    "h1.recipe-title",
    'h1[itemprop="name"]',
    "h1",
)

DESCRIPTION_SELECTORS = (
    "div.recipe-description",
    "p.recipe-description",
    '[itemprop="description"]',
)

IMAGE_SELECTORS = (
    "img.recipe-image",
    '[itemprop="image"]',
)

# Class names used by common recipe plugins (WP Recipe Maker, Tasty Recipes).
INGREDIENT_SELECTORS = (
    "ul.recipe-ingredients li",
    "ul.ingredients li",
    "div.recipe-ingredients li",
    "div.ingredients li",
    '[itemprop="recipeIngredient"]',
    "ul.wprm-recipe-ingredients li",
    "div.tasty-recipes-ingredients li",
)

INSTRUCTION_SELECTORS = (
    "ol.recipe-instructions li",
    "ol.instructions li",
    "div.recipe-instructions li",
    "div.instructions li",
    '[itemprop="recipeInstructions"]',
    "ol.wprm-recipe-instructions li",
    "div.tasty-recipes-instructions li",
    "div.recipe-method li",
    "div.directions li",
)

_INGREDIENT_LABEL_RE = re.compile(r"ingredients\s*:?", re.IGNORECASE)
_INSTRUCTION_LABEL_RE = re.compile(
    r"(?:instructions|directions|steps|method)\s*:?", re.IGNORECASE
)
_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_LABEL_TAGS = [*_HEADING_TAGS, "strong", "b"]

_TIME_UNIT = r"(hours?|hrs?|minutes?|mins?)"
_PREP_RE = re.compile(rf"prep(?:\s+time)?:\s*(\d+)\s*{_TIME_UNIT}", re.IGNORECASE)
_COOK_RE = re.compile(rf"cook(?:\s+time)?:\s*(\d+)\s*{_TIME_UNIT}", re.IGNORECASE)
_SERVINGS_RE = re.compile(r"(?:serves?|servings?|yield):\s*(\d+)", re.IGNORECASE)


def extract_heuristic(soup: BeautifulSoup, url: str) -> ExtractedRecipe:
    """Recover whatever recipe fields the page markup offers.

    Always returns a recipe; whether it is good enough is decided by the
    caller's validity check.
    """
    ingredients = _collect_list(soup, INGREDIENT_SELECTORS, _INGREDIENT_LABEL_RE)
    instructions = _collect_list(soup, INSTRUCTION_SELECTORS, _INSTRUCTION_LABEL_RE)

    logger.debug(
        "Heuristic found %d ingredients, %d instructions",
        len(ingredients),
        len(instructions),
    )

    page_text = (soup.body or soup).get_text(" ")
    prep_time, cook_time, servings = _scan_times(page_text)

    return ExtractedRecipe(
        title=_extract_title(soup),
        description=_extract_description(soup),
        image=_extract_image(soup, url),
        ingredients=ingredients or None,
        instructions=instructions or None,
        prep_time=prep_time,
        cook_time=cook_time,
        servings=servings,
        source_name=_source_name(url),
        source_url=url,
    )


def _text(el: Tag) -> str:
    return " ".join(el.get_text().split())


def _first_text(soup: BeautifulSoup, selectors) -> str | None:
    for selector in selectors:
        el = soup.select_one(selector)
        if el is not None:
            text = _text(el)
            if text:
                return text
    return None


def _meta_content(soup: BeautifulSoup, **attrs) -> str | None:
    tag = soup.find("meta", attrs=attrs)
    if tag is not None:
        content = (tag.get("content") or "").strip()
        if content:
            return content
    return None


def _extract_title(soup: BeautifulSoup) -> str | None:
    title = _first_text(soup, TITLE_SELECTORS) or _meta_content(
        soup, property="og:title"
    )
    if title:
        return title
    title_tag = soup.find("title")
    if title_tag is not None:
        return _text(title_tag) or None
    return None


def _extract_description(soup: BeautifulSoup) -> str | None:
    return (
        _first_text(soup, DESCRIPTION_SELECTORS)
        or _meta_content(soup, property="og:description")
        or _meta_content(soup, name="description")
    )


def _extract_image(soup: BeautifulSoup, url: str) -> str | None:
    image = None
    for selector in IMAGE_SELECTORS:
        el = soup.select_one(selector)
        if el is not None and (el.get("src") or "").strip():
            image = el["src"].strip()
            break
    if image is None:
        image = _meta_content(soup, property="og:image")
    if image is None:
        return None

    if image.startswith("http"):
        return image
    # Relative images are resolved against the page origin
    try:
        parsed = urlparse(url)
        return urljoin(f"{parsed.scheme}://{parsed.netloc}", image)
    except ValueError:
        logger.debug("Dropping unresolvable image URL %r", image)
        return None


def _collect_list(soup: BeautifulSoup, selectors, label_pattern: re.Pattern) -> list[str]:
    """Collect items from the first selector that matches anything.

    Selectors are never merged, so a page with several recipe cards doesn't
    mix their lists.
    """
    for selector in selectors:
        elements = soup.select(selector)
        if elements:
            return [text for text in (_text(el) for el in elements) if text]
    return _find_list_after_label(soup, label_pattern)


def _find_list_after_label(soup: BeautifulSoup, pattern: re.Pattern) -> list[str]:
    """Find a <ul>/<ol> that follows a label matching the pattern."""
    for tag in soup.find_all(_LABEL_TAGS):
        if not pattern.search(tag.get_text(strip=True)):
            continue

        # The label might be inside a <p> wrapper; look from the parent
        search_from = tag.parent if tag.parent and tag.parent.name == "p" else tag
        lst = search_from.find_next(["ul", "ol"])
        if lst:
            items = [_text(li) for li in lst.find_all("li")]
            items = [item for item in items if item]
            if items:
                return items

    return []


def _scan_times(text: str) -> tuple[int | None, int | None, int | None]:
    """Best-effort prep/cook/servings from free page text.

    These can pick up unrelated numbers, so they're only used here, after
    structured data has already failed.
    """
    prep_time = cook_time = servings = None

    m = _PREP_RE.search(text)
    if m:
        prep_time = minutes_from_mention(int(m.group(1)), m.group(2))

    m = _COOK_RE.search(text)
    if m:
        cook_time = minutes_from_mention(int(m.group(1)), m.group(2))

    m = _SERVINGS_RE.search(text)
    if m:
        servings = int(m.group(1))

    return prep_time, cook_time, servings


def _source_name(url: str) -> str | None:
    try:
        hostname = urlparse(url).hostname
    except ValueError:
        return None
    if not hostname:
        return None
    return hostname.removeprefix("www.")
