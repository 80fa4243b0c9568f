"""Ingredient line parsing and formatting."""

import logging
import re

from recipe_keeper.models import ParsedIngredient
from recipe_keeper.parser.amounts import extract_amount_and_unit

logger = logging.getLogger(__name__)

UNICODE_FRACTIONS = {
    "½": "1/2",
    "⅓": "1/3",
    "⅔": "2/3",
    "¼": "1/4",
    "¾": "3/4",
    "⅕": "1/5",
    "⅖": "2/5",
    "⅗": "3/5",
    "⅘": "4/5",
    "⅙": "1/6",
    "⅚": "5/6",
    "⅛": "1/8",
    "⅜": "3/8",
    "⅝": "5/8",
    "⅞": "7/8",
}

_FRACTION_CHARS = "".join(UNICODE_FRACTIONS)
_GLUED_FRACTION_RE = re.compile(rf"(\d)([{_FRACTION_CHARS}])")
# Only a parenthetical at the very end (optionally followed by a comma) is notes.
_TRAILING_NOTES_RE = re.compile(r"\(([^)]+)\)(?:\s*$|,\s*$)")
_BULLET_RE = re.compile(r"^[\-\*•▪→>]+\s*")
_ORDINAL_RE = re.compile(r"^\d+[.)]\s+")


def normalize_fractions(text: str) -> str:
    """Replace unicode vulgar fractions with ASCII "n/d"."""
    # "1½" -> "1 ½" so it reads as a mixed fraction rather than "11/2"
    text = _GLUED_FRACTION_RE.sub(r"\1 \2", text)
    for char, ascii_fraction in UNICODE_FRACTIONS.items():
        text = text.replace(char, ascii_fraction)
    return text


def parse_ingredient_line(line: str) -> ParsedIngredient:
    """Parse one ingredient line into amount, unit, ingredient and notes.

    Never raises: empty or non-string input gives an empty ingredient.
    """
    if not isinstance(line, str) or not line.strip():
        return ParsedIngredient(ingredient="")

    working = normalize_fractions(line.strip())

    notes = None
    notes_match = _TRAILING_NOTES_RE.search(working)
    if notes_match:
        notes = notes_match.group(1).strip() or None
        working = (working[: notes_match.start()] + working[notes_match.end() :]).strip()

    working = _BULLET_RE.sub("", working, count=1)
    working = _ORDINAL_RE.sub("", working, count=1)

    match = extract_amount_and_unit(working)
    logger.debug("Ingredient %r matched rule %s", line, match.rule)

    return ParsedIngredient(
        amount=match.amount or None,
        unit=match.unit or None,
        ingredient=match.remainder.strip(),
        notes=notes,
    )


def parse_ingredient_lines(lines: list[str]) -> list[ParsedIngredient]:
    return [parse_ingredient_line(line) for line in lines]


def format_ingredient(parsed: ParsedIngredient) -> str:
    """Render a parsed ingredient back to a display string."""
    parts = [p for p in (parsed.amount, parsed.unit, parsed.ingredient) if p]
    result = " ".join(parts)
    if parsed.notes:
        result = f"{result} ({parsed.notes})" if result else f"({parsed.notes})"
    return result
