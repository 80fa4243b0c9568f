"""Split a leading amount and unit off an ingredient line.

The grammar is an ordered list of (rule name, handler) pairs. Each handler
either returns a match or None, and the first match wins. Keeping the rules
separate makes the priority of each one visible and testable on its own.
"""

import re
from typing import Callable, NamedTuple

from recipe_keeper.parser.units import UNIT_PATTERN, normalize_unit

# Most specific first: trying the whole number before the mixed fraction
# would read "1 1/2" as amount "1" followed by a stray "1/2".
AMOUNT_PATTERNS: tuple[tuple[str, str], ...] = (
    ("mixed_fraction", r"\d+\s+\d+\s*/\s*\d+"),
    ("decimal", r"\d+\.\d+"),
    ("range", r"\d+\s*(?:-|to)\s*\d+"),
    ("fraction", r"\d+\s*/\s*\d+"),
    ("whole", r"\d+"),
)

_AMOUNT = "(?P<amount>" + "|".join(p for _, p in AMOUNT_PATTERNS) + ")"
_UNIT = f"(?P<unit>{UNIT_PATTERN})"

_AMOUNT_UNIT_RE = re.compile(rf"^{_AMOUNT}\s*{_UNIT}(?:\.|\s|$)", re.IGNORECASE)
_AMOUNT_ONLY_RE = re.compile(rf"^{_AMOUNT}\s+", re.IGNORECASE)
_MULTIWORD_UNIT_RE = re.compile(r"^(?:fluid\s+ounces?|fl\.\s*oz\.?)", re.IGNORECASE)
_UNIT_ONLY_RE = re.compile(rf"^{_UNIT}(?:\.\s*|\s+)(?:of\s+)?", re.IGNORECASE)


class AmountUnitMatch(NamedTuple):
    amount: str | None
    unit: str | None
    remainder: str
    rule: str


def _match_amount_unit(text: str) -> AmountUnitMatch | None:
    m = _AMOUNT_UNIT_RE.match(text)
    if not m:
        return None
    return AmountUnitMatch(
        amount=m.group("amount").strip(),
        unit=normalize_unit(m.group("unit")),
        remainder=text[m.end() :].strip(),
        rule="amount_unit",
    )


def _match_amount_multiword_unit(text: str) -> AmountUnitMatch | None:
    # The single-token unit scan can't see across the space in "fl. oz".
    m = _AMOUNT_ONLY_RE.match(text)
    if not m:
        return None
    after = text[m.end() :]
    unit_match = _MULTIWORD_UNIT_RE.match(after)
    if not unit_match:
        return None
    return AmountUnitMatch(
        amount=m.group("amount").strip(),
        unit="fluid ounce",
        remainder=after[unit_match.end() :].strip(),
        rule="amount_multiword_unit",
    )


def _match_amount_only(text: str) -> AmountUnitMatch | None:
    m = _AMOUNT_ONLY_RE.match(text)
    if not m:
        return None
    return AmountUnitMatch(
        amount=m.group("amount").strip(),
        unit=None,
        remainder=text[m.end() :].strip(),
        rule="amount_only",
    )


def _match_unit_only(text: str) -> AmountUnitMatch | None:
    m = _UNIT_ONLY_RE.match(text)
    if not m:
        return None
    return AmountUnitMatch(
        amount=None,
        unit=normalize_unit(m.group("unit")),
        remainder=text[m.end() :].strip(),
        rule="unit_only",
    )


RULES: tuple[tuple[str, Callable[[str], AmountUnitMatch | None]], ...] = (
    ("amount_unit", _match_amount_unit),
    ("amount_multiword_unit", _match_amount_multiword_unit),
    ("amount_only", _match_amount_only),
    ("unit_only", _match_unit_only),
)


def extract_amount_and_unit(text: str) -> AmountUnitMatch:
    """Return the amount, canonical unit and remainder of an ingredient line."""
    for _, rule in RULES:
        match = rule(text)
        if match is not None:
            return match
    return AmountUnitMatch(amount=None, unit=None, remainder=text.strip(), rule="no_match")
