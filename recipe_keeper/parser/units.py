"""Unit table: canonical unit names and the surface forms that map to them."""

import re

# Canonical name -> accepted spellings. The key is what parsed output carries.
UNITS: dict[str, tuple[str, ...]] = {
    # Volume
    "cup": ("cups", "cup", "c", "c."),
    "tablespoon": ("tablespoons", "tablespoon", "tbsp", "tbsps", "tbs", "tb", "T"),
    "teaspoon": ("teaspoons", "teaspoon", "tsp", "tsps", "ts", "t"),
    "fluid ounce": (
        "fluid ounces",
        "fluid ounce",
        "fl oz",
        "fl. oz",
        "fl oz.",
        "fluid oz",
    ),
    "milliliter": ("milliliters", "milliliter", "ml", "mL"),
    "liter": ("liters", "liter", "l", "L"),
    "gallon": ("gallons", "gallon", "gal"),
    "quart": ("quarts", "quart", "qt", "qts"),
    "pint": ("pints", "pint", "pt", "pts"),
    # Weight
    "pound": ("pounds", "pound", "lbs", "lb", "lb."),
    "ounce": ("ounces", "ounce", "oz", "oz."),
    "gram": ("grams", "gram", "g", "gr", "gm"),
    "kilogram": ("kilograms", "kilogram", "kg", "kgs"),
    "milligram": ("milligrams", "milligram", "mg"),
    # Count
    "piece": ("pieces", "piece", "pc", "pcs"),
    "slice": ("slices", "slice"),
    "clove": ("cloves", "clove"),
    "can": ("cans", "can"),
    "package": ("packages", "package", "pkg", "pkgs"),
    "bunch": ("bunches", "bunch"),
    "dash": ("dashes", "dash"),
    "pinch": ("pinches", "pinch"),
    "handful": ("handfuls", "handful"),
    "sprig": ("sprigs", "sprig"),
    "stick": ("sticks", "stick"),
}

# Size words qualify a countable item ("1 large egg"). They are emitted
# lower-cased as written, not mapped to a canonical spelling.
SIZE_DESCRIPTORS: tuple[str, ...] = ("small", "medium", "med", "large", "lg")

_EXACT: dict[str, str] = {}
_FOLDED: dict[str, str] = {}
for _canonical, _aliases in UNITS.items():
    for _alias in _aliases:
        _EXACT.setdefault(_alias, _canonical)
        _FOLDED.setdefault(_alias.lower(), _canonical)

ALL_UNIT_ALIASES: tuple[str, ...] = tuple(
    sorted(
        {*(a for aliases in UNITS.values() for a in aliases), *SIZE_DESCRIPTORS},
        key=lambda a: (-len(a), a),
    )
)

# Longest spellings first so "tbsp" is never read as "t" and "large" never as "l".
UNIT_PATTERN = "|".join(re.escape(a) for a in ALL_UNIT_ALIASES)


def normalize_unit(unit: str) -> str:
    """Map a matched surface form to its canonical unit name.

    Exact-case spellings win over case-folded ones, so "T" is a tablespoon
    and "t" a teaspoon. Unknown units come back unchanged.
    """
    token = unit.strip()
    if token.lower() in SIZE_DESCRIPTORS:
        return token.lower()
    if token in _EXACT:
        return _EXACT[token]
    return _FOLDED.get(token.lower(), token)
