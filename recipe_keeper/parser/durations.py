"""Duration parsing for recipe times."""

import re

_ISO_DURATION_RE = re.compile(
    r"P(?:(?P<days>\d+)D)?"
    r"(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:(?P<seconds>\d+(?:\.\d+)?)S)?)?",
    re.IGNORECASE,
)

_HOUR_UNITS = {"hour", "hours", "hr", "hrs"}


def parse_duration(value) -> int | None:
    """Convert an ISO 8601 duration such as "PT1H30M" to whole minutes.

    Returns None when the value is missing or unparseable, never 0 for
    "unknown". Integers are taken to be minutes already.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None

    m = _ISO_DURATION_RE.fullmatch(value.strip())
    if not m or not any(m.groupdict().values()):
        return None

    days = int(m.group("days") or 0)
    hours = int(m.group("hours") or 0)
    minutes = int(m.group("minutes") or 0)
    seconds = float(m.group("seconds") or 0)
    return days * 24 * 60 + hours * 60 + minutes + int(seconds // 60)


def minutes_from_mention(amount: int, unit: str) -> int:
    """Convert a free-text "<n> hours|minutes" mention to minutes."""
    if unit.lower() in _HOUR_UNITS:
        return amount * 60
    return amount
