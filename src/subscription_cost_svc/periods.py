import re
from datetime import date

from subscription_cost_svc.errors import InvalidFormat

MONTH_YEAR = "MM-YYYY"
YEAR_MONTH = "YYYY-MM"

# Tried in order; the first match wins.
_LAYOUTS = (
    re.compile(r"(?P<month>[0-9]{2})-(?P<year>[0-9]{4})"),
    re.compile(r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})"),
)


def parse_month(raw: str) -> date:
    """
    Parse a month identifier into the first day of that month.

    :param raw: Month in ``MM-YYYY`` or ``YYYY-MM`` layout.
    :return: A date with ``day == 1``.
    :raises InvalidFormat: if neither layout matches.
    """
    for pattern in _LAYOUTS:
        match = pattern.fullmatch(raw)
        if not match:
            continue
        year, month = int(match.group("year")), int(match.group("month"))
        if year >= 1 and 1 <= month <= 12:
            return date(year, month, 1)
    raise InvalidFormat(raw)


def normalize_month(value: date) -> date:
    """Truncate a date (or datetime) to the first day of its month."""
    return date(value.year, value.month, 1)


def format_month(value: date, layout: str = YEAR_MONTH) -> str:
    if layout == MONTH_YEAR:
        return f"{value.month:02d}-{value.year:04d}"
    if layout == YEAR_MONTH:
        return f"{value.year:04d}-{value.month:02d}"
    raise ValueError(f"unknown month layout {layout!r}")


def months_inclusive(start: date, end: date) -> int:
    """
    Count calendar months from ``start`` through ``end``, both included.

    January through January is 1, January through March is 3. An inverted
    range counts as 0.
    """
    months = (end.year - start.year) * 12 + (end.month - start.month) + 1
    return max(months, 0)
