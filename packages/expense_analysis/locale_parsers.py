"""Czech-locale amount and date parsing.

Both parsers follow a silent-failure policy: ``parse_amount`` returns ``0.0``
and ``parse_date`` returns ``None`` for input they cannot read. The pipeline
drops zero-amount and dateless rows, so an unparseable amount and a genuine
zero amount end up filtered the same way. Callers that need to tell the two
apart must inspect the raw value themselves.
"""

from __future__ import annotations

import re
from datetime import date, datetime

from dateutil import parser as dateutil_parser

# Leading float literal, as read by a lenient "parse the longest numeric
# prefix" float parser ("12.5 Kč" -> 12.5).
_FLOAT_PREFIX_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_WHITESPACE_RE = re.compile(r"\s+")

# Tried in order; the first layout that yields a valid date wins. ``%d`` and
# ``%m`` also accept unpadded values, so "1.2.2025" matches the first entry.
_DATE_LAYOUTS: tuple[str, ...] = (
    "%d.%m.%Y",
    "%Y-%m-%d",
    "%d/%m/%Y",
)

# Fills fields missing from free-form input so results don't depend on today.
_FALLBACK_DEFAULT = datetime(2000, 1, 1)

# "2025/03/04": year leads, so month comes before day.
_YEAR_FIRST_RE = re.compile(r"^\d{4}\D")


def parse_amount(raw: str | None) -> float:
    """Parse a Czech-formatted amount such as ``"-1 234,56"``.

    All whitespace (thousands separators, NBSP) is removed and the first
    decimal comma becomes a period. Returns ``0.0`` when nothing numeric can
    be read.
    """

    if not raw or not isinstance(raw, str):
        return 0.0
    cleaned = _WHITESPACE_RE.sub("", raw).replace(",", ".", 1)
    m = _FLOAT_PREFIX_RE.match(cleaned)
    if not m:
        return 0.0
    try:
        return float(m.group(0))
    except ValueError:  # pragma: no cover - the regex only admits float literals
        return 0.0


def _try_layouts(s: str) -> date | None:
    for fmt in _DATE_LAYOUTS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def parse_date(raw: str | None) -> date | None:
    """Parse a statement date, returning ``None`` when no layout matches.

    Layout priority: ``dd.MM.yyyy`` / ``d.M.yyyy``, ``yyyy-MM-dd``,
    ``dd/MM/yyyy``. A trailing time-of-day (``"01.02.2025 10:15"``) is
    ignored. Anything else is tried as ISO-8601 (``"2025-03-04T08:00:00"``),
    then through a free-form parse that reads day first unless the string
    starts with a four-digit year.
    """

    if not raw:
        return None
    s = str(raw).strip()
    if not s:
        return None

    parsed = _try_layouts(s)
    if parsed is not None:
        return parsed

    first = s.split()[0]
    if first != s:
        parsed = _try_layouts(first)
        if parsed is not None:
            return parsed

    try:
        return dateutil_parser.isoparse(s).date()
    except (ValueError, OverflowError):
        pass

    year_first = _YEAR_FIRST_RE.match(s) is not None
    try:
        parsed_dt = dateutil_parser.parse(
            s, dayfirst=not year_first, yearfirst=year_first, default=_FALLBACK_DEFAULT
        )
    except (ValueError, OverflowError):
        return None
    return parsed_dt.date()


__all__ = ["parse_amount", "parse_date"]
