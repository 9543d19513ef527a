"""
Field normalizers for loosely formatted statement tokens.

Pure functions, no I/O:
- parse_flexible_date: many date layouts → YYYY-MM-DD
- extract_amount: "₹500", "$1,000", "€100.50" → Decimal
- fix_type: common misspellings of income/expense → canonical token

Supported date layouts (tried in order, full-string match only):
- 2024-12-25, 25-12-2024, 25/12/2024, 2024/12/25, 2024.12.25, 25.12.2024
- December 25, 2024 / 25 December 2024 / 25 Dec 2024 / Dec 25 2024
- 25th December 2024 / 25th Dec 2024
- 25-12-24, 25/12/24, 25.12.24
"""

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

# English month names (statements are parsed locale-independently)
MONTHS = {
    "january": 1,
    "february": 2,
    "march": 3,
    "april": 4,
    "may": 5,
    "june": 6,
    "july": 7,
    "august": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12,
}

MONTHS_SHORT = {name[:3]: number for name, number in MONTHS.items()}

_MONTH_NAME = r"(?P<month_name>" + "|".join(MONTHS) + r")"
_MONTH_SHORT = r"(?P<month_name>" + "|".join(MONTHS_SHORT) + r")"

# Date patterns (order matters: first full match wins)
DATE_PATTERNS = [
    # 2024-12-25
    (r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})", "iso"),
    # 25-12-2024
    (r"(?P<day>\d{2})-(?P<month>\d{2})-(?P<year>\d{4})", "day_first_dash"),
    # 25/12/2024
    (r"(?P<day>\d{2})/(?P<month>\d{2})/(?P<year>\d{4})", "day_first_slash"),
    # 2024/12/25
    (r"(?P<year>\d{4})/(?P<month>\d{2})/(?P<day>\d{2})", "year_first_slash"),
    # 2024.12.25
    (r"(?P<year>\d{4})\.(?P<month>\d{2})\.(?P<day>\d{2})", "year_first_dot"),
    # 25.12.2024
    (r"(?P<day>\d{2})\.(?P<month>\d{2})\.(?P<year>\d{4})", "day_first_dot"),
    # December 25, 2024
    (_MONTH_NAME + r" (?P<day>\d{1,2}), (?P<year>\d{4})", "month_name_first"),
    # 25 December 2024
    (r"(?P<day>\d{1,2}) " + _MONTH_NAME + r" (?P<year>\d{4})", "month_name"),
    # 25 Dec 2024
    (r"(?P<day>\d{1,2}) " + _MONTH_SHORT + r" (?P<year>\d{4})", "month_short"),
    # Dec 25 2024
    (_MONTH_SHORT + r" (?P<day>\d{1,2}) (?P<year>\d{4})", "month_short_first"),
    # 25th December 2024
    (r"(?P<day>\d{1,2})(?:st|nd|rd|th) " + _MONTH_NAME + r" (?P<year>\d{4})", "ordinal"),
    # 25th Dec 2024
    (r"(?P<day>\d{1,2})(?:st|nd|rd|th) " + _MONTH_SHORT + r" (?P<year>\d{4})", "ordinal_short"),
    # 25-12-24
    (r"(?P<day>\d{2})-(?P<month>\d{2})-(?P<short_year>\d{2})", "day_first_dash_short"),
    # 25/12/24
    (r"(?P<day>\d{2})/(?P<month>\d{2})/(?P<short_year>\d{2})", "day_first_slash_short"),
    # 25.12.24
    (r"(?P<day>\d{2})\.(?P<month>\d{2})\.(?P<short_year>\d{2})", "day_first_dot_short"),
]

_COMPILED_DATE_PATTERNS = [
    (re.compile(pattern, re.IGNORECASE), pattern_type) for pattern, pattern_type in DATE_PATTERNS
]

# Two-digit years up to this value belong to the 2000s, above it to the 1900s
SHORT_YEAR_PIVOT = 68

# Misspellings and abbreviations seen in hand-made statements
TYPE_ALIASES = {
    "expnse": "expense",
    "exp": "expense",
    "ex": "expense",
    "incom": "income",
    "inc": "income",
    "in": "income",
}

_AMOUNT_NOISE = re.compile(r"[^\d.\-]")
_LEADING_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")


def _date_from_match(match: re.Match) -> date | None:
    """Build a calendar date from a DATE_PATTERNS match, or None if impossible."""
    groups = match.groupdict()

    if groups.get("short_year") is not None:
        short_year = int(groups["short_year"])
        year = short_year + (2000 if short_year <= SHORT_YEAR_PIVOT else 1900)
    else:
        year = int(groups["year"])

    if groups.get("month_name") is not None:
        name = groups["month_name"].lower()
        month = MONTHS.get(name) or MONTHS_SHORT[name]
    else:
        month = int(groups["month"])

    try:
        return date(year, month, int(groups["day"]))
    except ValueError:
        return None


def parse_flexible_date(value: Any) -> str | None:
    """
    Parse a date written in any of the supported layouts.

    Args:
        value: Date text, or an already structured date/datetime

    Returns:
        Date as YYYY-MM-DD, or None if no layout matches
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if value is None:
        return None

    text = str(value).strip()
    if not text:
        return None

    for pattern, _pattern_type in _COMPILED_DATE_PATTERNS:
        match = pattern.fullmatch(text)
        if match:
            parsed = _date_from_match(match)
            if parsed:
                return parsed.isoformat()
    return None


def extract_amount(value: Any) -> Decimal:
    """
    Extract a numeric amount from a currency-decorated token.

    None yields 0 and a Decimal is returned unchanged. Anything else, text or
    a numeric spreadsheet cell, is converted with str(); everything except
    digits, '.' and '-' is removed, then the leading number of what
    remains is parsed. Unparseable input yields 0.

    Examples:
        >>> extract_amount("₹500")
        Decimal('500')
        >>> extract_amount("$1,000")
        Decimal('1000')
        >>> extract_amount("abc")
        Decimal('0')
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value

    cleaned = _AMOUNT_NOISE.sub("", str(value))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return Decimal("0")

    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return Decimal("0")


def fix_type(token: str | None) -> str | None:
    """Lowercase a type token and repair known misspellings."""
    if token is None:
        return None
    value = str(token).strip().lower()
    return TYPE_ALIASES.get(value, value)
