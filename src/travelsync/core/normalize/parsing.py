"""
Parsing utilities for normalizing extracted data.

Handles string, date, time, airport code, email, enum and number values
coming out of AI extraction. Every function is best-effort: values that
cannot be normalized become None (or the supplied default), nothing raises.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from enum import Enum
from typing import Any

import dateparser

from ..config.models import DocumentType, PassengerType
from ..config.synonyms import (
    DEFAULT_PASSENGER_TYPE,
    DOCUMENT_TYPE_SYNONYMS,
    NATIONALITY_SYNONYMS,
    PASSENGER_TYPE_ALIASES,
    SEX_ALIASES,
    SEX_CODES,
    find_canonical,
)
from ..logging import get_logger

logger = get_logger("normalize.parsing")

DEFAULT_DATE_LANGUAGES = ("es", "en", "pt")

_ISO_DATE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_TIME = re.compile(r"^(\d{2}):(\d{2})$")
_IATA = re.compile(r"^[A-Z]{3}$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


# =============================================================================
# Strings
# =============================================================================


def normalize_string(value: Any) -> str | None:
    """Trim a string; empty strings and non-strings become None."""
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None


def normalize_whitespace(text: str | None) -> str:
    """Normalize whitespace in text."""
    if text is None:
        return ""
    return " ".join(text.split())


# =============================================================================
# Date Parsing
# =============================================================================


def normalize_date(
    value: Any,
    *,
    prefer_day_first: bool = True,
    languages: Iterable[str] | None = DEFAULT_DATE_LANGUAGES,
) -> str | None:
    """Normalize a date to an ISO ``YYYY-MM-DD`` string.

    Handles:
    - ISO dates (YYYY-MM-DD)
    - Slash dates (DD/MM/YYYY and MM/DD/YYYY)
    - date/datetime objects
    - Anything dateparser resolves to a full day, month and year
      ("15 de enero de 2026", "Jan 15, 2026")

    When both slash components are <= 12 the reading is ambiguous and
    ``prefer_day_first`` picks the order tried first. A value that matches
    one of the strict patterns but is not a real calendar date (day 32,
    February 30) returns None without falling through to dateparser.

    Args:
        value: Raw extracted value
        prefer_day_first: Prefer DD/MM/YYYY over MM/DD/YYYY
        languages: Languages handed to dateparser

    Returns:
        ISO date string, or None when the value is not a date
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    text = normalize_string(value)
    if text is None:
        return None

    match = _ISO_DATE.match(text)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _safe_iso(year, month, day)

    match = _SLASH_DATE.match(text)
    if match:
        first, second, year = (int(g) for g in match.groups())
        orders = [(second, first), (first, second)]
        if not prefer_day_first:
            orders.reverse()
        for month, day in orders:
            iso = _safe_iso(year, month, day)
            if iso:
                return iso
        return None

    return _parse_generic_date(text, prefer_day_first=prefer_day_first, languages=languages)


def _safe_iso(year: int, month: int, day: int) -> str | None:
    """Build an ISO date string, or None if the components are not a real date."""
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def _parse_generic_date(
    text: str,
    *,
    prefer_day_first: bool,
    languages: Iterable[str] | None,
) -> str | None:
    """Fall back to dateparser for natural-language dates."""
    # Bare numbers are amounts or codes, not dates
    if re.fullmatch(r"[\d\s]+", text) or not re.search(r"\d", text):
        return None

    settings = {
        "DATE_ORDER": "DMY" if prefer_day_first else "MDY",
        "PREFER_DAY_OF_MONTH": "first",
        "RETURN_AS_TIMEZONE_AWARE": False,
        "REQUIRE_PARTS": ["day", "month", "year"],
    }

    try:
        parsed = dateparser.parse(
            text,
            languages=list(languages) if languages else None,
            settings=settings,
        )
    except Exception as e:
        logger.debug("dateparser failed on %r: %s", text, e)
        return None

    if parsed is None:
        logger.debug("Unparseable date: %r", text)
        return None
    return parsed.date().isoformat()


def to_ui_date(value: Any, *, prefer_day_first: bool = True) -> str | None:
    """Format a date as DD/MM/YYYY, the format the booking UI expects.

    Args:
        value: Any value accepted by normalize_date
        prefer_day_first: Ambiguity rule for slash inputs

    Returns:
        DD/MM/YYYY string, or None when the value is not a date
    """
    iso = normalize_date(value, prefer_day_first=prefer_day_first)
    if iso is None:
        return None
    year, month, day = iso.split("-")
    return f"{day}/{month}/{year}"


def days_between(start: str | None, end: str | None) -> int | None:
    """Whole days from one ISO date to another, floored at 0.

    Returns None unless both dates are present and valid.
    """
    if not start or not end:
        return None
    try:
        delta = date.fromisoformat(end) - date.fromisoformat(start)
    except ValueError:
        return None
    return max(0, math.ceil(delta.total_seconds() / 86400))


# =============================================================================
# Times, Codes and Contact Data
# =============================================================================


def normalize_time(value: Any) -> str | None:
    """Validate a 24h ``HH:MM`` time; anything else becomes None."""
    text = normalize_string(value)
    if text is None:
        return None

    match = _TIME.match(text)
    if not match:
        return None

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return text


def normalize_iata(value: Any) -> str | None:
    """Uppercase and validate a 3-letter IATA airport code."""
    text = normalize_string(value)
    if text is None:
        return None
    code = text.upper()
    return code if _IATA.match(code) else None


def normalize_email(value: Any) -> str | None:
    """Lowercase and validate an email address."""
    text = normalize_string(value)
    if text is None:
        return None
    email = text.lower()
    return email if _EMAIL.match(email) else None


# =============================================================================
# Enumerations
# =============================================================================


def normalize_enum(
    value: Any,
    allowed: Iterable[str] | type[Enum],
    default: str | None = None,
    *,
    aliases: Mapping[str, str] | None = None,
) -> str | None:
    """Match a value case-insensitively against an allowed set.

    Args:
        value: Raw value
        allowed: Allowed members (strings, or a str-valued Enum class)
        default: Returned when the value does not match (may be None)
        aliases: Extra spellings mapped onto allowed members

    Returns:
        The canonical member as spelled in ``allowed``, else ``default``
    """
    if isinstance(value, Enum):
        value = value.value

    text = normalize_string(value)
    if text is None:
        return default

    if isinstance(allowed, type) and issubclass(allowed, Enum):
        members = [str(m.value) for m in allowed]
    else:
        members = [str(m) for m in allowed]

    key = text.upper()
    if aliases:
        upper_aliases = {k.upper(): v for k, v in aliases.items()}
        key = upper_aliases.get(key, key).upper()

    for member in members:
        if member.upper() == key:
            return member

    return default


def normalize_passenger_type(value: Any) -> str:
    """Passenger category code, ADT accepted as ADU, default ADU."""
    result = normalize_enum(
        value,
        PassengerType,
        DEFAULT_PASSENGER_TYPE,
        aliases=PASSENGER_TYPE_ALIASES,
    )
    return result or DEFAULT_PASSENGER_TYPE


def normalize_sex(value: Any) -> str | None:
    """Sex code M or F."""
    return normalize_enum(value, SEX_CODES, None, aliases=SEX_ALIASES)


def normalize_document_type(value: Any, default: str | None = None) -> str | None:
    """Document type code (DNI, PAS, CI, LE, LC)."""
    text = normalize_string(value)
    if text is None:
        return default

    direct = normalize_enum(text, DocumentType)
    if direct:
        return direct

    return find_canonical(text, DOCUMENT_TYPE_SYNONYMS) or default


def normalize_nationality(value: Any) -> str | None:
    """Nationality as an uppercase country name.

    Known demonyms and ISO codes map to the country name used by the
    booking application; anything else is kept, uppercased.
    """
    text = normalize_string(value)
    if text is None:
        return None

    canonical = find_canonical(text, NATIONALITY_SYNONYMS)
    if canonical:
        return canonical
    return normalize_whitespace(text).upper()


# =============================================================================
# Numbers
# =============================================================================


def _to_number(value: Any) -> float | None:
    """Coerce ints, floats and numeric strings to float."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(" ", "")
        if not text:
            return None
        # European format: 1.234,56
        if "," in text and text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def normalize_number(value: Any, default: float | int = 0) -> float | int:
    """Numeric value, or ``default`` when the value is not a number.

    Integral values come back as int so that 5 and "5" compare equal
    after stringification.
    """
    number = _to_number(value)
    if number is None:
        return default
    return int(number) if number.is_integer() else number


def normalize_count(value: Any, default: int = 0) -> int:
    """Non-negative integer count (passenger counts, nights, base pax)."""
    number = _to_number(value)
    if number is None:
        return default
    return max(0, math.ceil(number))


def normalize_confidence(value: Any, default: float = 0.5) -> float:
    """Clamp a confidence score to [0, 1]; non-numeric becomes ``default``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    if math.isnan(value):
        return default
    return min(1.0, max(0.0, float(value)))
