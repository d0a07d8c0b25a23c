# untis_subst/core/date_utils.py
import logging
import re
from datetime import date, datetime
from functools import lru_cache
from typing import Dict, Optional

log = logging.getLogger(__name__)

# --- Regular Expressions for Date Parsing ---
# Matches DD.MM.YYYY format
PERIOD_DATE_FULL = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{4})")
# Matches DD.MM.YY format
PERIOD_DATE_TWO_DIGIT_YEAR = re.compile(r"(\d{1,2})\.(\d{1,2})\.(\d{2})(?!\d)")
# Matches "17. Oktober 2026" (German long form)
GERMAN_LONG_DATE = re.compile(r"(\d{1,2})\.\s*([A-Za-zäÄ]+)\s+(\d{4})")
# Matches DD.MM. format (assumes current year if year not specified)
PERIOD_DATE_SHORT = re.compile(r"(\d{1,2})\.(\d{1,2})\.?")
# Matches "17.10.2026 07:45" with optional seconds
LAST_CHANGE_DATETIME = re.compile(
    r"(\d{1,2})\.(\d{1,2})\.(\d{4})\s+(\d{1,2}):(\d{2})(?::(\d{2}))?"
)

GERMAN_MONTHS: Dict[str, int] = {
    "januar": 1, "jänner": 1, "februar": 2, "märz": 3, "maerz": 3, "april": 4,
    "mai": 5, "juni": 6, "juli": 7, "august": 8, "september": 9, "oktober": 10,
    "november": 11, "dezember": 12,
}


def _build_date(year: int, month: int, day: int) -> Optional[date]:
    try:
        return date(year, month, day)
    except ValueError:
        log.debug(f"Invalid calendar date: {year}-{month}-{day}")
        return None


@lru_cache(maxsize=256) # Day titles repeat across pages
def parse_day_date(text: str, year: Optional[int] = None) -> Optional[date]:
    """
    Parses the date out of an Untis day title.

    Supports "17.10.2026 Freitag", "Freitag, 17.10.26", "Freitag, 17. Oktober 2026"
    and "17.10. Freitag". If the title carries no year, the provided 'year' or
    the current system year is used.

    Args:
        text: The title text.
        year: Optional year to assume if not present in the text.

    Returns:
        The parsed date, or None if no known format matches.
    """
    if not text or not isinstance(text, str):
        return None

    match = PERIOD_DATE_FULL.search(text)
    if match:
        day, month, yr = (int(part) for part in match.groups())
        return _build_date(yr, month, day)

    match = PERIOD_DATE_TWO_DIGIT_YEAR.search(text)
    if match:
        day, month, yr = (int(part) for part in match.groups())
        return _build_date(2000 + yr, month, day)

    match = GERMAN_LONG_DATE.search(text)
    if match:
        month = GERMAN_MONTHS.get(match.group(2).lower())
        if month:
            return _build_date(int(match.group(3)), month, int(match.group(1)))

    match = PERIOD_DATE_SHORT.search(text)
    if match:
        default_year = year if year is not None else datetime.now().year
        return _build_date(default_year, int(match.group(2)), int(match.group(1)))

    log.warning(f"Could not parse date from day title: '{text}'")
    return None


def to_iso_date(text: str, year: Optional[int] = None) -> Optional[str]:
    """Converts a day title to an ISO date string (YYYY-MM-DD)."""
    parsed = parse_day_date(text, year)
    return parsed.isoformat() if parsed else None


def parse_last_change(text: Optional[str]) -> Optional[datetime]:
    """
    Parses a last-change timestamp such as "17.10.2026 07:45".

    Returns:
        The datetime, or None if the text carries no timestamp.
    """
    if not text:
        return None
    match = LAST_CHANGE_DATETIME.search(text)
    if not match:
        log.debug(f"No last-change timestamp in '{text}'")
        return None
    day, month, year, hour, minute = (int(part) for part in match.groups()[:5])
    second = int(match.group(6)) if match.group(6) else 0
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        log.warning(f"Invalid last-change timestamp: '{text}'")
        return None
