"""
Date of birth parsing and age calculation
"""

import re
from datetime import date


# Ages on the roll are computed as of this date
DEFAULT_REFERENCE_DATE = date(2026, 1, 1)

_ISO_DATE = re.compile(r'^\s*(\d{4})-(\d{1,2})-(\d{1,2})(?:[T\s].*)?$')
# Identity cards print day first: 01/02/1990, 01-02-1990, 01.02.1990
_DAY_FIRST_DATE = re.compile(r'^\s*(\d{1,2})[/.\-](\d{1,2})[/.\-](\d{4})\s*$')
DATE_TOKEN = re.compile(r'\b(\d{1,2}[/.\-]\d{1,2}[/.\-]\d{4}|\d{4}-\d{1,2}-\d{1,2})\b')


def parse_date(value: str) -> date | None:
    """Parse an ISO or day-first date string; None when missing or invalid"""
    if not value:
        return None

    match = _ISO_DATE.match(value)
    if match:
        year, month, day = (int(part) for part in match.groups())
    else:
        match = _DAY_FIRST_DATE.match(value)
        if not match:
            return None
        day, month, year = (int(part) for part in match.groups())

    try:
        return date(year, month, day)
    except ValueError:
        return None


def normalize_dob(value: str) -> str:
    """Return the date as YYYY-MM-DD, or an empty string when unparseable"""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else ""


def parse_reference_date(value: str | None) -> date:
    """Parse the configured reference date, falling back to the default"""
    if not value:
        return DEFAULT_REFERENCE_DATE
    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid reference date: {value!r}")
    return parsed


def calculate_age(dob: str, reference: date = DEFAULT_REFERENCE_DATE) -> str:
    """
    Whole years between the date of birth and the reference date.

    The year difference is reduced by one when the birthday has not yet
    come round in the reference year. Returns an empty string when the
    date of birth is missing or unparseable.
    """
    birth_date = parse_date(dob)
    if birth_date is None:
        return ""

    age = reference.year - birth_date.year
    if (reference.month, reference.day) < (birth_date.month, birth_date.day):
        age -= 1
    return str(age)
