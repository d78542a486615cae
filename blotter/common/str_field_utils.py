# Recidiviz - a data platform for criminal justice reform
# Copyright (C) 2026 Recidiviz, Inc.
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
# =============================================================================
"""
Common utils for processing str fields scraped from external sites (parsing into
primitive types, normalizing, truncating, etc).
"""

import datetime
import re
from typing import Optional

import dateparser

# Placeholder values some scraped sites render into empty cells.
_PLACEHOLDER_VALUES = {"&NBSP;", "&#160;"}

_SCRAPED_DATETIME_FORMATS = (
    "%m/%d/%Y %H:%M",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y",
)


def normalize(s: str) -> str:
    """Normalizes whitespace within the provided string by converting all groups
    of whitespaces into ' ', and uppercases the string."""
    if s is None or s == "" or s.isspace():
        raise ValueError("Cannot normalize None or empty/whitespace string")
    return " ".join(s.split()).upper()


def normalize_for_comparison(s: Optional[str]) -> str:
    """Returns a trimmed, case-folded version of |s| for case-insensitive equality
    checks. None is treated as the empty string."""
    if s is None:
        return ""
    return s.strip().casefold()


def is_placeholder(s: Optional[str]) -> bool:
    """Returns True if the scraped value carries no information, i.e. is None,
    blank, or an HTML whitespace placeholder."""
    if s is None or s == "" or s.isspace():
        return True
    return s.strip().upper() in _PLACEHOLDER_VALUES


def truncate(s: Optional[str], max_length: Optional[int]) -> Optional[str]:
    """Truncates |s| to at most |max_length| characters. Values within the limit,
    None, and unbounded columns (max_length of None) are returned unchanged."""
    if s is None or max_length is None or len(s) <= max_length:
        return s
    return s[:max_length]


def parse_float(float_string: str) -> float:
    """Parses a string and returns a float."""
    try:
        return float(float_string.strip().replace(",", ""))
    except Exception as e:
        raise ValueError(f"Cannot parse float value: {float_string}") from e


def parse_int(int_string: str) -> int:
    """Parses a string and returns an int. If the string has a decimal, the floor of
    the value is returned."""
    try:
        return int(float(normalize(int_string)))
    except Exception as e:
        raise ValueError(f"Cannot parse int value: {int_string}") from e


def to_naive_utc(dt: datetime.datetime) -> datetime.datetime:
    """Timestamp columns carry no zone, so values with an offset are stored as UTC."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(datetime.timezone.utc).replace(tzinfo=None)


def is_iso_datetime(datetime_str: str) -> bool:
    try:
        datetime.datetime.fromisoformat(datetime_str)
    except ValueError:
        return False

    return True


def parse_datetime(date_string: str) -> Optional[datetime.datetime]:
    """Parses a scraped string into a datetime.datetime object.

    ISO-8601 strings (what scrapers produce when serializing native datetimes to
    JSON) are parsed directly; the month-first formats used by the bulletin and
    roster sites are tried next, and anything else is handed to dateparser.
    Results with a UTC offset are converted to naive UTC.
    """
    if is_placeholder(date_string):
        return None

    date_string = date_string.strip()
    # fromisoformat() only accepts a trailing 'Z' from Python 3.11 on.
    iso_candidate = re.sub(r"Z$", "+00:00", date_string)
    if is_iso_datetime(iso_candidate):
        return to_naive_utc(datetime.datetime.fromisoformat(iso_candidate))

    for fmt in _SCRAPED_DATETIME_FORMATS:
        try:
            return datetime.datetime.strptime(date_string, fmt)
        except ValueError:
            continue

    parsed = dateparser.parse(
        date_string, languages=["en"], settings={"PREFER_DAY_OF_MONTH": "first"}
    )
    if parsed:
        return to_naive_utc(parsed)

    raise ValueError(f"cannot parse date: {date_string}")


def parse_date(date_string: str) -> Optional[datetime.date]:
    """Parses a string into a datetime.date object."""
    parsed = parse_datetime(date_string)
    return parsed.date() if parsed else None
