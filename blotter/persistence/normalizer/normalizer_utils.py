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
"""Utils for converting individual fields of a raw scraped payload."""
import base64
import binascii
import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, TypeVar

from blotter.common import str_field_utils

T = TypeVar("T")


class RawRecord:
    """Read-only view over one scraped payload. Field lookups are
    case-insensitive, since scrapers are inconsistent about key casing (e.g.
    'OffenderNumber' vs 'offendernumber')."""

    def __init__(self, payload: Mapping[str, Any]):
        self._fields: Dict[str, Any] = {str(k).lower(): v for k, v in payload.items()}

    def get(self, field_name: str) -> Any:
        return self._fields.get(field_name.lower())

    def has(self, field_name: str) -> bool:
        return self.get(field_name) is not None


def fn(
    func: Callable[[Any], Optional[T]],
    field_name: str,
    raw: RawRecord,
    default: Optional[T] = None,
) -> Optional[T]:
    """Return the result of applying the given function to the field on the
    raw record, returning |default| if the field is unset or the function
    returns None.
    """
    value = None
    if raw.has(field_name):
        value = func(raw.get(field_name))
    return value if value is not None else default


def parse_str(value: Any) -> Optional[str]:
    """Scraped text is kept as sent. Non-string scalars (e.g. a numeric height) are
    stringified."""
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        raise ValueError(f"Expected a scalar text value, found {type(value)}")
    return str(value)


def parse_identifier(value: Any) -> Optional[str]:
    """Identities are trimmed so that whitespace differences between scrapes do not
    produce distinct identities. Blank identifiers are treated as absent."""
    as_str = parse_str(value)
    if as_str is None or str_field_utils.is_placeholder(as_str):
        return None
    return as_str.strip()


def parse_opt_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse int value: {value}")
    if isinstance(value, int):
        return value
    as_str = parse_str(value)
    if as_str is None or str_field_utils.is_placeholder(as_str):
        return None
    return str_field_utils.parse_int(as_str)


def parse_opt_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        raise ValueError(f"Cannot parse float value: {value}")
    if isinstance(value, (int, float)):
        return float(value)
    as_str = parse_str(value)
    if as_str is None or str_field_utils.is_placeholder(as_str):
        return None
    return str_field_utils.parse_float(as_str)


def parse_opt_datetime(value: Any) -> Optional[datetime.datetime]:
    if isinstance(value, datetime.datetime):
        return str_field_utils.to_naive_utc(value)
    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    as_str = parse_str(value)
    if as_str is None:
        return None
    return str_field_utils.parse_datetime(as_str)


def parse_opt_date(value: Any) -> Optional[datetime.date]:
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value
    as_str = parse_str(value)
    if as_str is None:
        return None
    return str_field_utils.parse_date(as_str)


def parse_photo(value: Any) -> Optional[bytes]:
    """Photos arrive base64-encoded in JSON payloads. An empty photo is treated as
    no photo."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value) or None
    if not isinstance(value, str):
        raise ValueError(f"Expected base64 photo string, found {type(value)}")
    if not value.strip():
        return None
    try:
        decoded = base64.b64decode(value, validate=True)
    except binascii.Error as e:
        raise ValueError("Photo payload is not valid base64") from e
    return decoded or None


def parse_object_list(value: Any) -> List[RawRecord]:
    """Parses a nested list of child objects (e.g. charges)."""
    if not isinstance(value, list):
        raise ValueError(f"Expected a list of objects, found {type(value)}")
    children = []
    for item in value:
        if not isinstance(item, Mapping):
            raise ValueError(f"Expected a child object, found {type(item)}")
        children.append(RawRecord(item))
    return children


def parse_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        raise ValueError(f"Expected a list of strings, found {type(value)}")
    parsed = [parse_str(item) for item in value if item is not None]
    return [item for item in parsed if item is not None]
