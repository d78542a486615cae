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
"""Computes the content-derived identity of a daily bulletin row."""
import hashlib
from typing import Optional

from blotter.common.str_field_utils import normalize_for_comparison

ROW_HASH_SEPARATOR = "|"


def compute_row_hash(
    *,
    key: Optional[str],
    name: Optional[str],
    time: Optional[str],
    location: Optional[str],
) -> str:
    """Returns the upper-cased hex MD5 digest of the stable fields of a bulletin
    row. Fields are trimmed and case-folded first, so re-scraping the same row
    always yields the same identity."""
    # Only fields that are stable across re-scrapes; the site-assigned id is not.
    content = ROW_HASH_SEPARATOR.join(
        normalize_for_comparison(value) for value in (key, name, time, location)
    )
    # MD5 is used as a content fingerprint here, not for security.
    digest = hashlib.md5(content.encode("utf-8"), usedforsecurity=False)
    return digest.hexdigest().upper()


def normalize_row_hash(row_hash: str) -> str:
    """Bulletin row hashes are compared case-insensitively and stored upper-cased."""
    return row_hash.strip().upper()
