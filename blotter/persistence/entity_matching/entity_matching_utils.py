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
"""Contains util methods for identity resolution."""
from typing import Any, Mapping, Sequence

from blotter.common.str_field_utils import normalize_for_comparison
from blotter.persistence.entities import BulletinReport


def is_logical_match(
    stored_row: Mapping[str, Any],
    incoming: BulletinReport,
    match_fields: Sequence[str],
) -> bool:
    """Returns True if every one of |match_fields| is equal between the stored
    row and the incoming report, ignoring case and surrounding whitespace.
    Missing values compare equal to empty strings."""
    return all(
        normalize_for_comparison(stored_row.get(field))
        == normalize_for_comparison(getattr(incoming, field))
        for field in match_fields
    )
