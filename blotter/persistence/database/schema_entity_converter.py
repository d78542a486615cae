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
"""Converts persistence layer entities into row dicts for their schema tables."""
from typing import Any, Dict, Iterable

import attr
from sqlalchemy import Table

from blotter.persistence.entities import Entity


def convert_entity_to_row(
    entity: Entity, table: Table, exclude: Iterable[str] = ()
) -> Dict[str, Any]:
    """Returns the scalar attributes of |entity| that are stored in a column of
    the same name on |table|. Child collections are never part of the row."""
    excluded = set(exclude)
    row = {}
    for field in attr.fields(type(entity)):
        if field.name in excluded or field.name not in table.c:
            continue
        value = getattr(entity, field.name)
        if isinstance(value, list):
            continue
        row[field.name] = value
    return row
