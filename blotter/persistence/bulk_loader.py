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
"""Loads append-only bulletin reports with a single bulk insert.

Rows are staged column by column into a buffer shaped like the destination
table, then sent to the database in one executemany call instead of one
statement per row.
"""
import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy import Table, insert
from sqlalchemy.ext.asyncio import AsyncSession

from blotter.persistence.database.schema_entity_converter import (
    convert_entity_to_row,
)
from blotter.persistence.entities import Entity


class ColumnarBuffer:
    """Column-oriented staging buffer for rows of |table|. Columns an entity
    does not carry are staged as NULL."""

    def __init__(self, table: Table):
        self.table = table
        self._columns: Dict[str, List[Any]] = {
            column.name: [] for column in table.columns
        }
        self._row_count = 0

    def __len__(self) -> int:
        return self._row_count

    def stage(self, entity: Entity) -> None:
        row = convert_entity_to_row(entity, self.table)
        for column_name, values in self._columns.items():
            values.append(row.get(column_name))
        self._row_count += 1

    def column(self, column_name: str) -> List[Any]:
        return self._columns[column_name]

    def to_rows(self) -> List[Dict[str, Any]]:
        names = list(self._columns)
        return [
            dict(zip(names, values))
            for values in zip(*(self.column(name) for name in names))
        ]


async def bulk_load(
    session: AsyncSession, table: Table, records: Sequence[Entity]
) -> int:
    """Inserts every record in |records| into |table| with one bulk call and
    returns the number of rows loaded. Classification must already have removed
    any record whose identity is stored."""
    if not records:
        return 0

    buffer = ColumnarBuffer(table)
    for record in records:
        buffer.stage(record)

    await session.execute(insert(table), buffer.to_rows())
    logging.info("Bulk loaded [%s] rows into [%s]", len(buffer), table.name)
    return len(buffer)
