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
"""Writes resolved records to the database.

For every record the parent row is inserted or updated, every child collection
is replaced in full and, when the record carries one, its photo is upserted.
All statements run on the caller's session, inside the batch's transaction;
nothing here commits or rolls back.
"""
import datetime
import logging
from typing import Any, Dict

import attr
from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence import entities
from blotter.persistence.database import schema
from blotter.persistence.database.database import PARENT_TABLE_BY_KIND
from blotter.persistence.database.schema_entity_converter import (
    convert_entity_to_row,
)
from blotter.persistence.entity_matching.entity_matching_types import (
    MatchClassification,
    ResolutionResult,
)

# Parent columns stamped with the time of the write.
_WRITE_TIMESTAMP_COLUMNS = ("last_updated", "updated_at")


@attr.s(kw_only=True)
class UpsertCounts:
    inserted: int = attr.ib(default=0)
    updated: int = attr.ib(default=0)
    skipped: int = attr.ib(default=0)


class UpsertExecutor:
    """Applies a ResolutionResult for one entity kind.

    New records are inserted. Records whose identity is already known are
    updated when their kind updates on re-sighting, and skipped otherwise.
    Logical duplicates are always skipped.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def apply(
        self, entity_kind: EntityKind, resolution: ResolutionResult
    ) -> UpsertCounts:
        table = PARENT_TABLE_BY_KIND[entity_kind].__table__
        counts = UpsertCounts()
        for classified in resolution.classified:
            record = classified.record
            if classified.is_new:
                await self._insert_parent(table, record)
                counts.inserted += 1
            elif (
                entity_kind.updates_on_resighting
                and classified.classification is MatchClassification.EXACT_DUPLICATE
            ):
                await self._update_parent(table, record)
                counts.updated += 1
            else:
                counts.skipped += 1
                continue

            await self._replace_children(record)
            await self._upsert_photo(record)

        logging.info(
            "Wrote %s records: [%s] inserted, [%s] updated, [%s] skipped",
            entity_kind.value,
            counts.inserted,
            counts.updated,
            counts.skipped,
        )
        return counts

    def _parent_row(self, table: Table, record: entities.RootEntity) -> Dict[str, Any]:
        # A missing photo must never clear a stored one, so photo_data is only
        # part of the row when this scrape captured it.
        exclude = ["photo_data"] if getattr(record, "photo_data", None) is None else []
        row = convert_entity_to_row(record, table, exclude=exclude)
        now = datetime.datetime.now()
        for column_name in _WRITE_TIMESTAMP_COLUMNS:
            if column_name in table.c:
                row[column_name] = now
        return row

    async def _insert_parent(self, table: Table, record: entities.RootEntity) -> None:
        row = self._parent_row(table, record)
        await self._session.execute(insert(table).values(row))

    async def _update_parent(self, table: Table, record: entities.RootEntity) -> None:
        row = self._parent_row(table, record)
        identity_column = table.c[record.identity_field]
        row.pop(record.identity_field)
        await self._session.execute(
            update(table)
            .where(identity_column == record.get_identity())
            .values(row)
        )

    async def _replace_children(self, record: entities.RootEntity) -> None:
        if isinstance(record, entities.RosterRecord):
            await self._replace_roster_charges(record)
        elif isinstance(record, entities.Registrant):
            await self._replace_registrant_children(record)
        elif isinstance(record, entities.OffenderDetail):
            await self._replace_offender_charges(record)

    async def _replace_roster_charges(self, record: entities.RosterRecord) -> None:
        table = schema.JailCharge.__table__
        await self._session.execute(
            delete(table).where(table.c.book_id == record.book_id)
        )
        for charge in record.charges:
            row = convert_entity_to_row(charge, table)
            row["book_id"] = record.book_id
            await self._session.execute(insert(table).values(row))

    async def _replace_offender_charges(self, record: entities.OffenderDetail) -> None:
        table = schema.OffenderCharge.__table__
        await self._session.execute(
            delete(table).where(table.c.offender_number == record.offender_number)
        )
        for charge in record.charges:
            row = convert_entity_to_row(charge, table)
            row["offender_number"] = record.offender_number
            await self._session.execute(insert(table).values(row))

    async def _replace_registrant_children(self, record: entities.Registrant) -> None:
        registrant_id = record.registrant_id
        convictions = schema.SexOffenderConviction.__table__
        victims = schema.SexOffenderConvictionVictim.__table__
        aliases = schema.SexOffenderAlias.__table__
        markings = schema.SexOffenderSkinMarking.__table__

        # Victims reference convictions, so they must go first.
        await self._session.execute(
            delete(victims).where(
                victims.c.conviction_id.in_(
                    select(convictions.c.conviction_id).where(
                        convictions.c.registrant_id == registrant_id
                    )
                )
            )
        )
        await self._session.execute(
            delete(convictions).where(convictions.c.registrant_id == registrant_id)
        )
        await self._session.execute(
            delete(aliases).where(aliases.c.registrant_id == registrant_id)
        )
        await self._session.execute(
            delete(markings).where(markings.c.registrant_id == registrant_id)
        )

        for conviction in record.convictions:
            row = convert_entity_to_row(conviction, convictions)
            row["registrant_id"] = registrant_id
            result = await self._session.execute(insert(convictions).values(row))
            conviction_id = result.inserted_primary_key[0]
            for victim in conviction.victims:
                victim_row = convert_entity_to_row(victim, victims)
                victim_row["conviction_id"] = conviction_id
                await self._session.execute(insert(victims).values(victim_row))

        for alias in record.aliases:
            row = convert_entity_to_row(alias, aliases)
            row["registrant_id"] = registrant_id
            await self._session.execute(insert(aliases).values(row))

        for marking in record.markings:
            await self._session.execute(
                insert(markings).values(
                    registrant_id=registrant_id, marking_value=marking
                )
            )

    async def _upsert_photo(self, record: entities.RootEntity) -> None:
        # Registrant photos are a column of the parent row and were written with
        # it. Roster photos live in their own table.
        if not isinstance(record, entities.RosterRecord) or not record.photo_data:
            return

        table = schema.JailPhoto.__table__
        now = datetime.datetime.now()
        existing = await self._session.execute(
            select(table.c.book_id).where(table.c.book_id == record.book_id)
        )
        if existing.first() is None:
            await self._session.execute(
                insert(table).values(
                    book_id=record.book_id,
                    photo_data=record.photo_data,
                    last_updated=now,
                )
            )
        else:
            await self._session.execute(
                update(table)
                .where(table.c.book_id == record.book_id)
                .values(photo_data=record.photo_data, last_updated=now)
            )
