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
"""Tests for upsert_executor.py."""
import unittest
from typing import Any, List, Sequence

from sqlalchemy import func, select

from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence import entities
from blotter.persistence.database import schema
from blotter.persistence.database.async_session_factory import AsyncSessionFactory
from blotter.persistence.entity_matching.identity_resolver import IdentityResolver
from blotter.persistence.upsert_executor import UpsertCounts, UpsertExecutor
from blotter.tests.utils import fakes


class TestUpsertExecutor(unittest.IsolatedAsyncioTestCase):
    """Tests for writing resolved records."""

    async def asyncSetUp(self) -> None:
        self.database_key = await fakes.use_in_memory_sqlite_database()

    async def asyncTearDown(self) -> None:
        await fakes.teardown_in_memory_sqlite_databases()

    async def _write(
        self, entity_kind: EntityKind, records: Sequence[entities.RootEntity]
    ) -> UpsertCounts:
        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolution = await IdentityResolver(
                session,
                logical_match_fields=("name", "time", "key"),
                lookup_chunk_size=1000,
            ).resolve(entity_kind, records)
            return await UpsertExecutor(session).apply(entity_kind, resolution)

    async def _select(self, statement: Any) -> List[Any]:
        async with AsyncSessionFactory.using_database(
            self.database_key, autocommit=False
        ) as session:
            return list((await session.execute(statement)).all())

    async def _count(self, table: Any) -> int:
        rows = await self._select(select(func.count()).select_from(table))
        return rows[0][0]

    async def test_apply_insertsThenUpdatesRoster(self) -> None:
        counts = await self._write(
            EntityKind.ROSTER_RECORD,
            [entities.RosterRecord(book_id="B1", firstname="JON", age=30)],
        )
        self.assertEqual(UpsertCounts(inserted=1), counts)

        counts = await self._write(
            EntityKind.ROSTER_RECORD,
            [entities.RosterRecord(book_id="B1", firstname="JOHN", age=31)],
        )
        self.assertEqual(UpsertCounts(updated=1), counts)

        rows = await self._select(
            select(
                schema.JailInmate.book_id,
                schema.JailInmate.firstname,
                schema.JailInmate.age,
            )
        )
        self.assertEqual([("B1", "JOHN", 31)], [tuple(r) for r in rows])

    async def test_apply_replacesRosterCharges(self) -> None:
        await self._write(
            EntityKind.ROSTER_RECORD,
            [
                entities.RosterRecord(
                    book_id="B1",
                    charges=[
                        entities.RosterCharge(charge_description="THEFT"),
                        entities.RosterCharge(charge_description="DUI"),
                    ],
                )
            ],
        )
        self.assertEqual(2, await self._count(schema.JailCharge.__table__))

        await self._write(
            EntityKind.ROSTER_RECORD,
            [
                entities.RosterRecord(
                    book_id="B1",
                    charges=[entities.RosterCharge(charge_description="TRESPASS")],
                )
            ],
        )
        rows = await self._select(select(schema.JailCharge.charge_description))
        self.assertEqual([("TRESPASS",)], [tuple(r) for r in rows])

        await self._write(
            EntityKind.ROSTER_RECORD, [entities.RosterRecord(book_id="B1", charges=[])]
        )
        self.assertEqual(0, await self._count(schema.JailCharge.__table__))

    async def test_apply_rosterPhotoIsOnlyReplaced(self) -> None:
        await self._write(
            EntityKind.ROSTER_RECORD,
            [entities.RosterRecord(book_id="B1", photo_data=b"first")],
        )
        await self._write(
            EntityKind.ROSTER_RECORD, [entities.RosterRecord(book_id="B1")]
        )
        rows = await self._select(select(schema.JailPhoto.photo_data))
        self.assertEqual([(b"first",)], [tuple(r) for r in rows])

        await self._write(
            EntityKind.ROSTER_RECORD,
            [entities.RosterRecord(book_id="B1", photo_data=b"second")],
        )
        rows = await self._select(select(schema.JailPhoto.photo_data))
        self.assertEqual([(b"second",)], [tuple(r) for r in rows])

    async def test_apply_replacesRegistrantChildren(self) -> None:
        registrant = entities.Registrant(
            registrant_id="R1",
            convictions=[
                entities.Conviction(
                    conviction_text="FIRST",
                    victims=[
                        entities.Victim(gender="F", age_group="MINOR"),
                        entities.Victim(gender="M", age_group="MINOR"),
                    ],
                ),
                entities.Conviction(conviction_text="SECOND"),
            ],
            aliases=[entities.Alias(last_name="SMITH")],
            markings=["SCAR", "TATTOO"],
        )
        await self._write(EntityKind.REGISTRY_ENTRANT, [registrant])
        self.assertEqual(2, await self._count(schema.SexOffenderConviction.__table__))
        self.assertEqual(
            2, await self._count(schema.SexOffenderConvictionVictim.__table__)
        )
        self.assertEqual(1, await self._count(schema.SexOffenderAlias.__table__))
        self.assertEqual(2, await self._count(schema.SexOffenderSkinMarking.__table__))

        counts = await self._write(
            EntityKind.REGISTRY_ENTRANT,
            [
                entities.Registrant(
                    registrant_id="R1",
                    convictions=[
                        entities.Conviction(
                            conviction_text="THIRD",
                            victims=[entities.Victim(gender="F", age_group="ADULT")],
                        )
                    ],
                )
            ],
        )
        self.assertEqual(UpsertCounts(updated=1), counts)

        convictions = await self._select(
            select(schema.SexOffenderConviction.conviction_text)
        )
        self.assertEqual([("THIRD",)], [tuple(r) for r in convictions])
        victims = await self._select(select(schema.SexOffenderConvictionVictim.age_group))
        self.assertEqual([("ADULT",)], [tuple(r) for r in victims])
        self.assertEqual(0, await self._count(schema.SexOffenderAlias.__table__))
        self.assertEqual(0, await self._count(schema.SexOffenderSkinMarking.__table__))

    async def test_apply_registrantPhotoNotClearedWhenOmitted(self) -> None:
        await self._write(
            EntityKind.REGISTRY_ENTRANT,
            [entities.Registrant(registrant_id="R1", photo_data=b"photo")],
        )
        await self._write(
            EntityKind.REGISTRY_ENTRANT,
            [entities.Registrant(registrant_id="R1", tier="3")],
        )

        rows = await self._select(
            select(
                schema.SexOffenderRegistrant.photo_data,
                schema.SexOffenderRegistrant.tier,
            )
        )
        self.assertEqual([(b"photo", "3")], [tuple(r) for r in rows])

    async def test_apply_cadCallsAreInsertedOnce(self) -> None:
        await self._write(
            EntityKind.CAD_CALL, [entities.CadCall(id="C1", nature="ALARM")]
        )
        counts = await self._write(
            EntityKind.CAD_CALL,
            [
                entities.CadCall(id="C1", nature="CHANGED"),
                entities.CadCall(id="C2"),
            ],
        )
        self.assertEqual(UpsertCounts(inserted=1, skipped=1), counts)

        rows = await self._select(
            select(schema.CadCall.id, schema.CadCall.nature).order_by(schema.CadCall.id)
        )
        self.assertEqual([("C1", "ALARM"), ("C2", None)], [tuple(r) for r in rows])

    async def test_apply_offenderDetailReplacesCharges(self) -> None:
        await self._write(
            EntityKind.OFFENDER_DETAIL,
            [
                entities.OffenderDetail(
                    offender_number="123",
                    location="PEN",
                    charges=[
                        entities.OffenderCharge(offense_class="FELONY"),
                        entities.OffenderCharge(offense_class="MISDEMEANOR"),
                    ],
                )
            ],
        )
        counts = await self._write(
            EntityKind.OFFENDER_DETAIL,
            [
                entities.OffenderDetail(
                    offender_number="123",
                    location="WORK RELEASE",
                    charges=[entities.OffenderCharge(offense_class="FELONY")],
                )
            ],
        )
        self.assertEqual(UpsertCounts(updated=1), counts)
        self.assertEqual(1, await self._count(schema.OffenderCharge.__table__))
        rows = await self._select(select(schema.OffenderDetail.location))
        self.assertEqual([("WORK RELEASE",)], [tuple(r) for r in rows])

    async def test_apply_offenderSummaryIsInsertedOnce(self) -> None:
        await self._write(
            EntityKind.OFFENDER_SUMMARY,
            [entities.OffenderSummary(offender_number="123", name="DOE")],
        )
        counts = await self._write(
            EntityKind.OFFENDER_SUMMARY,
            [entities.OffenderSummary(offender_number="123", name="CHANGED")],
        )
        self.assertEqual(UpsertCounts(skipped=1), counts)
        rows = await self._select(select(schema.OffenderSummary.name))
        self.assertEqual([("DOE",)], [tuple(r) for r in rows])

    async def test_apply_rosterDuplicateWithinBatchUpdatesEarlierInsert(self) -> None:
        counts = await self._write(
            EntityKind.ROSTER_RECORD,
            [
                entities.RosterRecord(book_id="B1", firstname="FIRST"),
                entities.RosterRecord(book_id="B1", firstname="SECOND"),
            ],
        )
        self.assertEqual(UpsertCounts(inserted=1, updated=1), counts)
        rows = await self._select(select(schema.JailInmate.firstname))
        self.assertEqual([("SECOND",)], [tuple(r) for r in rows])
