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
"""Tests for identity_resolver.py."""
import unittest

from sqlalchemy import insert

from blotter.common.constants.entity_kind import EntityKind
from blotter.persistence.database import schema
from blotter.persistence.database.async_session_factory import AsyncSessionFactory
from blotter.persistence.entities import BulletinReport, CadCall, RosterRecord
from blotter.persistence.entity_matching.entity_matching_types import (
    MatchClassification,
)
from blotter.persistence.entity_matching.identity_resolver import IdentityResolver
from blotter.tests.utils import fakes

_MATCH_FIELDS = ("name", "time", "key")


class TestIdentityResolver(unittest.IsolatedAsyncioTestCase):
    """Tests for classifying batches against stored rows."""

    async def asyncSetUp(self) -> None:
        self.database_key = await fakes.use_in_memory_sqlite_database()

    async def asyncTearDown(self) -> None:
        await fakes.teardown_in_memory_sqlite_databases()

    async def _store_bulletin_row(self, **row: str) -> None:
        async with AsyncSessionFactory.using_database(self.database_key) as session:
            await session.execute(
                insert(schema.DailyBulletinArrest.__table__).values(**row)
            )

    async def test_resolve_exactDuplicateOfStoredRow(self) -> None:
        async with AsyncSessionFactory.using_database(self.database_key) as session:
            await session.execute(
                insert(schema.CadCall.__table__).values(id="C1", nature="ALARM")
            )

        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolver = IdentityResolver(
                session, logical_match_fields=_MATCH_FIELDS, lookup_chunk_size=1
            )
            result = await resolver.resolve(
                EntityKind.CAD_CALL,
                [CadCall(id="C1"), CadCall(id="C2"), CadCall(id="C3")],
            )

        self.assertEqual(
            [
                MatchClassification.EXACT_DUPLICATE,
                MatchClassification.NEW,
                MatchClassification.NEW,
            ],
            [c.classification for c in result.classified],
        )
        self.assertEqual(["C2", "C3"], result.new_identities)
        self.assertEqual(1, result.skipped_count)

    async def test_resolve_selfDeduplicatesWithinBatch(self) -> None:
        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolver = IdentityResolver(
                session, logical_match_fields=_MATCH_FIELDS, lookup_chunk_size=1000
            )
            result = await resolver.resolve(
                EntityKind.ROSTER_RECORD,
                [
                    RosterRecord(book_id="B1", firstname="FIRST"),
                    RosterRecord(book_id="B1", firstname="SECOND"),
                ],
            )

        self.assertEqual(["B1"], result.new_identities)
        self.assertEqual(1, len(result.exact_duplicates))
        self.assertEqual("FIRST", result.new[0].firstname)

    async def test_resolve_logicalDuplicateUnderSameSiteId(self) -> None:
        await self._store_bulletin_row(
            row_hash="OLDHASH",
            site_id="S",
            key="AR",
            name="Doe, John",
            time="2/7/2026 14:00",
        )

        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolver = IdentityResolver(
                session, logical_match_fields=_MATCH_FIELDS, lookup_chunk_size=1000
            )
            result = await resolver.resolve(
                EntityKind.BULLETIN_REPORT,
                [
                    BulletinReport(
                        row_hash="NEWHASH",
                        site_id="S",
                        key="ar",
                        name="DOE, JOHN ",
                        time="2/7/2026 14:00",
                    ),
                    # Same content under another site id is a different event.
                    BulletinReport(
                        row_hash="OTHERHASH",
                        site_id="T",
                        key="AR",
                        name="Doe, John",
                        time="2/7/2026 14:00",
                    ),
                ],
            )

        self.assertEqual(
            [MatchClassification.LOGICAL_DUPLICATE, MatchClassification.NEW],
            [c.classification for c in result.classified],
        )
        self.assertEqual(["OTHERHASH"], result.new_identities)

    async def test_resolve_noSiteIdSkipsLogicalMatching(self) -> None:
        await self._store_bulletin_row(
            row_hash="OLDHASH", key="AR", name="Doe, John", time="14:00"
        )

        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolver = IdentityResolver(
                session, logical_match_fields=_MATCH_FIELDS, lookup_chunk_size=1000
            )
            result = await resolver.resolve(
                EntityKind.BULLETIN_REPORT,
                [
                    BulletinReport(
                        row_hash="NEWHASH", key="AR", name="Doe, John", time="14:00"
                    )
                ],
            )

        self.assertEqual(["NEWHASH"], result.new_identities)

    async def test_resolve_logicalDuplicateWithinBatch(self) -> None:
        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolver = IdentityResolver(
                session, logical_match_fields=_MATCH_FIELDS, lookup_chunk_size=1000
            )
            result = await resolver.resolve(
                EntityKind.BULLETIN_REPORT,
                [
                    BulletinReport(row_hash="H1", site_id="S", key="AR", name="A"),
                    BulletinReport(row_hash="H2", site_id="S", key="AR", name="a "),
                ],
            )

        self.assertEqual(["H1"], result.new_identities)
        self.assertEqual(1, len(result.logical_duplicates))

    async def test_resolve_emptyBatch(self) -> None:
        async with AsyncSessionFactory.using_database(self.database_key) as session:
            resolver = IdentityResolver(
                session, logical_match_fields=_MATCH_FIELDS, lookup_chunk_size=1000
            )
            result = await resolver.resolve(EntityKind.CAD_CALL, [])

        self.assertEqual([], result.classified)
